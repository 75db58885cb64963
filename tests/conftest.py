"""Pytest fixtures and helpers for pipeline-runs tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from pipeline_runs.domain import BlockType, Failure, Run, RunConfig, Skipped, Success
from pipeline_runs.infrastructure.workspace import FileSystemRunStore


@pytest.fixture(autouse=True)
def _reset_config_cache(monkeypatch):
    """Fresh config load per test; no PIPELINE_RUNS_* variables leak in from the environment."""
    from pipeline_runs.config import loader as config_loader
    for var in ("PIPELINE_RUNS_CONFIG_PATH", "PIPELINE_RUNS_WORKSPACE", "PIPELINE_RUNS_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    config_loader.load_config.cache_clear()
    config_loader._env = None
    yield
    config_loader.load_config.cache_clear()
    config_loader._env = None


@pytest.fixture
def workspace(tmp_path) -> Path:
    """Initialised workspace root (contains an empty .runs directory)."""
    (tmp_path / ".runs").mkdir()
    return tmp_path


@pytest.fixture
def store(workspace) -> FileSystemRunStore:
    return FileSystemRunStore(workspace)


def _build_run(start_time: int = 1_700_000_000, app_hash: str = "abc123", blocks: dict | None = None) -> Run:
    """Run with three traced blocks: input, llm (two branches per input), code."""
    config = RunConfig(
        start_time=start_time,
        app_hash=app_hash,
        blocks=blocks if blocks is not None else {"MODEL": {"temperature": 0.7}},
    )
    run = Run.new(config)
    run.add_block(BlockType.INPUT, "INPUT", [[Success({"q": "a"})], [Success({"q": "b"})]])
    run.add_block(
        BlockType.LLM,
        "MODEL",
        [
            [Success("answer a"), Failure("rate limited")],
            [Skipped(), Success("answer b")],
        ],
    )
    run.add_block(BlockType.CODE, "OUTPUT", [[Success(1)], [Success(2)]])
    return run


@pytest.fixture
def make_run():
    """Factory for a populated three-block run: ``make_run(start_time=..., app_hash=...)``."""
    return _build_run
