"""Tests for domain models: RunConfig, BlockExecution variants, block directory names, Run."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from pipeline_runs.domain import (
    BlockTrace,
    BlockType,
    Failure,
    InvalidBlockNameError,
    Run,
    RunConfig,
    Skipped,
    Success,
    block_dirname,
    is_failure,
    is_skipped,
    is_success,
    new_run_id,
    parse_block_dirname,
)


# ---------------------------------------------------------------------------
# RunConfig
# ---------------------------------------------------------------------------

def test_config_for_block_returns_configured_value():
    cfg = RunConfig(start_time=10, app_hash="h", blocks={"MODEL": {"provider": "openai"}})
    assert cfg.config_for_block("MODEL") == {"provider": "openai"}


def test_config_for_block_unknown_name_is_none():
    cfg = RunConfig(start_time=10, app_hash="h", blocks={"MODEL": 1})
    assert cfg.config_for_block("OTHER") is None
    assert cfg.config_for_block("model") is None  # exact-name lookup


def test_run_config_is_frozen():
    cfg = RunConfig(start_time=10, app_hash="h")
    with pytest.raises(ValidationError):
        cfg.app_hash = "other"


def test_run_config_rejects_negative_start_time():
    with pytest.raises(ValidationError):
        RunConfig(start_time=-1, app_hash="h")


def test_run_config_equality_is_by_value():
    a = RunConfig(start_time=5, app_hash="h", blocks={"A": [1, 2]})
    b = RunConfig(start_time=5, app_hash="h", blocks={"A": [1, 2]})
    assert a == b
    assert a != RunConfig(start_time=6, app_hash="h", blocks={"A": [1, 2]})


def test_run_config_json_shape():
    cfg = RunConfig(start_time=42, app_hash="h", blocks={"A": None})
    assert cfg.model_dump(mode="json") == {"start_time": 42, "app_hash": "h", "blocks": {"A": None}}


# ---------------------------------------------------------------------------
# BlockExecution
# ---------------------------------------------------------------------------

def test_execution_predicates():
    assert is_success(Success(1)) and not is_failure(Success(1)) and not is_skipped(Success(1))
    assert is_failure(Failure("boom"))
    assert is_skipped(Skipped())


def test_success_rejects_none_value():
    with pytest.raises(ValueError):
        Success(None)


def test_skipped_instances_are_equal():
    assert Skipped() == Skipped()
    assert Success([1]) == Success([1])
    assert Failure("x") != Failure("y")


# ---------------------------------------------------------------------------
# Block directory names
# ---------------------------------------------------------------------------

def test_block_dirname_format():
    assert block_dirname(0, BlockType.INPUT, "INPUT") == "0-input_INPUT"
    assert block_dirname(12, "llm", "MODEL") == "12-llm_MODEL"


def test_parse_block_dirname_keeps_underscores_and_dashes_in_name():
    assert parse_block_dirname("3-code_my_block-v2") == (3, BlockType.CODE, "my_block-v2")


@pytest.mark.parametrize("dirname", ["input_X", "x-input_X", "\u00b2-input_X", "1-input", "1-input_", "1-unknown_X"])
def test_parse_block_dirname_rejects_foreign_names(dirname):
    with pytest.raises(ValueError):
        parse_block_dirname(dirname)


@pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\\b"])
def test_block_dirname_rejects_unsafe_names(name):
    with pytest.raises(InvalidBlockNameError):
        block_dirname(0, BlockType.CODE, name)


def test_invalid_block_name_error_is_value_error():
    assert issubclass(InvalidBlockNameError, ValueError)


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------

def test_new_run_ids_are_unique():
    ids = {new_run_id() for _ in range(200)}
    assert len(ids) == 200


def test_run_new_assigns_distinct_ids():
    cfg = RunConfig(start_time=1, app_hash="h")
    assert Run.new(cfg).run_id != Run.new(cfg).run_id


def test_run_new_starts_with_empty_traces():
    cfg = RunConfig(start_time=1, app_hash="h")
    run = Run.new(cfg)
    assert run.traces == []
    assert run.config is cfg


def test_run_id_cannot_be_reassigned():
    run = Run.new(RunConfig(start_time=1, app_hash="h"))
    with pytest.raises(AttributeError):
        run.run_id = "other"


def test_add_block_assigns_positions():
    run = Run.new(RunConfig(start_time=1, app_hash="h"))
    first = run.add_block(BlockType.INPUT, "INPUT", [[Success(1)]])
    second = run.add_block("code", "INPUT", [[Skipped()]])
    assert (first.index, second.index) == (0, 1)
    assert second.block_type is BlockType.CODE
    assert second.identity == (BlockType.CODE, "INPUT")
    assert second.dirname == "1-code_INPUT"


def test_add_block_rejects_unknown_type():
    run = Run.new(RunConfig(start_time=1, app_hash="h"))
    with pytest.raises(ValueError):
        run.add_block("teleport", "X", [])


def test_block_trace_returns_first_match():
    run = Run.new(RunConfig(start_time=1, app_hash="h"))
    run.add_block(BlockType.CODE, "DUP", [[Success("first")]])
    run.add_block(BlockType.CODE, "DUP", [[Success("second")]])
    trace = run.block_trace("DUP")
    assert isinstance(trace, BlockTrace)
    assert trace.inputs == [[Success("first")]]
    assert run.block_trace("MISSING") is None
