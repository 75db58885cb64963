"""Tests for config loading."""
from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from pipeline_runs.config import DEFAULT_CONFIG, RunsConfig, get_config, load_config
from pipeline_runs.config import loader as config_loader


def test_get_config_default():
    cfg = get_config()
    assert cfg is DEFAULT_CONFIG
    assert cfg.workspace is None
    assert cfg.json_indent is None
    assert cfg.list_limit is None


def test_get_config_from_file(monkeypatch, tmp_path):
    path = tmp_path / "runs.json"
    path.write_text(json.dumps({"workspace": "/data/ws", "json_indent": 2, "list_limit": 5}))
    monkeypatch.setenv("PIPELINE_RUNS_CONFIG_PATH", str(path))

    cfg = get_config()
    assert cfg.workspace == "/data/ws"
    assert cfg.json_indent == 2
    assert cfg.list_limit == 5


def test_missing_config_file_falls_back_to_default(monkeypatch, tmp_path):
    monkeypatch.setenv("PIPELINE_RUNS_CONFIG_PATH", str(tmp_path / "nope.json"))
    assert load_config() is DEFAULT_CONFIG


def test_workspace_env_overrides_file(monkeypatch, tmp_path):
    path = tmp_path / "runs.json"
    path.write_text(json.dumps({"workspace": "/from/file"}))
    monkeypatch.setenv("PIPELINE_RUNS_CONFIG_PATH", str(path))
    monkeypatch.setenv("PIPELINE_RUNS_WORKSPACE", "/from/env")

    assert load_config().workspace == "/from/env"


def test_load_config_is_cached(monkeypatch, tmp_path):
    first = load_config()
    monkeypatch.setenv("PIPELINE_RUNS_WORKSPACE", str(tmp_path))
    assert load_config() is first
    load_config.cache_clear()
    config_loader._env = None
    assert load_config().workspace == str(tmp_path)


def test_invalid_list_limit_rejected():
    with pytest.raises(ValidationError):
        RunsConfig(list_limit=0)


def test_invalid_config_file_raises(monkeypatch, tmp_path):
    path = tmp_path / "runs.json"
    path.write_text(json.dumps({"json_indent": -1}))
    monkeypatch.setenv("PIPELINE_RUNS_CONFIG_PATH", str(path))
    with pytest.raises(ValidationError):
        load_config()
