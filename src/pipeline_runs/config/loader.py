"""Load config from PIPELINE_RUNS_CONFIG_PATH or return default.

``load_config()`` is memoised with ``functools.lru_cache`` so the file is read
and parsed at most once per process.  Call ``load_config.cache_clear()`` to
force a re-read (useful in tests and when the environment changes at runtime).
"""

from __future__ import annotations

import functools
import json
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .schema import DEFAULT_CONFIG, RunsConfig


class _Env(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PIPELINE_RUNS_", extra="ignore")
    config_path: Optional[str] = None
    workspace: Optional[str] = None


_env: Optional[_Env] = None


def _get_env() -> _Env:
    global _env
    if _env is None:
        _env = _Env()
    return _env


@functools.lru_cache(maxsize=1)
def load_config() -> RunsConfig:
    """Load config from PIPELINE_RUNS_CONFIG_PATH if set; else DEFAULT_CONFIG.

    PIPELINE_RUNS_WORKSPACE, when set, overrides the file's ``workspace``.
    Result is cached for the lifetime of the process.
    """
    env = _get_env()
    config = DEFAULT_CONFIG
    path = env.config_path
    if path and path.strip():
        p = Path(path).expanduser().resolve()
        if p.is_file():
            data = json.loads(p.read_text(encoding="utf-8"))
            config = RunsConfig.model_validate(data)
    if env.workspace and env.workspace.strip():
        config = config.model_copy(update={"workspace": env.workspace.strip()})
    return config
