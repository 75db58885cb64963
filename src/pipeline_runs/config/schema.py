"""Configuration schema for the run store, CLI and HTTP API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RunsConfig(BaseModel):
    """Root config. Every field has a default so an empty file is valid."""
    workspace: Optional[str] = Field(
        None,
        description=(
            "Workspace root holding the .runs directory. When unset, the nearest "
            "ancestor of the current directory that contains .runs is used, else the "
            "current directory."
        ),
    )
    json_indent: Optional[int] = Field(
        None,
        ge=0,
        description="Indent for written JSON files. None (default) writes compact JSON.",
    )
    list_limit: Optional[int] = Field(
        None,
        ge=1,
        description="Default maximum number of runs shown by 'list'. None (default) shows every run.",
    )


DEFAULT_CONFIG = RunsConfig()
