"""Run storage errors.

Every error carries the run id, block name and/or path it concerns so callers
can diagnose a failure without looking inside the store.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


class RunStoreError(Exception):
    """Base for run storage errors."""
    pass


class NotFoundError(RunStoreError):
    """A requested run or block does not exist."""
    pass


class RunNotFoundError(NotFoundError):
    """No directory exists for the requested run id."""

    def __init__(self, run_id: str, path: PathLike | None = None):
        self.run_id = run_id
        self.path = str(path) if path is not None else None
        where = f" (looked in {self.path})" if self.path else ""
        super().__init__(f"Run `{run_id}` does not exist{where}")


class BlockNotFoundError(NotFoundError):
    """The run exists but has no trace directory for the requested block."""

    def __init__(self, run_id: str, block_name: str):
        self.run_id = run_id
        self.block_name = block_name
        super().__init__(f"Block `{block_name}` not found in run `{run_id}`")


class RunAlreadyExistsError(RunStoreError):
    """store() was called for a run whose directory already exists. Runs are write-once."""

    def __init__(self, run_id: str, path: PathLike):
        self.run_id = run_id
        self.path = str(path)
        super().__init__(f"Run `{run_id}` already exists at {self.path}; stored runs are never overwritten")


class MalformedDataError(RunStoreError):
    """Stored JSON does not parse into the expected structure."""

    def __init__(self, path: PathLike, detail: str):
        self.path = str(path)
        self.detail = detail
        super().__init__(f"Malformed data in {self.path}: {detail}")


class StorageIOError(RunStoreError):
    """An underlying filesystem operation failed (permissions, disk space, ...)."""

    def __init__(self, path: PathLike, detail: str):
        self.path = str(path)
        self.detail = detail
        super().__init__(f"I/O failure on {self.path}: {detail}")


class WorkspaceUninitializedError(RunStoreError):
    """The workspace root or its runs directory is missing."""

    def __init__(self, path: PathLike, hint: str = "Run 'pipeline-runs init' to create it."):
        self.path = str(path)
        super().__init__(f"Workspace not initialized: {self.path} is missing. {hint}".strip())


class InvalidBlockNameError(RunStoreError, ValueError):
    """A block name cannot be used as part of a directory name."""

    def __init__(self, block_name: str, reason: str):
        self.block_name = block_name
        super().__init__(f"Invalid block name {block_name!r}: {reason}")
