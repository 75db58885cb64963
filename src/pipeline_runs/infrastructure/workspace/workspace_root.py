"""Resolve the workspace root and initialise its runs directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pipeline_runs.config import RUNS_DIRNAME, RunsConfig, load_config
from pipeline_runs.domain import StorageIOError, WorkspaceUninitializedError

logger = logging.getLogger(__name__)


def find_workspace_root(start: str | Path) -> Optional[Path]:
    """Nearest directory at or above ``start`` that contains a runs directory."""
    current = Path(start).expanduser().resolve()
    for candidate in (current, *current.parents):
        if (candidate / RUNS_DIRNAME).is_dir():
            return candidate
    return None


def resolve_workspace_root(
    explicit: str | Path | None = None,
    config: Optional[RunsConfig] = None,
) -> Path:
    """Pick the workspace root: ``explicit``, else the configured workspace,
    else the nearest ancestor of the cwd holding a runs directory, else the cwd.

    Raises:
        WorkspaceUninitializedError: An explicit or configured root is not a directory.
    """
    if config is None:
        config = load_config()
    chosen = explicit if explicit else config.workspace
    if chosen:
        root = Path(chosen).expanduser().resolve()
        if not root.is_dir():
            raise WorkspaceUninitializedError(root, hint="Create the directory or pass an existing --workspace.")
        return root
    found = find_workspace_root(Path.cwd())
    if found is not None:
        logger.debug("Found workspace root %s", found)
        return found
    return Path.cwd().resolve()


def init_workspace(root: str | Path) -> Path:
    """Create ``<root>/.runs`` (idempotent). Returns the runs directory."""
    root_path = Path(root).expanduser().resolve()
    if not root_path.is_dir():
        raise WorkspaceUninitializedError(root_path, hint="Create the directory first.")
    runs_dir = root_path / RUNS_DIRNAME
    try:
        runs_dir.mkdir(exist_ok=True)
    except OSError as e:
        raise StorageIOError(runs_dir, str(e)) from e
    logger.info("Initialized runs directory %s", runs_dir)
    return runs_dir
