"""File-system run store. Implements the RunStore port.

Layout under the workspace root::

    .runs/<run_id>/config.json
    .runs/<run_id>/<block_index>-<block_type>_<block_name>/<input_index>.json

Runs are write-once: the run directory is created with a single ``mkdir``
that fails when it already exists, so two ``store()`` calls for the same id
cannot both succeed.  Nothing is rolled back when a later write fails; the
partially written run directory stays on disk and the error names the file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from pipeline_runs.config import (
    CONFIG_FILENAME,
    FILE_ENCODING,
    RUNS_DIRNAME,
    TRACE_FILE_SUFFIX,
    load_config,
)
from pipeline_runs.domain import (
    BlockNotFoundError,
    BlockTrace,
    BlockType,
    MalformedDataError,
    Run,
    RunAlreadyExistsError,
    RunConfig,
    RunNotFoundError,
    StorageIOError,
    WorkspaceUninitializedError,
    block_dirname,
    parse_block_dirname,
)

from .execution_codec import decode_branches, encode_branches
from .workspace_root import resolve_workspace_root

logger = logging.getLogger(__name__)


def _is_plain_name(name: str) -> bool:
    return bool(name) and name not in (".", "..") and "/" not in name and "\\" not in name


class FileSystemRunStore:
    """Stores runs under ``{workspace_root}/.runs`` and reads them back."""

    def __init__(self, workspace_root: str | Path, json_indent: Optional[int] = None):
        self._root = Path(workspace_root)
        self._json_indent = json_indent

    @property
    def root(self) -> Path:
        return self._root

    @property
    def runs_dir(self) -> Path:
        return self._root / RUNS_DIRNAME

    def run_dir(self, run_id: str) -> Path:
        return self.runs_dir / run_id

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def store(self, run: Run) -> None:
        """Persist ``run``: config first, then every block trace in execution order.

        Raises:
            WorkspaceUninitializedError: The workspace root does not exist.
            RunAlreadyExistsError: ``.runs/<run_id>`` already exists; its content is left untouched.
            InvalidBlockNameError: A block name cannot be used in a directory name (nothing is written).
            StorageIOError: A directory or file could not be created or written.
        """
        if not _is_plain_name(run.run_id):
            raise ValueError(f"Run id {run.run_id!r} cannot be used as a directory name")
        if not self._root.is_dir():
            raise WorkspaceUninitializedError(self._root)
        # Validate every block name before touching the disk.
        block_dirs = [block_dirname(i, t.block_type, t.name) for i, t in enumerate(run.traces)]

        self._mkdir(self.runs_dir, exist_ok=True)
        run_dir = self.run_dir(run.run_id)
        logger.debug("Creating directory %s", run_dir)
        try:
            run_dir.mkdir()
        except FileExistsError as e:
            raise RunAlreadyExistsError(run.run_id, run_dir) from e
        except OSError as e:
            raise StorageIOError(run_dir, str(e)) from e

        config_path = run_dir / CONFIG_FILENAME
        logger.debug("Writing run config in %s", config_path)
        self._write_json(config_path, run.config.model_dump(mode="json"))

        for dirname, trace in zip(block_dirs, run.traces):
            block_dir = run_dir / dirname
            logger.debug("Creating directory %s", block_dir)
            self._mkdir(block_dir)
            for input_idx, executions in enumerate(trace.inputs):
                self._write_json(block_dir / f"{input_idx}{TRACE_FILE_SUFFIX}", encode_branches(executions))

        logger.info("Run `%s` for app version `%s` stored", run.run_id, run.config.app_hash)

    def _mkdir(self, path: Path, exist_ok: bool = False) -> None:
        try:
            path.mkdir(exist_ok=exist_ok)
        except OSError as e:
            raise StorageIOError(path, str(e)) from e

    def _write_json(self, path: Path, data: Any) -> None:
        try:
            text = json.dumps(data, indent=self._json_indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise MalformedDataError(path, f"value is not JSON serializable: {e}") from e
        try:
            with path.open("x", encoding=FILE_ENCODING) as f:
                f.write(text)
                f.flush()
        except OSError as e:
            raise StorageIOError(path, str(e)) from e

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def _require_runs_dir(self) -> Path:
        if not self._root.is_dir():
            raise WorkspaceUninitializedError(self._root)
        if not self.runs_dir.is_dir():
            raise WorkspaceUninitializedError(self.runs_dir)
        return self.runs_dir

    def _existing_run_dir(self, run_id: str) -> Path:
        runs_dir = self._require_runs_dir()
        run_dir = runs_dir / run_id
        if not _is_plain_name(run_id) or not run_dir.is_dir():
            raise RunNotFoundError(run_id, runs_dir)
        return run_dir

    def _read_text(self, path: Path) -> str:
        try:
            return path.read_text(encoding=FILE_ENCODING)
        except OSError as e:
            raise StorageIOError(path, str(e)) from e

    def _list_dir(self, path: Path) -> List[Path]:
        try:
            return list(path.iterdir())
        except OSError as e:
            raise StorageIOError(path, str(e)) from e

    def run_ids(self) -> List[str]:
        runs_dir = self._require_runs_dir()
        return sorted(p.name for p in self._list_dir(runs_dir) if p.is_dir())

    def load_config(self, run_id: str) -> RunConfig:
        """Read ``.runs/<run_id>/config.json``.

        Raises:
            WorkspaceUninitializedError, RunNotFoundError, MalformedDataError, StorageIOError
        """
        config_path = self._existing_run_dir(run_id) / CONFIG_FILENAME
        raw = self._read_text(config_path)
        try:
            return RunConfig.model_validate_json(raw)
        except ValidationError as e:
            raise MalformedDataError(config_path, f"not a valid run config: {e}") from e

    def load_run(self, run_id: str, *, with_traces: bool = False) -> Run:
        """The run's config, plus its block traces when ``with_traces`` is set.

        By default traces are left empty; use :meth:`read_block` to read one
        block lazily.
        """
        config = self.load_config(run_id)
        traces = self.read_traces(run_id) if with_traces else []
        return Run(run_id, config, traces)

    def _block_entries(self, run_dir: Path) -> List[Tuple[int, BlockType, str, Path]]:
        entries: List[Tuple[int, BlockType, str, Path]] = []
        for path in self._list_dir(run_dir):
            if not path.is_dir():
                continue
            try:
                index, block_type, name = parse_block_dirname(path.name)
            except ValueError as e:
                raise MalformedDataError(path, f"not a block trace directory: {e}") from e
            entries.append((index, block_type, name, path))
        entries.sort(key=lambda entry: entry[0])
        return entries

    def _read_block_dir(self, index: int, block_type: BlockType, name: str, block_dir: Path) -> BlockTrace:
        files: List[Tuple[int, Path]] = []
        for path in self._list_dir(block_dir):
            if not path.is_file() or path.suffix != TRACE_FILE_SUFFIX:
                continue
            if not path.stem.isdecimal():
                raise MalformedDataError(path, "trace file name is not an input index")
            files.append((int(path.stem), path))
        files.sort(key=lambda f: f[0])
        if [i for i, _ in files] != list(range(len(files))):
            raise MalformedDataError(block_dir, "input indices are not contiguous from 0")
        inputs = [decode_branches(self._read_text(path), path) for _, path in files]
        return BlockTrace(index=index, block_type=block_type, name=name, inputs=inputs)

    def read_traces(self, run_id: str) -> List[BlockTrace]:
        """Every stored block trace of the run, in execution order."""
        run_dir = self._existing_run_dir(run_id)
        return [self._read_block_dir(*entry) for entry in self._block_entries(run_dir)]

    def read_block(self, run_id: str, block_name: str) -> BlockTrace:
        """Per-input executions of ``block_name``, matched on the name part of the directory.

        When the name occurs more than once in the pipeline, the earliest
        block (lowest index) is returned.
        """
        run_dir = self._existing_run_dir(run_id)
        for entry in self._block_entries(run_dir):
            if entry[2] == block_name:
                return self._read_block_dir(*entry)
        raise BlockNotFoundError(run_id, block_name)


def open_run_store(workspace: str | Path | None = None) -> FileSystemRunStore:
    """Build a store from config: resolved workspace root and JSON formatting."""
    config = load_config()
    root = resolve_workspace_root(workspace, config)
    return FileSystemRunStore(root, json_indent=config.json_indent)
