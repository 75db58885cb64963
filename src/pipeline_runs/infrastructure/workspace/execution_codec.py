"""JSON wire form of BlockExecution.

``Success`` is written as ``{"value": v}``, ``Failure`` as ``{"error": "msg"}``
and ``Skipped`` as ``{}``.  Reading tolerates explicit nulls, so a record with
``"value": null`` and ``"error": null`` decodes as ``Skipped``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from pipeline_runs.domain import BlockExecution, Failure, MalformedDataError, Skipped, Success


class _ExecutionRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")
    value: Any = None
    error: Optional[str] = None


_BRANCHES = TypeAdapter(List[_ExecutionRecord])


def encode_execution(execution: BlockExecution) -> Dict[str, Any]:
    if isinstance(execution, Success):
        return {"value": execution.value}
    if isinstance(execution, Failure):
        return {"error": execution.error}
    if isinstance(execution, Skipped):
        return {}
    raise TypeError(f"not a BlockExecution: {execution!r}")


def encode_branches(executions: List[BlockExecution]) -> List[Dict[str, Any]]:
    """One input row: the executions of every map branch, in branch order."""
    return [encode_execution(e) for e in executions]


def _decode_record(record: _ExecutionRecord, path: Path, branch: int) -> BlockExecution:
    if record.value is not None and record.error is not None:
        raise MalformedDataError(path, f"branch {branch} has both a value and an error")
    if record.error is not None:
        return Failure(record.error)
    if record.value is not None:
        return Success(record.value)
    return Skipped()


def decode_branches(raw: str, path: Path) -> List[BlockExecution]:
    """Parse one ``<input_index>.json`` file. Raises ``MalformedDataError``."""
    try:
        records = _BRANCHES.validate_json(raw)
    except ValidationError as e:
        raise MalformedDataError(path, f"expected a JSON array of block executions ({e.error_count()} errors): {e}") from e
    return [_decode_record(r, path, i) for i, r in enumerate(records)]
