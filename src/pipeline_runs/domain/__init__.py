"""Domain layer: run records and errors. No I/O."""

from .models import (
    BlockExecution,
    BlockTrace,
    BlockType,
    Failure,
    InputExecutions,
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
    validate_block_name,
)
from .errors import (
    BlockNotFoundError,
    InvalidBlockNameError,
    MalformedDataError,
    NotFoundError,
    RunAlreadyExistsError,
    RunNotFoundError,
    RunStoreError,
    StorageIOError,
    WorkspaceUninitializedError,
)

__all__ = [
    "BlockExecution",
    "BlockTrace",
    "BlockType",
    "Failure",
    "InputExecutions",
    "Run",
    "RunConfig",
    "Skipped",
    "Success",
    "block_dirname",
    "is_failure",
    "is_skipped",
    "is_success",
    "new_run_id",
    "parse_block_dirname",
    "validate_block_name",
    "BlockNotFoundError",
    "InvalidBlockNameError",
    "MalformedDataError",
    "NotFoundError",
    "RunAlreadyExistsError",
    "RunNotFoundError",
    "RunStoreError",
    "StorageIOError",
    "WorkspaceUninitializedError",
]
