"""Domain models: RunConfig, BlockExecution variants, BlockTrace, Run. Pure data, no I/O."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidBlockNameError


class RunConfig(BaseModel):
    """Launch parameters of a run: start time, app version hash, per-block configuration.

    Stored verbatim as ``config.json`` when the run is persisted and only ever
    read back by run id afterwards.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    start_time: int = Field(..., ge=0, description="Epoch seconds at which the run was launched.")
    app_hash: str = Field(..., description="Opaque identifier of the app definition version executed.")
    blocks: Dict[str, Any] = Field(default_factory=dict, description="Block name -> block configuration.")

    def config_for_block(self, name: str) -> Optional[Any]:
        """Configuration for block ``name``, or ``None`` when the block is unconfigured."""
        return self.blocks.get(name)


# ---------------------------------------------------------------------------
# BlockExecution: exactly one of success value, failure message, or skipped
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Success:
    """The block produced ``value`` (any non-null JSON value) for this input/branch."""
    value: Any

    def __post_init__(self) -> None:
        if self.value is None:
            raise ValueError("Success value must not be None; use Skipped() for a block that produced nothing")


@dataclass(frozen=True)
class Failure:
    """The block failed with ``error`` for this input/branch."""
    error: str


@dataclass(frozen=True)
class Skipped:
    """The block was skipped by conditional logic for this input/branch."""


BlockExecution = Union[Success, Failure, Skipped]


def is_success(execution: BlockExecution) -> bool:
    return isinstance(execution, Success)


def is_failure(execution: BlockExecution) -> bool:
    return isinstance(execution, Failure)


def is_skipped(execution: BlockExecution) -> bool:
    return isinstance(execution, Skipped)


class BlockType(str, Enum):
    """Kinds of blocks the engine executes.

    Values never contain ``_`` so a trace directory name
    ``<index>-<type>_<name>`` splits unambiguously on its first underscore.
    """

    INPUT = "input"
    DATA = "data"
    CODE = "code"
    LLM = "llm"
    CHAT = "chat"
    MAP = "map"
    REDUCE = "reduce"
    WHILE = "while"
    END = "end"
    SEARCH = "search"
    CURL = "curl"
    BROWSER = "browser"
    DATABASE = "database"

    def __str__(self) -> str:
        return self.value


# Outer list: inputs (index = input row). Inner list: map branches for that input.
InputExecutions = List[List[BlockExecution]]


def validate_block_name(name: str) -> str:
    """Return ``name`` if it can be embedded in a directory name; raise otherwise."""
    if not name:
        raise InvalidBlockNameError(name, "must not be empty")
    if name in (".", ".."):
        raise InvalidBlockNameError(name, "must not be a relative path component")
    if "/" in name or "\\" in name or "\x00" in name:
        raise InvalidBlockNameError(name, "must not contain path separators or NUL")
    return name


def block_dirname(index: int, block_type: BlockType | str, name: str) -> str:
    """Directory name for the block at position ``index``: ``<index>-<type>_<name>``.

    The index prefix keeps directories distinct when block names repeat and
    recovers execution order by numeric sort.
    """
    return f"{index}-{BlockType(block_type).value}_{validate_block_name(name)}"


def parse_block_dirname(dirname: str) -> Tuple[int, BlockType, str]:
    """Inverse of :func:`block_dirname`. Raises ``ValueError`` when ``dirname`` is not a block directory."""
    index_part, sep, rest = dirname.partition("-")
    if not sep or not index_part.isdecimal():
        raise ValueError(f"no numeric index prefix in {dirname!r}")
    type_part, sep, name = rest.partition("_")
    if not sep or not name:
        raise ValueError(f"no '<type>_<name>' part in {dirname!r}")
    return int(index_part), BlockType(type_part), name


@dataclass
class BlockTrace:
    """Executions of one block across all inputs of a run.

    ``index`` is the block's position in execution order. ``inputs[i][j]`` is
    the execution for input row ``i`` on map branch ``j``.
    """
    index: int
    block_type: BlockType
    name: str
    inputs: InputExecutions = field(default_factory=list)

    @property
    def identity(self) -> Tuple[BlockType, str]:
        return (self.block_type, self.name)

    @property
    def dirname(self) -> str:
        return block_dirname(self.index, self.block_type, self.name)


def new_run_id() -> str:
    """Fresh run id: UTC timestamp plus a random suffix (e.g. ``20260101-120000-9f2c0a1b3d4e5f60``)."""
    ts = time.strftime("%Y%m%d-%H%M%S", time.gmtime())
    return ts + "-" + secrets.token_hex(8)


class Run:
    """One recorded execution of an app: its config plus the ordered block trace.

    ``traces`` follows execution order. If execution stopped early, the blocks
    never reached are absent; a block skipped for an input holds ``Skipped()``
    entries for that input.
    """

    def __init__(self, run_id: str, config: RunConfig, traces: Optional[List[BlockTrace]] = None):
        self._run_id = run_id
        self._config = config
        self.traces: List[BlockTrace] = list(traces) if traces else []

    @classmethod
    def new(cls, config: RunConfig) -> "Run":
        return cls(new_run_id(), config)

    @property
    def run_id(self) -> str:
        return self._run_id

    @property
    def config(self) -> RunConfig:
        return self._config

    def add_block(
        self,
        block_type: BlockType | str,
        name: str,
        inputs: InputExecutions,
    ) -> BlockTrace:
        """Append the executions of the next block in execution order."""
        trace = BlockTrace(
            index=len(self.traces),
            block_type=BlockType(block_type),
            name=validate_block_name(name),
            inputs=[list(branches) for branches in inputs],
        )
        self.traces.append(trace)
        return trace

    def block_trace(self, name: str) -> Optional[BlockTrace]:
        """First trace entry for block ``name`` (lowest index), or ``None``."""
        for trace in self.traces:
            if trace.name == name:
                return trace
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Run):
            return NotImplemented
        return (
            self._run_id == other._run_id
            and self._config == other._config
            and self.traces == other.traces
        )

    def __repr__(self) -> str:
        return f"Run(run_id={self._run_id!r}, app_hash={self._config.app_hash!r}, blocks={len(self.traces)})"
