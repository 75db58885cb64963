"""Ports (abstract interfaces) used by the application layer.

Each port is a ``Protocol`` so the query use cases depend only on the *shape*
of the store, not on a concrete implementation.  ``FileSystemRunStore`` is the
default adapter; the application never imports from infrastructure.
"""

from __future__ import annotations

from typing import List, Protocol

from pipeline_runs.domain import BlockTrace, Run, RunConfig


class RunStore(Protocol):
    """Persist runs and read them back by id."""

    def store(self, run: Run) -> None:
        """Write ``run`` once. Raises ``RunAlreadyExistsError`` if its id is taken."""
        ...

    def load_config(self, run_id: str) -> RunConfig: ...

    def load_run(self, run_id: str, *, with_traces: bool = False) -> Run: ...

    def read_block(self, run_id: str, block_name: str) -> BlockTrace:
        """Per-input executions of ``block_name``. Raises ``BlockNotFoundError``."""
        ...

    def read_traces(self, run_id: str) -> List[BlockTrace]: ...

    def run_ids(self) -> List[str]:
        """Ids of every stored run, in no particular order."""
        ...
