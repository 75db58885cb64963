"""Read-side queries over stored runs: list and inspect."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from pipeline_runs.domain import BlockTrace, Run, RunConfig

from .ports import RunStore

logger = logging.getLogger(__name__)


def list_runs(store: RunStore, limit: Optional[int] = None) -> List[Tuple[str, RunConfig]]:
    """Every stored run with its config, most recent ``start_time`` first.

    Ties on ``start_time`` are ordered by run id ascending.  A run whose config
    cannot be loaded aborts the whole listing with that run's error.
    """
    runs: List[Tuple[str, RunConfig]] = []
    for run_id in store.run_ids():
        runs.append((run_id, store.load_config(run_id)))

    runs.sort(key=lambda item: item[0])
    runs.sort(key=lambda item: item[1].start_time, reverse=True)
    logger.debug("Listed %d runs", len(runs))
    if limit is not None:
        return runs[:limit]
    return runs


def show_run(store: RunStore, run_id: str) -> Run:
    """The run with all of its block traces rehydrated."""
    return store.load_run(run_id, with_traces=True)


def inspect_block(store: RunStore, run_id: str, block_name: str) -> BlockTrace:
    """Per-input executions of ``block_name`` in run ``run_id``.

    The run is loaded first so a missing run reports ``RunNotFoundError``
    rather than ``BlockNotFoundError``.
    """
    run = store.load_run(run_id)
    return store.read_block(run.run_id, block_name)
