"""HTTP API: read-only FastAPI app over the run store."""

from __future__ import annotations

import asyncio
import hmac
import logging
import os
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from pipeline_runs.application.queries import inspect_block, list_runs
from pipeline_runs.domain import (
    MalformedDataError,
    NotFoundError,
    RunStoreError,
    WorkspaceUninitializedError,
)
from pipeline_runs.infrastructure.workspace import FileSystemRunStore, open_run_store
from pipeline_runs.infrastructure.workspace.execution_codec import encode_branches

logger = logging.getLogger(__name__)

app = FastAPI(title="pipeline-runs")


@app.middleware("http")
async def _auth_middleware(request: Request, call_next):
    """Optional bearer-token authentication.

    Active only when ``PIPELINE_RUNS_API_KEY`` is set.  When active, every
    endpoint except ``GET /health`` requires ``Authorization: Bearer <key>``.
    """
    api_key = os.environ.get("PIPELINE_RUNS_API_KEY", "").strip()
    if api_key and request.url.path != "/health":
        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return JSONResponse(
                status_code=401,
                content={"error": "Unauthorized", "detail": "Authorization: Bearer <key> header required"},
                headers={"WWW-Authenticate": "Bearer"},
            )
        token = auth_header[len("Bearer "):]
        if not hmac.compare_digest(token.encode(), api_key.encode()):
            return JSONResponse(
                status_code=401,
                content={"error": "Unauthorized", "detail": "Invalid API key"},
                headers={"WWW-Authenticate": "Bearer"},
            )
    return await call_next(request)


def _workspace_root() -> Optional[str]:
    return os.environ.get("PIPELINE_RUNS_WORKSPACE") or None


def _http_error(e: RunStoreError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, WorkspaceUninitializedError):
        return HTTPException(status_code=503, detail=str(e))
    if isinstance(e, MalformedDataError):
        logger.error("Malformed run data: %s", e)
    return HTTPException(status_code=500, detail=str(e))


async def _store() -> FileSystemRunStore:
    try:
        return await asyncio.to_thread(open_run_store, _workspace_root())
    except RunStoreError as e:
        raise _http_error(e)


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/runs")
async def runs(limit: Optional[int] = Query(None, ge=1)):
    store = await _store()
    try:
        entries = await asyncio.to_thread(list_runs, store, limit)
    except RunStoreError as e:
        raise _http_error(e)
    return {
        "runs": [
            {"run_id": run_id, **config.model_dump(mode="json")}
            for run_id, config in entries
        ]
    }


@app.get("/runs/{run_id}")
async def run_detail(run_id: str):
    """Config of one run plus the identity and input count of every stored block."""
    store = await _store()
    try:
        run = await asyncio.to_thread(store.load_run, run_id, with_traces=True)
    except RunStoreError as e:
        raise _http_error(e)
    return {
        "run_id": run.run_id,
        "config": run.config.model_dump(mode="json"),
        "blocks": [
            {
                "index": t.index,
                "block_type": t.block_type.value,
                "name": t.name,
                "inputs": len(t.inputs),
            }
            for t in run.traces
        ],
    }


@app.get("/runs/{run_id}/blocks/{block_name}")
async def run_block(run_id: str, block_name: str):
    logger.info("GET block run_id=%s block=%s", run_id, block_name)
    store = await _store()
    try:
        trace = await asyncio.to_thread(inspect_block, store, run_id, block_name)
    except RunStoreError as e:
        raise _http_error(e)
    return {
        "run_id": run_id,
        "index": trace.index,
        "block_type": trace.block_type.value,
        "name": trace.name,
        "inputs": [encode_branches(branches) for branches in trace.inputs],
    }
