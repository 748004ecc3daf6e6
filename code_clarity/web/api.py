"""FastAPI routes for the watch server."""

from __future__ import annotations

import asyncio
import json
from typing import Any, AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from code_clarity.web.state import GraphSnapshot, WatchSession

router = APIRouter(prefix="/api")

KEEPALIVE_SECONDS = 15.0


# --- Response models ---

class SnapshotResponse(BaseModel):
    version: int
    generated_at: str
    payload: dict[str, Any]


class HealthResponse(BaseModel):
    status: str
    repo: str
    version: int | None = None
    subscribers: int = 0
    started_at: str
    last_error: str | None = None


def get_session(request: Request) -> WatchSession:
    return request.app.state.session


def format_sse(snapshot: GraphSnapshot) -> str:
    data = json.dumps(snapshot.to_dict(), ensure_ascii=False)
    return f"id: {snapshot.version}\nevent: graph\ndata: {data}\n\n"


# --- Endpoints ---

@router.get("/graph", response_model=SnapshotResponse)
async def latest_graph(session: WatchSession = Depends(get_session)):
    snapshot = session.latest
    if snapshot is None:
        raise HTTPException(503, "Graph is not built yet")
    return snapshot.to_dict()


@router.get("/health", response_model=HealthResponse)
async def health(session: WatchSession = Depends(get_session)):
    snapshot = session.latest
    return HealthResponse(
        status="ok" if snapshot is not None else "starting",
        repo=str(session.config.repo_path),
        version=snapshot.version if snapshot is not None else None,
        subscribers=session.broker.subscriber_count,
        started_at=session.started_at,
        last_error=session.last_error,
    )


async def snapshot_events(request: Request, session: WatchSession) -> AsyncGenerator[str, None]:
    """Stream every published snapshot, starting with the current one."""
    queue = session.broker.subscribe()
    try:
        while True:
            try:
                snapshot = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
            except asyncio.TimeoutError:
                if await request.is_disconnected():
                    break
                yield ": keepalive\n\n"
                continue
            yield format_sse(snapshot)
    finally:
        session.broker.unsubscribe(queue)


@router.get("/events")
async def events(request: Request, session: WatchSession = Depends(get_session)):
    return StreamingResponse(
        snapshot_events(request, session),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
