"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, Response
from fastapi.staticfiles import StaticFiles

from code_clarity.web.api import router
from code_clarity.web.state import WatchSession

STATIC_DIR = Path(__file__).parent / "static"


def create_app(session: WatchSession, start_watcher: bool = True) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        loop = None
        if start_watcher:
            from code_clarity.web.watcher import RebuildLoop
            loop = RebuildLoop(session)
            loop.start()
        yield
        if loop is not None:
            await loop.stop()

    app = FastAPI(title="code-clarity", version="0.1.0", lifespan=lifespan)
    app.state.session = session

    @app.middleware("http")
    async def no_cache_static(request: Request, call_next):
        response: Response = await call_next(request)
        if request.url.path.endswith((".js", ".css", ".html")) or request.url.path == "/":
            response.headers["Cache-Control"] = "no-cache"
        return response

    app.include_router(router)

    # Static files (must be last: catches all unmatched routes)
    app.mount("/", StaticFiles(directory=str(STATIC_DIR), html=True), name="static")
    return app
