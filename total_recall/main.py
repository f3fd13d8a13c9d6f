"""total-recall FastAPI backend: main application entry point."""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from total_recall import __version__, config
from total_recall.observability import initialize as initialize_observability, shutdown as shutdown_observability
from total_recall.routers.projects import projects_router
from total_recall.routers.sessions import scan_router, sessions_router
from total_recall.scanner import ScanError
from total_recall.session_store import SessionStore, session_store

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("total_recall")


async def run_scan_loop(store: SessionStore, delay: float, interval: float) -> None:
    """Initial scan, then optional rescans on a fixed cadence.

    Scans are never interrupted; a failed scan keeps the previous snapshot.
    """
    if delay > 0:
        await asyncio.sleep(delay)
    while True:
        try:
            await store.ascan()
        except ScanError as exc:
            logger.error("Scan failed: %s", exc)
        if interval <= 0:
            return
        await asyncio.sleep(interval)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    logger.info("total-recall backend starting up (projects dir: %s)", session_store.projects_dir)
    initialize_observability(app)

    # Scan in the background so startup does not block on large trees.
    app.state.scan_task = asyncio.create_task(
        run_scan_loop(
            session_store,
            max(0, config.STARTUP_SCAN_DELAY_SECONDS),
            max(0, config.RESCAN_INTERVAL_SECONDS),
        )
    )

    yield

    logger.info("total-recall backend shutting down")
    app.state.scan_task.cancel()
    try:
        await app.state.scan_task
    except asyncio.CancelledError:
        pass
    shutdown_observability(app)


app = FastAPI(
    title="total-recall API",
    description="Browse and resume Claude Code sessions across projects",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        config.FRONTEND_ORIGIN,
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(projects_router)
app.include_router(sessions_router)
app.include_router(scan_router)


@app.get("/api/health")
def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "scanned": session_store.has_scanned,
        "projects": len(session_store.projects()),
        "sessions": session_store.total_session_count(),
    }
