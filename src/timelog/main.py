"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from timelog import __version__
from timelog.api.summary import router as summary_router
from timelog.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Log resolved configuration at startup for debugging."""
    s = get_settings()
    logger.info(
        "TimeLog starting — vault_path=%s, note_folder=%s, hierarchy_column=%s",
        s.vault_path,
        s.note_folder,
        s.hierarchy_column,
    )
    if not s.vault_path or not s.vault_path.exists():
        logger.error("VAULT PATH NOT CONFIGURED OR MISSING — APIs will return 503 errors")
    yield


app = FastAPI(
    title="TimeLog",
    description="Drillable time-allocation summaries for Obsidian daily notes",
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)

if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
app.add_middleware(GZipMiddleware, minimum_size=500)

app.include_router(summary_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Return project information."""
    return {
        "name": "TimeLog",
        "version": __version__,
        "description": "Drillable time-allocation summaries for Obsidian daily notes",
    }


@app.get("/health")
@app.get("/api/v1/health")
async def health() -> dict[str, Any]:
    """Health check endpoint with vault and note folder status."""
    s = get_settings()

    checks: dict[str, Any] = {"status": "ok"}

    if not s.vault_path or not s.vault_path.exists():
        checks["status"] = "error"
        checks["vault"] = "not configured or missing"
        return checks

    checks["vault"] = "ok"
    note_dir = s.vault_path / s.note_folder
    if note_dir.is_dir():
        checks["note_folder"] = "ok"
        checks["note_count"] = sum(1 for _ in note_dir.glob("**/*.md"))
    else:
        checks["status"] = "warning"
        checks["note_folder"] = "missing"
        checks["note_count"] = 0

    return checks
