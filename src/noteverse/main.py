# NoteVerse application: wiring of routers, middleware and startup/shutdown
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from . import __version__
from .api import (
    auth_router,
    catalog_router,
    files_router,
    health_router,
    notes_router,
    users_router,
)
from .config import get_settings
from .core.exceptions import register_exception_handlers
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .database import create_tables, dispose_engine

settings = get_settings()
setup_logging(settings)
logger = get_logger("main")

ROUTERS = (auth_router, notes_router, files_router, users_router, catalog_router, health_router)


async def _connect_blacklist() -> None:
    # Redis only backs logout, so the API still serves requests without it
    try:
        await get_redis_client().connect()
    except Exception as e:
        logger.warning("Redis unavailable, logout will not revoke tokens", extra={"error": str(e)})
    else:
        logger.info("Redis connection established")


async def _prepare_database() -> None:
    if os.getenv("NOTEVERSE_SKIP_LIFESPAN_DB") == "1":
        logger.info("Skipping table creation (NOTEVERSE_SKIP_LIFESPAN_DB=1)")
        return
    try:
        await create_tables()
    except Exception as e:
        logger.error("Could not create database tables", exc_info=e)
        raise
    logger.info("Database tables verified")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting NoteVerse",
        extra={"version": __version__, "environment": settings.environment, "debug": settings.debug},
    )
    await _connect_blacklist()
    await _prepare_database()
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    yield

    logger.info("Stopping NoteVerse")
    await get_redis_client().disconnect()
    await dispose_engine()


app = FastAPI(
    title=settings.app_name,
    description="Academic notes by branch, year and subject, with PDF attachments, likes and privacy",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID", "Content-Disposition"],
)
register_exception_handlers(app)

for router in ROUTERS:
    app.include_router(router, prefix="/api")

# stored attachments are public by URL, like the notes that reference them
app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")


@app.get("/", include_in_schema=False)
async def root():
    return {"name": settings.app_name, "version": __version__, "docs": "/docs"}


@app.get("/api/", include_in_schema=False)
async def api_root():
    """Index of the API sections."""
    return {
        "version": __version__,
        "sections": {router.prefix.strip("/"): f"/api{router.prefix}/" for router in ROUTERS},
    }


@app.get("/health", include_in_schema=False)
async def basic_health():
    """Liveness probe, no dependencies checked."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("noteverse.main:app", host=settings.host, port=settings.port, reload=settings.reload)
