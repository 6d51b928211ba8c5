"""Main entry point for the TubeFetch server."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from tubefetch.api.deps import init_download_service
from tubefetch.api.handlers import register_exception_handlers
from tubefetch.api.routes import downloads, health
from tubefetch.config import Settings, settings
from tubefetch.services.cleanup import PeriodicSweeper

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize resources on startup, clean up on shutdown."""
    app_settings: Settings = app.state.settings
    app_settings.ensure_directories()
    service = init_download_service(app_settings)

    sweeper: PeriodicSweeper | None = None
    if app_settings.cleanup_interval_minutes > 0:
        sweeper = PeriodicSweeper(
            service.sweep_stale_jobs,
            interval_seconds=app_settings.cleanup_interval_minutes * 60,
        )
        sweeper.start()
    app.state.sweeper = sweeper

    logger.info("Downloads directory: %s", app_settings.downloads_dir.resolve())
    logger.info("Max concurrent downloads: %d", app_settings.max_concurrent_downloads)
    yield

    if sweeper is not None:
        await sweeper.stop()


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = app_settings or settings

    app = FastAPI(
        title="TubeFetch",
        description="Downloads videos with yt-dlp and serves the resulting files",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Include API routes
    app.include_router(health.router)
    app.include_router(downloads.router)

    # Directory is created in lifespan, before the first request
    app.mount(
        "/downloads",
        StaticFiles(directory=app_settings.downloads_dir, check_dir=False),
        name="downloads",
    )

    return app


app = create_app()


def main() -> None:
    """Run the application."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    settings.ensure_directories()
    uvicorn.run(
        "tubefetch.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
