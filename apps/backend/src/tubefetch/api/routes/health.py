"""Health check endpoint."""

from fastapi import APIRouter, Depends

from tubefetch.api.deps import get_download_service
from tubefetch.api.schemas import HealthResponse
from tubefetch.services.download import DownloadService

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    service: DownloadService = Depends(get_download_service),
) -> HealthResponse:
    """Return the health status of the application."""
    from tubefetch import __version__

    return HealthResponse(
        status="ok",
        message="YouTube Downloader Server is running",
        version=__version__,
        running_jobs=service.job_manager.running_count,
        queued_jobs=service.job_manager.pending_count,
    )
