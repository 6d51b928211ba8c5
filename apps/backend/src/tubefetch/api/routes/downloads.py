"""Download, metadata and cleanup endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tubefetch.api.deps import get_download_service
from tubefetch.api.schemas import (
    CleanupResponse,
    DownloadErrorResponse,
    DownloadRequest,
    DownloadResponse,
    ErrorResponse,
    VideoInfoRequest,
    VideoInfoResponse,
)
from tubefetch.services.download import DownloadService

router = APIRouter(prefix="/api", tags=["downloads"])


@router.post(
    "/download",
    response_model=DownloadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": DownloadErrorResponse}},
)
async def download_video(
    req: DownloadRequest | None = None,
    service: DownloadService = Depends(get_download_service),
) -> DownloadResponse:
    """Download a video and report where the file can be fetched.

    Blocks until yt-dlp finishes or times out.
    """
    req = req or DownloadRequest()
    result = await service.submit_download(req.url, req.quality)
    return DownloadResponse(
        download_id=result.download_id,
        file_name=result.file_name,
        file_path=result.file_path,
        file_size=result.file_size,
    )


@router.post(
    "/video-info",
    response_model=VideoInfoResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_video_info(
    req: VideoInfoRequest | None = None,
    service: DownloadService = Depends(get_download_service),
) -> VideoInfoResponse:
    req = req or VideoInfoRequest()
    info = await service.fetch_video_metadata(req.url)
    return VideoInfoResponse(
        title=info.title,
        duration=info.duration,
        thumbnail=info.thumbnail,
        uploader=info.uploader,
        upload_date=info.upload_date,
        description=info.description,
        formats=info.formats,
    )


@router.post("/cleanup", response_model=CleanupResponse)
async def cleanup_downloads(
    service: DownloadService = Depends(get_download_service),
) -> CleanupResponse:
    """Remove download directories older than the stale threshold."""
    await service.sweep_stale_jobs()
    return CleanupResponse()
