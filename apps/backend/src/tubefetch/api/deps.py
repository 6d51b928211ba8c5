"""FastAPI dependencies."""

from __future__ import annotations

from tubefetch.config import Settings
from tubefetch.jobs.manager import JobManager
from tubefetch.services.download import DownloadService
from tubefetch.services.ytdlp import YtDlpRunner

_download_service: DownloadService | None = None


def init_download_service(app_settings: Settings) -> DownloadService:
    """Initialize the global DownloadService (called at app startup)."""
    global _download_service
    runner = YtDlpRunner(
        binary=app_settings.ytdlp_binary,
        max_output_bytes=app_settings.max_output_bytes,
    )
    _download_service = DownloadService(
        downloads_dir=app_settings.downloads_dir,
        runner=runner,
        job_manager=JobManager(max_concurrent=app_settings.max_concurrent_downloads),
        download_timeout=app_settings.download_timeout,
        info_timeout=app_settings.info_timeout,
        stale_after_hours=app_settings.stale_after_hours,
    )
    return _download_service


def get_download_service() -> DownloadService:
    """Dependency that provides the DownloadService instance."""
    if _download_service is None:
        raise RuntimeError("DownloadService not initialized — call init_download_service() first")
    return _download_service
