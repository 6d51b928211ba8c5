"""Download job service: validate, run yt-dlp, locate the artifact."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from tubefetch.errors import (
    GENERIC_FAILURE_MESSAGE,
    ArtifactMissingError,
    CleanupError,
    DownloadFailedError,
    MetadataFetchError,
    YtDlpError,
    describe_failure,
)
from tubefetch.jobs.manager import JobManager
from tubefetch.jobs.models import Job
from tubefetch.models.download import DownloadResult
from tubefetch.models.quality import Quality, format_selector
from tubefetch.models.video import VideoInfo
from tubefetch.services import cleanup
from tubefetch.services.interfaces import IYtDlpRunner
from tubefetch.services.urls import validate_url

logger = logging.getLogger(__name__)

# Leftovers of an interrupted or in-progress yt-dlp download
_PARTIAL_SUFFIXES = {".part", ".ytdl", ".temp"}


class DownloadService:
    """Runs download jobs into per-job directories under a downloads root.

    Each job gets ``<downloads_dir>/<job id>/``. On any failure the
    directory is removed before the error is raised, so only completed
    artifacts stay on disk.
    """

    def __init__(
        self,
        downloads_dir: Path,
        runner: IYtDlpRunner,
        job_manager: JobManager | None = None,
        download_timeout: float = 600.0,
        info_timeout: float = 30.0,
        stale_after_hours: float = 24.0,
    ) -> None:
        self.downloads_dir = Path(downloads_dir)
        self.runner = runner
        self.job_manager = job_manager or JobManager()
        self.download_timeout = download_timeout
        self.info_timeout = info_timeout
        self.stale_after_hours = stale_after_hours

    async def submit_download(self, url: str | None, quality: object = None) -> DownloadResult:
        """Download a video and return where its artifact landed.

        Args:
            url: Video URL
            quality: One of the Quality values; anything else means "best"

        Returns:
            DownloadResult for the single artifact in the job directory

        Raises:
            InvalidRequestError: If the URL is missing or not a video link
            DownloadFailedError: If yt-dlp fails or leaves no artifact
        """
        url = validate_url(url)
        job = self.job_manager.create_job(url, Quality.parse(quality))
        return await self.job_manager.run(job, self._download)

    async def fetch_video_metadata(self, url: str | None) -> VideoInfo:
        """Look up video metadata without downloading.

        Raises:
            InvalidRequestError: If the URL is missing or not a video link
            MetadataFetchError: If yt-dlp fails or prints unusable JSON
        """
        url = validate_url(url)
        try:
            raw = await self.runner.dump_json(url, timeout=self.info_timeout)
        except YtDlpError as e:
            logger.error("Failed to get video info for %s: %s", url, e)
            raise MetadataFetchError(str(e)) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse video info for %s: %s", url, e)
            raise MetadataFetchError(str(e)) from e
        if not isinstance(data, dict):
            raise MetadataFetchError(
                f"Expected a JSON object from yt-dlp, got {type(data).__name__}"
            )

        try:
            return VideoInfo.from_ytdlp(data)
        except ValidationError as e:
            raise MetadataFetchError(str(e)) from e

    async def sweep_stale_jobs(self) -> list[str]:
        """Remove job directories older than the stale threshold.

        Directories of in-flight jobs are left alone.
        """
        exclude = self.job_manager.active_ids()
        removed = await asyncio.to_thread(
            cleanup.sweep_stale_jobs,
            self.downloads_dir,
            self.stale_after_hours * 3600,
            exclude,
        )
        if removed:
            logger.info("Cleanup removed %d job directories", len(removed))
        return removed

    async def _download(self, job: Job) -> DownloadResult:
        job_dir = self.downloads_dir / job.id
        logger.info("Starting download with ID: %s", job.id)

        try:
            job_dir.mkdir(parents=True)
            await self.runner.download(
                job.url,
                format_selector(job.quality),
                job_dir,
                timeout=self.download_timeout,
            )
            artifact = self._find_artifact(job_dir)
            result = DownloadResult(
                download_id=job.id,
                file_name=artifact.name,
                path=artifact,
                size_bytes=artifact.stat().st_size,
            )
        except DownloadFailedError:
            self._discard(job_dir)
            raise
        except Exception as e:
            self._discard(job_dir)
            raw = str(e) or type(e).__name__
            raise DownloadFailedError(describe_failure(raw), raw) from e
        except asyncio.CancelledError:
            self._discard(job_dir)
            raise

        logger.info("Download completed: %s - %s", job.id, result.file_name)
        return result

    def _find_artifact(self, job_dir: Path) -> Path:
        """Pick the artifact yt-dlp produced and drop anything else.

        Dotfiles are ignored. Partial-download leftovers never count as the
        artifact. If several candidates remain the largest wins.
        """
        entries = [p for p in sorted(job_dir.iterdir()) if not p.name.startswith(".")]
        candidates = [
            p for p in entries
            if p.is_file() and p.suffix.lower() not in _PARTIAL_SUFFIXES
        ]
        if not candidates:
            raise ArtifactMissingError(
                GENERIC_FAILURE_MESSAGE, "Download completed but no file found"
            )

        artifact = max(candidates, key=lambda p: p.stat().st_size)
        for extra in entries:
            if extra != artifact:
                logger.warning("Removing extra output %s in %s", extra.name, job_dir.name)
                if extra.is_dir():
                    cleanup.remove_job_dir(extra)
                else:
                    extra.unlink(missing_ok=True)
        return artifact

    @staticmethod
    def _discard(job_dir: Path) -> None:
        try:
            cleanup.remove_job_dir(job_dir)
        except CleanupError as e:
            logger.error("Error cleaning up: %s", e)
