"""Tests for DownloadService with an in-process fake runner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import MIB, FakeRunner
from tubefetch.errors import (
    ArtifactMissingError,
    DownloadFailedError,
    InvalidRequestError,
    MetadataFetchError,
    YtDlpError,
)
from tubefetch.models.quality import format_selector
from tubefetch.services.download import DownloadService

URL = "https://www.youtube.com/watch?v=abc"


def _service(downloads_dir: Path, runner: FakeRunner) -> DownloadService:
    return DownloadService(downloads_dir=downloads_dir, runner=runner)


class TestSubmitDownload:
    @pytest.mark.asyncio
    async def test_success(self, downloads_dir: Path) -> None:
        runner = FakeRunner(files={"title.mp4": b"\0" * MIB})
        service = _service(downloads_dir, runner)

        result = await service.submit_download(URL, "720p")

        assert result.file_name == "title.mp4"
        assert result.file_size == "1.00 MB"
        assert result.file_path == f"/downloads/{result.download_id}/title.mp4"
        job_dir = downloads_dir / result.download_id
        assert [p.name for p in job_dir.iterdir()] == ["title.mp4"]
        assert runner.calls == [("download", URL, format_selector("720p"), job_dir)]

    @pytest.mark.asyncio
    async def test_unknown_quality_uses_best(self, downloads_dir: Path) -> None:
        runner = FakeRunner(files={"a.webm": b"x"})
        await _service(downloads_dir, runner).submit_download(URL, "8k")
        assert runner.calls[0][2] == "best"

    @pytest.mark.asyncio
    async def test_each_job_gets_its_own_directory(self, downloads_dir: Path) -> None:
        service = _service(downloads_dir, FakeRunner(files={"a.mp4": b"x"}))
        first = await service.submit_download(URL)
        second = await service.submit_download(URL)
        assert first.download_id != second.download_id
        assert len(list(downloads_dir.iterdir())) == 2

    @pytest.mark.parametrize("url", [None, "", "not-a-url", "https://vimeo.com/1"])
    @pytest.mark.asyncio
    async def test_invalid_url_never_runs(self, downloads_dir: Path, url) -> None:
        runner = FakeRunner(files={"a.mp4": b"x"})

        with pytest.raises(InvalidRequestError):
            await _service(downloads_dir, runner).submit_download(url)

        assert runner.calls == []
        assert list(downloads_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_failure_removes_job_dir(self, downloads_dir: Path) -> None:
        runner = FakeRunner(
            files={"title.mp4.part": b"partial"},
            error=YtDlpError("yt-dlp exited with code 1: ERROR: HTTP Error 404: Not Found"),
        )

        with pytest.raises(DownloadFailedError) as exc_info:
            await _service(downloads_dir, runner).submit_download(URL)

        assert exc_info.value.message == "Video not found. Please check the URL."
        assert "HTTP Error 404" in exc_info.value.details
        assert list(downloads_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped(self, downloads_dir: Path) -> None:
        runner = FakeRunner(error=OSError("disk full"))

        with pytest.raises(DownloadFailedError) as exc_info:
            await _service(downloads_dir, runner).submit_download(URL)

        assert exc_info.value.message == "Download failed. Please try again."
        assert exc_info.value.details == "disk full"
        assert list(downloads_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_unusable_downloads_dir_is_wrapped(self, tmp_path: Path) -> None:
        blocked = tmp_path / "blocked"
        blocked.write_text("not a directory")
        runner = FakeRunner(files={"a.mp4": b"x"})

        with pytest.raises(DownloadFailedError) as exc_info:
            await _service(blocked, runner).submit_download(URL)

        assert isinstance(exc_info.value.__cause__, OSError)
        assert runner.calls == []
        assert blocked.read_text() == "not a directory"

    @pytest.mark.asyncio
    async def test_missing_artifact(self, downloads_dir: Path) -> None:
        runner = FakeRunner(files={".hidden": b"x"})

        with pytest.raises(ArtifactMissingError) as exc_info:
            await _service(downloads_dir, runner).submit_download(URL)

        assert exc_info.value.details == "Download completed but no file found"
        assert list(downloads_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_partial_files_are_not_artifacts(self, downloads_dir: Path) -> None:
        runner = FakeRunner(files={"title.mp4.part": b"x" * 10, "title.mp4.ytdl": b"x"})

        with pytest.raises(ArtifactMissingError):
            await _service(downloads_dir, runner).submit_download(URL)

    @pytest.mark.asyncio
    async def test_largest_of_several_outputs_wins(self, downloads_dir: Path) -> None:
        runner = FakeRunner(
            files={
                "title.f137.mp4": b"v" * 100,
                "title.mkv": b"m" * 300,
                "title.f140.m4a": b"a" * 50,
                ".cache": b"c",
            }
        )

        result = await _service(downloads_dir, runner).submit_download(URL)

        assert result.file_name == "title.mkv"
        job_dir = downloads_dir / result.download_id
        remaining = sorted(p.name for p in job_dir.iterdir() if not p.name.startswith("."))
        assert remaining == ["title.mkv"]

    @pytest.mark.asyncio
    async def test_job_is_forgotten_after_completion(self, downloads_dir: Path) -> None:
        service = _service(downloads_dir, FakeRunner(files={"a.mp4": b"x"}))
        await service.submit_download(URL)
        assert service.job_manager.list_jobs() == []


class TestFetchVideoMetadata:
    @pytest.mark.asyncio
    async def test_success(self, downloads_dir: Path) -> None:
        payload = {
            "title": "Sample",
            "duration": 10,
            "upload_date": "20240101",
            "formats": [{"format_id": "18", "ext": "mp4", "format_note": "360p"}],
        }
        runner = FakeRunner(info_output=json.dumps(payload) + "\n")

        info = await _service(downloads_dir, runner).fetch_video_metadata(URL)

        assert info.title == "Sample"
        assert info.formats[0].resolution == "360p"
        assert runner.calls == [("dump_json", URL)]

    @pytest.mark.asyncio
    async def test_invalid_url_never_runs(self, downloads_dir: Path) -> None:
        runner = FakeRunner()
        with pytest.raises(InvalidRequestError, match="Invalid YouTube URL"):
            await _service(downloads_dir, runner).fetch_video_metadata("not-a-url")
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_malformed_json(self, downloads_dir: Path) -> None:
        runner = FakeRunner(info_output="{oops")

        with pytest.raises(MetadataFetchError) as exc_info:
            await _service(downloads_dir, runner).fetch_video_metadata(URL)

        assert exc_info.value.message == "Failed to fetch video information"
        assert "Expecting property name" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_multiple_json_lines_fail(self, downloads_dir: Path) -> None:
        runner = FakeRunner(info_output='{"title": "a"}\n{"title": "b"}\n')
        with pytest.raises(MetadataFetchError, match="Failed to fetch"):
            await _service(downloads_dir, runner).fetch_video_metadata(URL)

    @pytest.mark.asyncio
    async def test_non_object_json(self, downloads_dir: Path) -> None:
        runner = FakeRunner(info_output="[1, 2]")
        with pytest.raises(MetadataFetchError) as exc_info:
            await _service(downloads_dir, runner).fetch_video_metadata(URL)
        assert "list" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_subprocess_failure(self, downloads_dir: Path) -> None:
        runner = FakeRunner(error=YtDlpError("yt-dlp timed out after 30 seconds"))
        with pytest.raises(MetadataFetchError) as exc_info:
            await _service(downloads_dir, runner).fetch_video_metadata(URL)
        assert exc_info.value.details == "yt-dlp timed out after 30 seconds"
