"""Request and response schemas for the TubeFetch API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tubefetch.models.video import FormatInfo


class _CamelModel(BaseModel):
    """Serializes snake_case fields as camelCase for the browser client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ------------------------------------------------------------------
# Requests
# ------------------------------------------------------------------


class DownloadRequest(BaseModel):
    url: str | None = Field(None, description="Video URL")
    quality: Any = Field(
        None, description="best, 4k, 1440p, 1080p, 720p or 480p (default best)"
    )


class VideoInfoRequest(BaseModel):
    url: str | None = Field(None, description="Video URL")


# ------------------------------------------------------------------
# Responses
# ------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    version: str
    running_jobs: int = 0
    queued_jobs: int = 0


class DownloadResponse(_CamelModel):
    success: bool = True
    download_id: str
    file_name: str
    file_path: str
    file_size: str
    message: str = "Download completed successfully"


class VideoInfoResponse(_CamelModel):
    title: str | None = None
    duration: float | None = None
    thumbnail: str | None = None
    uploader: str | None = None
    upload_date: str | None = None
    description: str | None = None
    formats: list[FormatInfo] = Field(default_factory=list)


class CleanupResponse(BaseModel):
    message: str = "Cleanup completed"


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


class DownloadErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: str
