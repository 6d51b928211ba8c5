"""Video metadata models built from ``yt-dlp -j`` output."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class FormatInfo(BaseModel):
    """One entry of the formats list reported by yt-dlp."""

    format_id: str | None = Field(None, description="yt-dlp format identifier")
    format: str | None = Field(None, description="Human-readable format description")
    ext: str | None = Field(None, description="Container extension")
    resolution: str | int | None = Field(
        None, description="Format note (e.g. '720p') or height in pixels"
    )
    fps: float | None = Field(None, description="Frames per second")
    vcodec: str | None = Field(None, description="Video codec")
    acodec: str | None = Field(None, description="Audio codec")

    @classmethod
    def from_ytdlp(cls, data: dict[str, Any]) -> FormatInfo:
        note = data.get("format_note")
        return cls(
            format_id=data.get("format_id"),
            format=data.get("format"),
            ext=data.get("ext"),
            resolution=note if note else data.get("height"),
            fps=data.get("fps"),
            vcodec=data.get("vcodec"),
            acodec=data.get("acodec"),
        )


class VideoInfo(BaseModel):
    """Normalized subset of the metadata yt-dlp reports for a video."""

    title: str | None = None
    duration: float | None = Field(None, description="Duration in seconds")
    thumbnail: str | None = None
    uploader: str | None = None
    upload_date: str | None = Field(None, description="YYYYMMDD as reported by yt-dlp")
    description: str | None = None
    formats: list[FormatInfo] = Field(default_factory=list)

    @classmethod
    def from_ytdlp(cls, data: dict[str, Any]) -> VideoInfo:
        """Project raw ``yt-dlp -j`` output onto the fields we expose."""
        return cls(
            title=data.get("title"),
            duration=data.get("duration"),
            thumbnail=data.get("thumbnail"),
            uploader=data.get("uploader"),
            upload_date=data.get("upload_date"),
            description=data.get("description"),
            formats=[
                FormatInfo.from_ytdlp(f)
                for f in _as_list(data.get("formats"))
                if isinstance(f, dict)
            ],
        )


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []
