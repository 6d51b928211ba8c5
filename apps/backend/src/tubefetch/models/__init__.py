"""Data models for TubeFetch."""

from tubefetch.models.download import DownloadResult
from tubefetch.models.quality import Quality, format_selector
from tubefetch.models.video import FormatInfo, VideoInfo

__all__ = [
    # Download
    "DownloadResult",
    # Quality
    "Quality",
    "format_selector",
    # Video
    "FormatInfo",
    "VideoInfo",
]
