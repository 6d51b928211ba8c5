"""Quality presets and their yt-dlp format selectors."""

from __future__ import annotations

from enum import Enum


class Quality(str, Enum):
    """Requested download quality."""

    BEST = "best"
    UHD_4K = "4k"
    QHD_1440P = "1440p"
    FHD_1080P = "1080p"
    HD_720P = "720p"
    SD_480P = "480p"

    @classmethod
    def parse(cls, value: object) -> Quality:
        """Parse a caller-supplied quality, falling back to BEST.

        Anything that is not one of the known strings, including non-string
        JSON values, maps to BEST.
        """
        if not isinstance(value, str):
            return cls.BEST
        try:
            return cls(value)
        except ValueError:
            return cls.BEST


_MIN_HEIGHTS: dict[Quality, int] = {
    Quality.UHD_4K: 2160,
    Quality.QHD_1440P: 1440,
    Quality.FHD_1080P: 1080,
    Quality.HD_720P: 720,
    Quality.SD_480P: 480,
}


def _tier_selector(height: int) -> str:
    # mp4+m4a combo, then any container combo, then a single muxed stream
    return (
        f"bestvideo[height>={height}][ext=mp4]+bestaudio[ext=m4a]"
        f"/bestvideo[height>={height}]+bestaudio"
        f"/best[height>={height}]"
    )


FORMAT_SELECTORS: dict[Quality, str] = {
    Quality.BEST: "best",
    **{quality: _tier_selector(height) for quality, height in _MIN_HEIGHTS.items()},
}


def format_selector(quality: object) -> str:
    """Return the yt-dlp ``-f`` expression for a quality value."""
    if not isinstance(quality, Quality):
        quality = Quality.parse(quality)
    return FORMAT_SELECTORS[quality]
