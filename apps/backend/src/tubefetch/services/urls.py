"""URL pre-validation for download requests."""

from __future__ import annotations

import re

from tubefetch.errors import InvalidRequestError

# Syntactic filter only: scheme and www. optional, then a known host and "/"
_VIDEO_URL_RE = re.compile(r"^(https?://)?(www\.)?(youtube|youtu|youtube-nocookie)\.(com|be)/")

URL_REQUIRED_MESSAGE = "YouTube URL is required"
URL_INVALID_MESSAGE = "Invalid YouTube URL"


def is_valid_video_url(url: str) -> bool:
    """Return True if ``url`` looks like a supported video link."""
    return bool(_VIDEO_URL_RE.match(url))


def validate_url(url: str | None) -> str:
    """Return the stripped URL or raise InvalidRequestError."""
    if url is None or not url.strip():
        raise InvalidRequestError(URL_REQUIRED_MESSAGE)
    url = url.strip()
    if not is_valid_video_url(url):
        raise InvalidRequestError(URL_INVALID_MESSAGE)
    return url
