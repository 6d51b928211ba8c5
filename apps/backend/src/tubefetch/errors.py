"""Custom exceptions for TubeFetch."""

from __future__ import annotations


class TubeFetchError(Exception):
    """Base exception for TubeFetch."""

    pass


class InvalidRequestError(TubeFetchError):
    """Request rejected before any work was started."""

    pass


class YtDlpError(TubeFetchError):
    """yt-dlp execution failed (non-zero exit, timeout or output overflow)."""

    pass


class DownloadFailedError(TubeFetchError):
    """A download job failed.

    Carries a user-facing message alongside the raw error text.
    """

    def __init__(self, message: str, details: str) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ArtifactMissingError(DownloadFailedError):
    """yt-dlp reported success but left no output file."""

    pass


class MetadataFetchError(TubeFetchError):
    """Metadata lookup or JSON parsing failed."""

    def __init__(self, details: str) -> None:
        super().__init__("Failed to fetch video information")
        self.message = "Failed to fetch video information"
        self.details = details


class CleanupError(TubeFetchError):
    """A job directory could not be removed."""

    pass


# Substring -> user message, first match wins
_FAILURE_MESSAGES: list[tuple[str, str]] = [
    ("404", "Video not found. Please check the URL."),
    ("429", "Too many requests. Please wait a moment and try again."),
    ("unavailable", "Video is unavailable. It may be private or deleted."),
]

GENERIC_FAILURE_MESSAGE = "Download failed. Please try again."


def describe_failure(raw: str) -> str:
    """Map raw downloader error text to a user-facing message."""
    for needle, message in _FAILURE_MESSAGES:
        if needle in raw:
            return message
    return GENERIC_FAILURE_MESSAGE
