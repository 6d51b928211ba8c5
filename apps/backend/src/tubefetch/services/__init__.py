"""Services module for TubeFetch."""

from tubefetch.services.download import DownloadService
from tubefetch.services.interfaces import IYtDlpRunner
from tubefetch.services.ytdlp import YtDlpResult, YtDlpRunner

__all__ = [
    "DownloadService",
    "IYtDlpRunner",
    "YtDlpResult",
    "YtDlpRunner",
]
