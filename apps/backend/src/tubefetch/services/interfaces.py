"""Service interfaces (Protocols) for TubeFetch.

These protocols define the contracts that service implementations must follow.
They let tests swap the yt-dlp subprocess for an in-process fake.
"""

from pathlib import Path
from typing import Protocol

from tubefetch.services.ytdlp import YtDlpResult


class IYtDlpRunner(Protocol):
    """Interface for the yt-dlp command-line wrapper."""

    async def download(
        self,
        url: str,
        format_selector: str,
        output_dir: Path,
        timeout: float,
    ) -> YtDlpResult:
        """Download a video into a directory.

        Args:
            url: Video URL, passed as a single argv element
            format_selector: yt-dlp ``-f`` expression
            output_dir: Directory the artifact is written to
            timeout: Wall-clock limit in seconds

        Returns:
            Captured process output

        Raises:
            YtDlpError: If the process fails, times out or floods its output
        """
        ...

    async def dump_json(self, url: str, timeout: float) -> str:
        """Return the raw JSON metadata yt-dlp prints for a URL.

        Args:
            url: Video URL
            timeout: Wall-clock limit in seconds

        Returns:
            The process stdout

        Raises:
            YtDlpError: If the process fails or times out
        """
        ...
