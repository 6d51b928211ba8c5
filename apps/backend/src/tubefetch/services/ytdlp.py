"""yt-dlp subprocess runner."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from tubefetch.errors import YtDlpError

logger = logging.getLogger(__name__)

# yt-dlp output template: keep the source title and extension
OUTPUT_TEMPLATE = "%(title)s.%(ext)s"

_READ_CHUNK = 64 * 1024


class _OutputLimitExceeded(Exception):
    pass


@dataclass
class YtDlpResult:
    """Captured output of a finished yt-dlp process."""

    returncode: int
    stdout: str
    stderr: str


class YtDlpRunner:
    """Runs the yt-dlp executable as an argv list (no shell).

    Every invocation is bounded by a wall-clock timeout and a cap on the
    combined size of stdout and stderr. Exceeding either kills the process
    and raises YtDlpError.
    """

    def __init__(
        self,
        binary: str = "yt-dlp",
        max_output_bytes: int = 10 * 1024 * 1024,
    ) -> None:
        self.binary = binary
        self.max_output_bytes = max_output_bytes

    async def run(self, args: list[str], timeout: float) -> YtDlpResult:
        """Run yt-dlp with ``args`` and return its output.

        Args:
            args: Arguments after the executable name
            timeout: Wall-clock limit in seconds

        Returns:
            YtDlpResult for a zero exit status

        Raises:
            YtDlpError: On non-zero exit, timeout, output overflow or a
                missing executable
        """
        cmd = [self.binary, *args]
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise YtDlpError(f"yt-dlp executable not found: {self.binary}") from e
        except PermissionError as e:
            raise YtDlpError(f"yt-dlp executable not runnable: {self.binary}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                self._communicate(process), timeout=timeout
            )
        except asyncio.TimeoutError:
            await self._kill(process)
            raise YtDlpError(f"yt-dlp timed out after {timeout:g} seconds") from None
        except _OutputLimitExceeded:
            await self._kill(process)
            raise YtDlpError(
                f"yt-dlp output exceeded {self.max_output_bytes} bytes"
            ) from None
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        result = YtDlpResult(
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
        if result.returncode != 0:
            detail = result.stderr.strip() or result.stdout.strip()
            raise YtDlpError(
                f"yt-dlp exited with code {result.returncode}: {detail}"
                if detail
                else f"yt-dlp exited with code {result.returncode}"
            )
        return result

    async def download(
        self,
        url: str,
        format_selector: str,
        output_dir: Path,
        timeout: float,
    ) -> YtDlpResult:
        """Download ``url`` into ``output_dir`` using a format selector."""
        template = str(Path(output_dir) / OUTPUT_TEMPLATE)
        return await self.run(
            ["-f", format_selector, "-o", template, "--", url],
            timeout=timeout,
        )

    async def dump_json(self, url: str, timeout: float) -> str:
        """Return the raw ``yt-dlp -j`` metadata for ``url``."""
        result = await self.run(["-j", "--", url], timeout=timeout)
        return result.stdout

    async def _communicate(self, process: asyncio.subprocess.Process) -> tuple[bytes, bytes]:
        """Read both pipes to EOF against a shared byte budget, then wait."""
        remaining = [self.max_output_bytes]

        async def drain(stream: asyncio.StreamReader) -> bytes:
            buf = bytearray()
            while True:
                chunk = await stream.read(_READ_CHUNK)
                if not chunk:
                    return bytes(buf)
                remaining[0] -= len(chunk)
                if remaining[0] < 0:
                    raise _OutputLimitExceeded()
                buf.extend(chunk)

        tasks = [
            asyncio.ensure_future(drain(process.stdout)),
            asyncio.ensure_future(drain(process.stderr)),
        ]
        try:
            stdout, stderr = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        await process.wait()
        return stdout, stderr

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            logger.warning("Killed yt-dlp process %s", process.pid)
        await process.wait()
