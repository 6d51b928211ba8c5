"""Removal of stale job directories."""

from __future__ import annotations

import asyncio
import logging
import shutil
import time
from collections.abc import Awaitable, Callable, Collection
from pathlib import Path

from tubefetch.errors import CleanupError

logger = logging.getLogger(__name__)


def remove_job_dir(path: Path) -> None:
    """Recursively delete a job directory.

    Raises:
        CleanupError: If the directory exists but cannot be removed
    """
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        return
    except OSError as e:
        raise CleanupError(f"Could not remove {path}: {e}") from e


def sweep_stale_jobs(
    root: Path,
    max_age_seconds: float,
    exclude: Collection[str] = (),
    now: float | None = None,
) -> list[str]:
    """Delete job directories under ``root`` older than ``max_age_seconds``.

    Only immediate subdirectories are considered. Names in ``exclude`` (jobs
    still in flight) are skipped. A directory that cannot be removed is
    logged and the sweep carries on.

    Returns:
        Names of the removed directories
    """
    if not root.is_dir():
        return []

    cutoff = (time.time() if now is None else now) - max_age_seconds
    removed: list[str] = []

    for entry in sorted(root.iterdir()):
        if entry.name in exclude:
            continue
        try:
            if entry.is_symlink() or not entry.is_dir():
                continue
            mtime = entry.stat().st_mtime
        except FileNotFoundError:
            continue
        if mtime >= cutoff:
            continue
        try:
            remove_job_dir(entry)
        except CleanupError as e:
            logger.error("%s", e)
            continue
        removed.append(entry.name)
        logger.info("Cleaned up old download: %s", entry.name)

    return removed


class PeriodicSweeper:
    """Awaits a sweep coroutine function on a fixed interval in a background task."""

    def __init__(self, sweep: Callable[[], Awaitable[object]], interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._sweep = sweep
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("Periodic cleanup every %.0f seconds", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self._sweep()
            except Exception:
                logger.exception("Periodic cleanup failed")
