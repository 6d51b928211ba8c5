"""TubeFetch command-line interface with subcommands.

Usage:
    tubefetch-cli download <url> [-q 720p] [-d downloads]
    tubefetch-cli info <url>
    tubefetch-cli cleanup [-d downloads] [--max-age-hours 24]
    tubefetch-cli serve
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from tubefetch.config import Settings, settings
from tubefetch.errors import DownloadFailedError, InvalidRequestError, MetadataFetchError
from tubefetch.jobs.manager import JobManager
from tubefetch.models.quality import Quality
from tubefetch.services.download import DownloadService
from tubefetch.services.ytdlp import YtDlpRunner


def _build_service(app_settings: Settings, downloads_dir: str | None = None) -> DownloadService:
    root = Path(downloads_dir) if downloads_dir else app_settings.downloads_dir
    root.mkdir(parents=True, exist_ok=True)
    return DownloadService(
        downloads_dir=root,
        runner=YtDlpRunner(
            binary=app_settings.ytdlp_binary,
            max_output_bytes=app_settings.max_output_bytes,
        ),
        job_manager=JobManager(max_concurrent=1),
        download_timeout=app_settings.download_timeout,
        info_timeout=app_settings.info_timeout,
        stale_after_hours=app_settings.stale_after_hours,
    )


async def cmd_download(args: argparse.Namespace) -> int:
    service = _build_service(settings, args.downloads_dir)
    print(f"Downloading {args.url} ({args.quality})")
    try:
        result = await service.submit_download(args.url, args.quality)
    except InvalidRequestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except DownloadFailedError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        print(f"  {e.details}", file=sys.stderr)
        return 1

    print(f"  File: {result.path}")
    print(f"  Size: {result.file_size}")
    return 0


async def cmd_info(args: argparse.Namespace) -> int:
    service = _build_service(settings)
    try:
        info = await service.fetch_video_metadata(args.url)
    except InvalidRequestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MetadataFetchError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        print(f"  {e.details}", file=sys.stderr)
        return 1

    print(json.dumps(info.model_dump(), ensure_ascii=False, indent=2))
    return 0


async def cmd_cleanup(args: argparse.Namespace) -> int:
    service = _build_service(settings, args.downloads_dir)
    if args.max_age_hours is not None:
        service.stale_after_hours = args.max_age_hours
    removed = await service.sweep_stale_jobs()
    print(f"Removed {len(removed)} stale download(s) from {service.downloads_dir}")
    for name in removed:
        print(f"  {name}")
    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="tubefetch-cli",
        description="Download videos with yt-dlp and manage the downloads directory",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    # --- download ---
    p_download = subparsers.add_parser("download", help="Download a video")
    p_download.add_argument("url", type=str, help="Video URL")
    p_download.add_argument(
        "-q", "--quality",
        choices=[q.value for q in Quality],
        default=Quality.BEST.value,
        help="Quality preset (default: best)",
    )
    p_download.add_argument("-d", "--downloads-dir", type=str, help="Downloads directory")

    # --- info ---
    p_info = subparsers.add_parser("info", help="Print video metadata as JSON")
    p_info.add_argument("url", type=str, help="Video URL")

    # --- cleanup ---
    p_cleanup = subparsers.add_parser("cleanup", help="Remove stale download directories")
    p_cleanup.add_argument("-d", "--downloads-dir", type=str, help="Downloads directory")
    p_cleanup.add_argument("--max-age-hours", type=float, help="Age threshold (default: 24)")

    # --- serve ---
    subparsers.add_parser("serve", help="Run the HTTP server")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(levelname)s %(name)s %(message)s",
    )

    # Dispatch
    if args.command == "serve":
        from tubefetch.main import main as serve

        serve()
        return
    if args.command == "download":
        sys.exit(asyncio.run(cmd_download(args)))
    elif args.command == "info":
        sys.exit(asyncio.run(cmd_info(args)))
    elif args.command == "cleanup":
        sys.exit(asyncio.run(cmd_cleanup(args)))


if __name__ == "__main__":
    main()
