"""Shared fixtures: fake yt-dlp executables and an in-process fake runner."""

from __future__ import annotations

import stat
import sys
import textwrap
from pathlib import Path

import pytest

from tubefetch.services.ytdlp import YtDlpResult

MIB = 1024 * 1024

# Script bodies for the fake yt-dlp; ``args`` holds sys.argv[1:]
WRITE_TITLE_MP4 = """
template = args[args.index("-o") + 1]
path = template.replace("%(title)s", "title").replace("%(ext)s", "mp4")
with open(path, "wb") as f:
    f.write(b"\\0" * 1048576)
"""

EXIT_404 = """
sys.stderr.write("ERROR: [youtube] abc: Unable to download webpage: HTTP Error 404: Not Found\\n")
sys.exit(1)
"""

EXIT_OK_NO_OUTPUT = """
sys.exit(0)
"""

SLEEP_FOREVER = """
time.sleep(60)
"""

FLOOD_STDOUT = """
sys.stdout.write("x" * 500000)
sys.stdout.flush()
time.sleep(60)
"""

PRINT_INFO = """
print(json.dumps({
    "title": "Sample",
    "duration": 212,
    "thumbnail": "https://i.ytimg.com/vi/abc/hq.jpg",
    "uploader": "Someone",
    "upload_date": "20240101",
    "description": "desc",
    "formats": [
        {"format_id": "22", "format": "22 - 1280x720", "ext": "mp4",
         "format_note": "720p", "height": 720, "fps": 30,
         "vcodec": "avc1", "acodec": "mp4a"},
        {"format_id": "140", "format": "140 - audio only", "ext": "m4a",
         "height": None, "fps": None, "vcodec": "none", "acodec": "mp4a"},
    ],
}))
"""

PRINT_MALFORMED_JSON = """
print("{this is not json")
"""


@pytest.fixture
def fake_ytdlp(tmp_path: Path):
    """Factory writing an executable fake yt-dlp with the given body.

    Each invocation's argv is appended to ``<script>.args`` one JSON list
    per line.
    """

    def _make(body: str, name: str = "fake-yt-dlp") -> Path:
        script = tmp_path / name
        log_path = repr(str(script) + ".args")
        header = textwrap.dedent(
            f"""\
            #!{sys.executable}
            import json, sys, time
            args = sys.argv[1:]
            with open({log_path}, "a") as log:
                log.write(json.dumps(args) + "\\n")
            """
        )
        script.write_text(header + textwrap.dedent(body))
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


class FakeRunner:
    """In-process stand-in for YtDlpRunner."""

    def __init__(
        self,
        files: dict[str, bytes] | None = None,
        error: Exception | None = None,
        info_output: str = "{}",
    ) -> None:
        self.files = files or {}
        self.error = error
        self.info_output = info_output
        self.calls: list[tuple] = []

    async def download(self, url, format_selector, output_dir, timeout):
        self.calls.append(("download", url, format_selector, Path(output_dir)))
        for name, data in self.files.items():
            (Path(output_dir) / name).write_bytes(data)
        if self.error is not None:
            raise self.error
        return YtDlpResult(returncode=0, stdout="", stderr="")

    async def dump_json(self, url, timeout):
        self.calls.append(("dump_json", url))
        if self.error is not None:
            raise self.error
        return self.info_output


@pytest.fixture
def downloads_dir(tmp_path: Path) -> Path:
    path = tmp_path / "downloads"
    path.mkdir()
    return path


