"""Download result model."""

from pathlib import Path

from pydantic import BaseModel, Field

BYTES_PER_MIB = 1024 * 1024


class DownloadResult(BaseModel):
    """Outcome of a successful download job."""

    download_id: str = Field(..., description="Job identifier (job directory name)")
    file_name: str = Field(..., description="Artifact file name")
    path: Path = Field(..., description="Absolute path of the artifact on disk")
    size_bytes: int = Field(..., ge=0, description="Artifact size in bytes")

    @property
    def file_path(self) -> str:
        """Relative URL under the static downloads mount."""
        return f"/downloads/{self.download_id}/{self.file_name}"

    @property
    def file_size(self) -> str:
        """Human-readable size, e.g. '1.00 MB'."""
        return f"{self.size_bytes / BYTES_PER_MIB:.2f} MB"
