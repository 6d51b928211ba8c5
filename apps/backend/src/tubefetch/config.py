"""Configuration management for TubeFetch."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # Directories
    downloads_dir: Path = Path("./downloads")

    # yt-dlp
    ytdlp_binary: str = "yt-dlp"
    download_timeout: float = 600.0
    info_timeout: float = 30.0
    max_output_bytes: int = 10 * 1024 * 1024

    # Jobs
    max_concurrent_downloads: int = 2

    # Cleanup
    stale_after_hours: float = 24.0
    cleanup_interval_minutes: float = 0.0  # 0 disables the periodic sweep

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.downloads_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
