"""
VideoTrimmer configuration using Pydantic Settings.
Every section can be overridden through environment variables or a .env file.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env before any BaseSettings subclass reads env vars
load_dotenv()


class CacheSettings(BaseSettings):
    directory: str = Field(default_factory=tempfile.gettempdir)
    prefix: str = "video_trimmer_"
    video_extension: str = "mp4"
    image_extension: str = "jpg"
    extra_directories: list[str] = Field(default_factory=list)

    model_config = {"env_prefix": "TRIMMER_CACHE_"}

    @property
    def tracked_extensions(self) -> frozenset[str]:
        return frozenset({self.video_extension, self.image_extension})

    @property
    def directories(self) -> list[Path]:
        """Every directory the cache manager sweeps, primary first."""
        seen: list[Path] = []
        for raw in [self.directory, *self.extra_directories]:
            path = Path(raw)
            if path not in seen:
                seen.append(path)
        return seen


class FFmpegSettings(BaseSettings):
    ffmpeg_path: str = ""
    ffprobe_path: str = ""
    codec: str = "libx264"
    crf: int = 18
    preset: str = "veryfast"
    audio_codec: str = "aac"
    audio_bitrate: str = "192k"
    probe_timeout: int = 30

    model_config = {"env_prefix": "FFMPEG_"}


class ThumbnailSettings(BaseSettings):
    default_quality: int = 80

    model_config = {"env_prefix": "THUMBNAIL_"}


class OrientationSettings(BaseSettings):
    epsilon: float = 1e-4

    model_config = {"env_prefix": "ORIENTATION_"}


class LoggingSettings(BaseSettings):
    level: str = "INFO"

    model_config = {"env_prefix": "LOG_"}


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    app_env: str = "development"

    cache: CacheSettings = Field(default_factory=CacheSettings)
    ffmpeg: FFmpegSettings = Field(default_factory=FFmpegSettings)
    thumbnail: ThumbnailSettings = Field(default_factory=ThumbnailSettings)
    orientation: OrientationSettings = Field(default_factory=OrientationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
