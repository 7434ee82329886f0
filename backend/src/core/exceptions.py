"""Custom exception hierarchy for the VideoTrimmer engine."""
from __future__ import annotations

from typing import Optional


class VideoTrimmerError(Exception):
    """Base exception for all VideoTrimmer errors.

    Every subclass carries a stable ``code`` so transports can surface it
    verbatim, plus a default human-readable message.
    """

    code: str = "UNKNOWN"
    default_message: str = "An unknown error occurred"

    def __init__(self, message: Optional[str] = None, *, cause: Optional[BaseException] = None) -> None:
        self.message = message or self.default_message
        self.cause = cause
        super().__init__(self.message)


class VideoFileNotFoundError(VideoTrimmerError):
    """Raised when the source video path does not point at a regular file."""

    code = "FILE_NOT_FOUND"
    default_message = "Video file not found"

    def __init__(self, path: str = "", **kwargs) -> None:
        self.path = path
        message = f"Video file not found: {path}" if path else None
        super().__init__(message, **kwargs)


class NoVideoLoadedError(VideoTrimmerError):
    code = "NO_VIDEO_LOADED"
    default_message = "No video is currently loaded"


class InvalidVideoTrackError(VideoTrimmerError):
    code = "INVALID_VIDEO_TRACK"
    default_message = "Invalid video track"


class UnsupportedFormatError(VideoTrimmerError):
    code = "UNSUPPORTED_FORMAT"
    default_message = "Video format is not supported"


class InvalidTimeRangeError(VideoTrimmerError):
    """Raised when a trim range is not within ``0 <= start < end <= duration``."""

    code = "INVALID_TIME_RANGE"
    default_message = (
        "Invalid time range. Start time must be non-negative and end time must be "
        "greater than start time and within video duration"
    )


class ExportSessionFailedError(VideoTrimmerError):
    code = "EXPORT_SESSION_FAILED"
    default_message = "Failed to create export session"


class ExportFailedError(VideoTrimmerError):
    code = "EXPORT_FAILED"
    default_message = "Failed to export video"


class ExportCancelledError(VideoTrimmerError):
    code = "EXPORT_CANCELLED"
    default_message = "Video export was cancelled"


class ExportBusyError(VideoTrimmerError):
    """Raised when an export is requested while another is still running."""

    code = "EXPORT_BUSY"
    default_message = "Another export is already in progress"


class ThumbnailGenerationFailedError(VideoTrimmerError):
    code = "THUMBNAIL_GENERATION_FAILED"
    default_message = "Failed to generate thumbnail"


class UnknownVideoError(VideoTrimmerError):
    code = "UNKNOWN"


class FFmpegError(RuntimeError):
    """Raised by the FFmpeg adapters when ffmpeg/ffprobe exits abnormally."""

    def __init__(self, message: str, returncode: Optional[int] = None) -> None:
        self.returncode = returncode
        super().__init__(message)


class FFmpegNotAvailableError(FFmpegError):
    """Raised when the ffmpeg/ffprobe binary cannot be started at all."""
