"""Naming of engine-owned output artifacts."""
from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Callable, Optional

RESERVED_PREFIX = "video_trimmer_"
VIDEO_EXTENSION = "mp4"
IMAGE_EXTENSION = "jpg"


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class ArtifactNamer:
    """Generates ``<prefix><token>.<ext>`` paths with a strictly increasing token.

    The token is the wall-clock time in milliseconds, bumped by one whenever
    two requests land in the same millisecond, so names never repeat within
    one namer.
    """

    def __init__(self, prefix: str = RESERVED_PREFIX, clock: Optional[Callable[[], int]] = None) -> None:
        self.prefix = prefix
        self._clock = clock or _epoch_millis
        self._last_token = 0
        self._lock = threading.Lock()

    def next_token(self) -> int:
        with self._lock:
            token = max(self._clock(), self._last_token + 1)
            self._last_token = token
            return token

    def next_path(self, directory: str | Path, extension: str) -> Path:
        return Path(directory) / f"{self.prefix}{self.next_token()}.{extension.lstrip('.')}"
