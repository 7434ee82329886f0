"""Best-effort cleanup of artifacts written by the engine."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from backend.src.application.artifacts import IMAGE_EXTENSION, RESERVED_PREFIX, VIDEO_EXTENSION

logger = logging.getLogger(__name__)


class CacheManager:
    """Deletes flat files named ``<prefix>*.<tracked extension>``.

    Nothing else in a directory is ever touched, and no failure escapes
    :meth:`clear`.
    """

    def __init__(
        self,
        prefix: str = RESERVED_PREFIX,
        extensions: Iterable[str] = (VIDEO_EXTENSION, IMAGE_EXTENSION),
    ) -> None:
        self.prefix = prefix
        self.extensions = frozenset(ext.lstrip(".").lower() for ext in extensions)

    def is_artifact(self, path: Path) -> bool:
        return (
            path.name.startswith(self.prefix)
            and path.suffix.lstrip(".").lower() in self.extensions
        )

    def clear(self, directories: Iterable[str | Path]) -> int:
        """Remove every artifact in *directories*; returns how many were deleted."""
        removed = 0
        for directory in directories:
            base = Path(directory)
            try:
                entries = list(base.iterdir())
            except OSError as exc:
                logger.debug("Skipping cache directory %s: %s", base, exc)
                continue

            for entry in entries:
                if not self.is_artifact(entry) or not entry.is_file():
                    continue
                try:
                    entry.unlink()
                    removed += 1
                except OSError as exc:
                    logger.warning("Failed to delete cached artifact %s: %s", entry, exc)

        logger.info("Cache cleared: %d artifact(s) removed", removed)
        return removed
