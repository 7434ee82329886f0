"""Asset loading use case: validate the path and resolve container metadata."""
from __future__ import annotations

import logging
from pathlib import Path

from backend.src.core.entities.loaded_asset import LoadedAsset
from backend.src.core.exceptions import (
    FFmpegError,
    InvalidVideoTrackError,
    UnsupportedFormatError,
    VideoFileNotFoundError,
)

logger = logging.getLogger(__name__)


class AssetLoader:
    """Opens a source file and checks it can be exported."""

    def __init__(self, probe) -> None:  # AssetProbePort
        self._probe = probe

    async def load(self, path: str) -> LoadedAsset:
        target = Path(path)
        if not target.is_file():
            raise VideoFileNotFoundError(str(path))

        try:
            asset = await self._probe.probe(str(target))
        except FFmpegError as exc:
            raise InvalidVideoTrackError(f"Failed to read video metadata: {exc}", cause=exc) from exc

        if asset.video_track is None:
            raise InvalidVideoTrackError(f"No video track found in {path}")
        if asset.is_protected:
            raise UnsupportedFormatError(f"Protected content cannot be exported: {path}")
        if not asset.is_exportable:
            raise UnsupportedFormatError(f"No compatible export preset for {path}")

        logger.info(
            "Loaded %s (%s, %dms, audio=%s)",
            path, asset.resolution_str, asset.duration_ms, asset.has_audio,
        )
        return asset
