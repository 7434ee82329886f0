"""Still-frame extraction use case."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from backend.src.application.artifacts import IMAGE_EXTENSION, ArtifactNamer
from backend.src.core.entities.loaded_asset import LoadedAsset
from backend.src.core.exceptions import ThumbnailGenerationFailedError
from backend.src.core.services.orientation_resolver import OrientationResolver
from backend.src.core.value_objects.size import Size

logger = logging.getLogger(__name__)


class ThumbnailExtractor:
    """Grabs a frame near ``position_ms``, turns it upright and writes a JPEG."""

    def __init__(
        self,
        grabber,   # FrameGrabberPort
        encoder,   # ThumbnailPort
        namer: ArtifactNamer,
        resolver: Optional[OrientationResolver] = None,
        extension: str = IMAGE_EXTENSION,
    ) -> None:
        self._grabber = grabber
        self._encoder = encoder
        self._namer = namer
        self._resolver = resolver or OrientationResolver()
        self._extension = extension

    async def extract_frame(
        self,
        asset: LoadedAsset,
        position_ms: int,
        output_dir: str | Path,
        target_size: Optional[Size] = None,
        quality: int = 80,
    ) -> str:
        try:
            Path(output_dir).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ThumbnailGenerationFailedError(
                f"Cannot create thumbnail directory {output_dir}: {exc}", cause=exc
            ) from exc
        output_path = self._namer.next_path(output_dir, self._extension)
        turns = self._resolver.quarter_turns(asset.preferred_transform)

        try:
            loop = asyncio.get_event_loop()
            image = await loop.run_in_executor(
                None, self._grabber.grab_frame, asset.path, position_ms,
            )
            return await loop.run_in_executor(
                None, self._encoder.encode,
                image, str(output_path), turns, target_size, quality,
            )
        except Exception as exc:
            output_path.unlink(missing_ok=True)
            logger.error("Thumbnail at %dms failed: %s", position_ms, exc)
            raise ThumbnailGenerationFailedError(
                f"Failed to generate thumbnail: {exc}", cause=exc
            ) from exc
