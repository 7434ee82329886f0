"""
Trim-and-export engine facade.

One instance owns at most one loaded asset and one in-flight export.
Concurrent caller sessions use separate instances.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from backend.src.application.asset_loader import AssetLoader
from backend.src.application.cache_manager import CacheManager
from backend.src.application.export_pipeline import ExportPipeline
from backend.src.application.thumbnail_extractor import ThumbnailExtractor
from backend.src.core.entities.loaded_asset import LoadedAsset
from backend.src.core.exceptions import (
    ExportBusyError,
    NoVideoLoadedError,
    UnknownVideoError,
    UnsupportedFormatError,
    VideoTrimmerError,
)
from backend.src.core.services.composition_builder import CompositionBuilder
from backend.src.core.services.trim_validator import TrimValidator
from backend.src.core.value_objects.size import Size
from backend.src.ports.outbound.render_backend_port import ProgressCallback

logger = logging.getLogger(__name__)


class VideoTrimmerService:
    """Implements :class:`VideoTrimmerUseCase`."""

    def __init__(
        self,
        loader: AssetLoader,
        pipeline: ExportPipeline,
        thumbnails: ThumbnailExtractor,
        cache: CacheManager,
        output_dir: str | Path,
        cache_directories: Optional[Sequence[str | Path]] = None,
        builder: Optional[CompositionBuilder] = None,
        validator: Optional[TrimValidator] = None,
        default_quality: int = 80,
    ) -> None:
        self._loader = loader
        self._pipeline = pipeline
        self._thumbnails = thumbnails
        self._cache = cache
        self._output_dir = Path(output_dir)
        self._cache_directories = list(cache_directories or [self._output_dir])
        self._builder = builder or CompositionBuilder()
        self._validator = validator or TrimValidator()
        self._default_quality = default_quality
        self._asset: Optional[LoadedAsset] = None

    @property
    def loaded_asset(self) -> Optional[LoadedAsset]:
        return self._asset

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    async def load_video(self, path: str) -> None:
        # a failed load leaves no asset behind, whatever the failure
        self._asset = None
        try:
            self._asset = await self._loader.load(path)
        except VideoTrimmerError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error while loading %s", path)
            raise UnknownVideoError(str(exc) or None, cause=exc) from exc

    async def trim_video(
        self,
        start_ms: int,
        end_ms: int,
        include_audio: bool = True,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> str:
        asset = self._require_asset()
        time_range = self._validator.validate(start_ms, end_ms, asset.duration_ms)
        if asset.is_protected or not asset.is_exportable:
            raise UnsupportedFormatError()
        if self._pipeline.is_busy:
            raise ExportBusyError()

        composition = self._builder.build(asset, include_audio)
        try:
            return await self._pipeline.export(
                composition, time_range, self._output_dir, progress_callback
            )
        except VideoTrimmerError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error while trimming %s", asset.path)
            raise UnknownVideoError(str(exc) or None, cause=exc) from exc

    async def generate_thumbnail(
        self,
        position_ms: int,
        width: Optional[int] = None,
        height: Optional[int] = None,
        quality: Optional[int] = None,
    ) -> str:
        asset = self._require_asset()
        target_size = Size(width, height) if width is not None and height is not None else None
        return await self._thumbnails.extract_frame(
            asset,
            position_ms,
            self._output_dir,
            target_size=target_size,
            quality=self._default_quality if quality is None else quality,
        )

    def clear_cache(self) -> None:
        self._cache.clear(self._cache_directories)

    def cancel_trim(self) -> bool:
        return self._pipeline.cancel()

    def release(self) -> None:
        """Cancel any running export and drop the loaded asset."""
        self._pipeline.cancel()
        self._asset = None
        logger.info("Engine released")

    def _require_asset(self) -> LoadedAsset:
        if self._asset is None:
            raise NoVideoLoadedError()
        return self._asset
