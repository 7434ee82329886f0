"""
Dependency injection container.
Wires together ports and adapters based on configuration.
"""
from __future__ import annotations

import logging
from typing import Optional

from backend.src.infrastructure.config import Settings, get_settings
from backend.src.infrastructure.logging_config import setup_logging
from backend.src.infrastructure.render_context import RenderContext

logger = logging.getLogger(__name__)


class ApplicationContainer:
    """Simplified container that builds concrete instances from settings.

    Usage::

        container = ApplicationContainer(settings)
        engine = container.video_trimmer_service()
    """

    def __init__(self, settings: Optional[Settings] = None, render_context: Optional[RenderContext] = None):
        self.settings = settings or Settings()
        self.render_context = render_context or RenderContext()
        self._cache: dict[str, object] = {}

    def _get_or_create(self, key: str, factory):
        if key not in self._cache:
            self._cache[key] = factory(self.settings)
        return self._cache[key]

    # ── Lazy factory helpers ──────────────────────────────────────

    @staticmethod
    def _build_orientation_resolver(settings: Settings):
        from backend.src.core.services.orientation_resolver import OrientationResolver
        return OrientationResolver(epsilon=settings.orientation.epsilon)

    @staticmethod
    def _build_asset_probe(settings: Settings):
        from backend.src.adapters.outbound.ffmpeg.ffprobe_asset_probe import FFprobeAssetProbe
        return FFprobeAssetProbe(
            ffprobe_path=settings.ffmpeg.ffprobe_path,
            timeout=settings.ffmpeg.probe_timeout,
        )

    def _build_render_backend(self, settings: Settings):
        from backend.src.adapters.outbound.ffmpeg.ffmpeg_render_backend import FFmpegRenderBackend
        return FFmpegRenderBackend(
            config=settings.ffmpeg.model_dump(),
            resolver=self.orientation_resolver(),
        )

    @staticmethod
    def _build_frame_grabber(settings: Settings):
        from backend.src.adapters.outbound.media.opencv_frames import OpenCVFrameGrabber
        return OpenCVFrameGrabber()

    @staticmethod
    def _build_thumbnail(settings: Settings):
        from backend.src.adapters.outbound.media.pil_thumbnail import PILThumbnailAdapter
        return PILThumbnailAdapter()

    @staticmethod
    def _build_artifact_namer(settings: Settings):
        from backend.src.application.artifacts import ArtifactNamer
        return ArtifactNamer(prefix=settings.cache.prefix)

    @staticmethod
    def _build_cache_manager(settings: Settings):
        from backend.src.application.cache_manager import CacheManager
        return CacheManager(prefix=settings.cache.prefix, extensions=settings.cache.tracked_extensions)

    # ── Port accessors ─────────────────────────────────────────────

    def orientation_resolver(self):
        return self._get_or_create("orientation_resolver", self._build_orientation_resolver)

    def asset_probe(self):
        return self._get_or_create("asset_probe", self._build_asset_probe)

    def render_backend(self):
        return self._get_or_create("render_backend", self._build_render_backend)

    def frame_grabber(self):
        return self._get_or_create("frame_grabber", self._build_frame_grabber)

    def thumbnail(self):
        return self._get_or_create("thumbnail", self._build_thumbnail)

    def artifact_namer(self):
        return self._get_or_create("artifact_namer", self._build_artifact_namer)

    def cache_manager(self):
        return self._get_or_create("cache_manager", self._build_cache_manager)

    # ── Application services ───────────────────────────────────────

    def video_trimmer_service(self):
        """Return the engine; one per container since it holds the loaded asset."""
        return self._get_or_create("video_trimmer_service", lambda _settings: self.new_video_trimmer_service())

    def new_video_trimmer_service(self):
        """Build an independent engine instance for a separate caller session."""
        from backend.src.application.asset_loader import AssetLoader
        from backend.src.application.export_pipeline import ExportPipeline
        from backend.src.application.thumbnail_extractor import ThumbnailExtractor
        from backend.src.application.video_trimmer_service import VideoTrimmerService
        from backend.src.core.services.composition_builder import CompositionBuilder

        cache = self.settings.cache
        resolver = self.orientation_resolver()
        return VideoTrimmerService(
            loader=AssetLoader(self.asset_probe()),
            pipeline=ExportPipeline(
                backend=self.render_backend(),
                namer=self.artifact_namer(),
                render_context=self.render_context,
                extension=cache.video_extension,
            ),
            thumbnails=ThumbnailExtractor(
                grabber=self.frame_grabber(),
                encoder=self.thumbnail(),
                namer=self.artifact_namer(),
                resolver=resolver,
                extension=cache.image_extension,
            ),
            cache=self.cache_manager(),
            output_dir=cache.directory,
            cache_directories=cache.directories,
            builder=CompositionBuilder(resolver),
            default_quality=self.settings.thumbnail.default_quality,
        )

    def method_channel(self):
        from backend.src.adapters.inbound.method_channel import MethodChannelHandler
        return self._get_or_create(
            "method_channel", lambda _settings: MethodChannelHandler(self.video_trimmer_service())
        )


def create_container(
    settings: Optional[Settings] = None, render_context: Optional[RenderContext] = None
) -> ApplicationContainer:
    """Startup hook for a host: configure logging, then build the container."""
    settings = settings or get_settings()
    setup_logging(settings.logging.level)
    logger.info("VideoTrimmer engine starting up (env=%s)...", settings.app_env)
    return ApplicationContainer(settings, render_context)
