from backend.src.application.artifacts import ArtifactNamer
from backend.src.application.asset_loader import AssetLoader
from backend.src.application.cache_manager import CacheManager
from backend.src.application.export_pipeline import ExportPipeline
from backend.src.application.thumbnail_extractor import ThumbnailExtractor
from backend.src.application.video_trimmer_service import VideoTrimmerService

__all__ = [
    "ArtifactNamer",
    "AssetLoader",
    "CacheManager",
    "ExportPipeline",
    "ThumbnailExtractor",
    "VideoTrimmerService",
]
