from backend.src.core.entities.composition import Composition, CompositionSegment, RenderInstruction
from backend.src.core.entities.export_job import ExportJob, ExportState
from backend.src.core.entities.loaded_asset import AssetTrack, LoadedAsset, MediaType

__all__ = [
    "AssetTrack", "LoadedAsset", "MediaType",
    "Composition", "CompositionSegment", "RenderInstruction",
    "ExportJob", "ExportState",
]
