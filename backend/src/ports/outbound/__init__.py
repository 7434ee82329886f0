from backend.src.ports.outbound.asset_probe_port import AssetProbePort
from backend.src.ports.outbound.frame_grabber_port import FrameGrabberPort
from backend.src.ports.outbound.render_backend_port import ProgressCallback, RenderBackendPort
from backend.src.ports.outbound.thumbnail_port import ThumbnailPort

__all__ = [
    "AssetProbePort",
    "RenderBackendPort",
    "ProgressCallback",
    "FrameGrabberPort",
    "ThumbnailPort",
]
