"""Port for grabbing a single decoded frame from a video file."""
from __future__ import annotations
from typing import TYPE_CHECKING, Protocol, runtime_checkable
if TYPE_CHECKING:
    from PIL import Image


@runtime_checkable
class FrameGrabberPort(Protocol):
    def grab_frame(self, video_path: str, position_ms: int) -> Image.Image: ...
