"""Port for still-image encoding of extracted frames."""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable
if TYPE_CHECKING:
    from PIL import Image
    from backend.src.core.value_objects.size import Size


@runtime_checkable
class ThumbnailPort(Protocol):
    def encode(
        self,
        image: Image.Image,
        output_path: str,
        quarter_turns: int = 0,
        target_size: Optional[Size] = None,
        quality: int = 80,
    ) -> str: ...
