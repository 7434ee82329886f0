"""Pillow still-image encoder for extracted frames.

Implements :class:`ThumbnailPort` for the hexagonal architecture.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image

from backend.src.core.value_objects.size import Size

logger = logging.getLogger(__name__)

# Pillow rotates counter-clockwise, so a clockwise quarter turn is ROTATE_270.
_TRANSPOSE_FOR_TURNS: dict[int, Image.Transpose] = {
    1: Image.Transpose.ROTATE_270,
    2: Image.Transpose.ROTATE_180,
    3: Image.Transpose.ROTATE_90,
}


class PILThumbnailAdapter:
    """Rotates, rescales and JPEG-encodes a frame.

    Satisfies :class:`~backend.src.ports.outbound.thumbnail_port.ThumbnailPort`.
    """

    def encode(
        self,
        image: Image.Image,
        output_path: str,
        quarter_turns: int = 0,
        target_size: Optional[Size] = None,
        quality: int = 80,
    ) -> str:
        img = image if image.mode == "RGB" else image.convert("RGB")

        transpose = _TRANSPOSE_FOR_TURNS.get(quarter_turns % 4)
        if transpose is not None:
            img = img.transpose(transpose)

        # exact target dimensions; aspect ratio is the caller's concern
        if target_size is not None and not target_size.is_empty:
            img = img.resize(target_size.as_tuple(), Image.Resampling.LANCZOS)

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        img.save(output_path, format="JPEG", quality=clamp_quality(quality), optimize=True)
        logger.info("Thumbnail written: %s (%dx%d, q=%d)", output_path, img.width, img.height, quality)
        return str(output_path)


def clamp_quality(quality: int) -> int:
    return max(0, min(100, int(quality)))
