"""OpenCV-based single frame grabber.

Implements :class:`FrameGrabberPort` for thumbnail extraction.
"""
from __future__ import annotations

import logging

import cv2
from PIL import Image

logger = logging.getLogger(__name__)


class OpenCVFrameGrabber:
    """Grabs one decoded frame near a timestamp using OpenCV.

    Satisfies :class:`~backend.src.ports.outbound.frame_grabber_port.FrameGrabberPort`.

    Seeking lands on the nearest decodable frame; it is not frame accurate.
    Autorotation is switched off because the thumbnail encoder applies the
    asset's preferred transform itself.
    """

    def grab_frame(self, video_path: str, position_ms: int) -> Image.Image:
        cap = cv2.VideoCapture(video_path)
        if not cap.isOpened():
            raise ValueError(f"Cannot open video file: {video_path}")

        try:
            cap.set(cv2.CAP_PROP_ORIENTATION_AUTO, 0)
            cap.set(cv2.CAP_PROP_POS_MSEC, float(max(position_ms, 0)))

            ret, frame = cap.read()
            if not ret or frame is None:
                raise RuntimeError(f"Failed to read frame at {position_ms}ms")

            actual_ms = cap.get(cv2.CAP_PROP_POS_MSEC)
            logger.debug("Grabbed frame for %dms (decoder at %.0fms)", position_ms, actual_ms)
            return Image.fromarray(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
        finally:
            cap.release()
