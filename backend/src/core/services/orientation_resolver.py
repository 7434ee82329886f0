"""
Orientation correction - pure domain logic.

Turns a track's natural size and preferred display transform into the
render size and transform the backend must apply so output plays upright.
"""
from __future__ import annotations

import math

from backend.src.core.value_objects.affine_transform import AffineTransform
from backend.src.core.value_objects.size import Size

DEFAULT_EPSILON = 1e-4


class OrientationResolver:
    """Classifies a preferred transform into one of four right-angle cases."""

    def __init__(self, epsilon: float = DEFAULT_EPSILON):
        self.epsilon = epsilon

    def resolve(
        self, natural_size: Size, preferred_transform: AffineTransform
    ) -> tuple[Size, AffineTransform]:
        """Return ``(render_size, corrected_transform)``.

        Only the translation is rewritten; the linear part is kept so the
        backend rotates exactly as the container asked.
        """
        width, height = natural_size.width, natural_size.height
        theta = preferred_transform.rotation_radians

        if self._is_close(theta, math.pi / 2):
            return natural_size.swapped(), preferred_transform.translated_to(height, 0)
        if self._is_close(theta, -math.pi / 2):
            return natural_size.swapped(), preferred_transform.translated_to(0, width)
        if self._is_close(abs(theta), math.pi):
            return natural_size, preferred_transform.translated_to(width, height)
        return natural_size, preferred_transform.translated_to(0, 0)

    def quarter_turns(self, preferred_transform: AffineTransform) -> int:
        """Clockwise quarter turns (0-3) needed to display the track upright."""
        theta = preferred_transform.rotation_radians
        if self._is_close(theta, math.pi / 2):
            return 1
        if self._is_close(abs(theta), math.pi):
            return 2
        if self._is_close(theta, -math.pi / 2):
            return 3
        return 0

    def _is_close(self, theta: float, target: float) -> bool:
        return abs(theta - target) <= self.epsilon
