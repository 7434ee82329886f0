"""2D affine transform value object.

Uses the row-vector convention of display matrices stored in MP4/MOV
containers::

    x' = a*x + c*y + tx
    y' = b*x + d*y + ty

With a y-down pixel grid, a positive rotation angle turns the picture
clockwise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class AffineTransform:
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    @classmethod
    def identity(cls) -> AffineTransform:
        return cls()

    @classmethod
    def rotation(cls, degrees: float) -> AffineTransform:
        """Pure rotation, snapped to exact values for right angles."""
        radians = math.radians(degrees)
        cos_v, sin_v = math.cos(radians), math.sin(radians)
        if degrees % 90 == 0:
            cos_v, sin_v = float(round(cos_v)), float(round(sin_v))
        return cls(a=cos_v, b=sin_v, c=-sin_v, d=cos_v)

    @property
    def rotation_radians(self) -> float:
        return math.atan2(self.b, self.a)

    @property
    def rotation_degrees(self) -> float:
        return math.degrees(self.rotation_radians)

    @property
    def is_identity(self) -> bool:
        return self.is_close(AffineTransform.identity())

    def translated_to(self, tx: float, ty: float) -> AffineTransform:
        """Return a copy with the translation replaced (not accumulated)."""
        return replace(self, tx=float(tx), ty=float(ty))

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return (
            self.a * x + self.c * y + self.tx,
            self.b * x + self.d * y + self.ty,
        )

    def is_close(self, other: AffineTransform, tol: float = 1e-6) -> bool:
        return all(
            math.isclose(mine, theirs, abs_tol=tol)
            for mine, theirs in zip(self.as_tuple(), other.as_tuple())
        )

    def as_tuple(self) -> tuple[float, float, float, float, float, float]:
        return self.a, self.b, self.c, self.d, self.tx, self.ty
