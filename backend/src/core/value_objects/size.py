"""Size value object for pixel dimensions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Size:
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def swapped(self) -> Size:
        return Size(self.height, self.width)

    def as_tuple(self) -> tuple[int, int]:
        return self.width, self.height
