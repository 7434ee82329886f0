"""Composition entity - the derived timeline handed to the render backend."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from backend.src.core.entities.loaded_asset import AssetTrack
from backend.src.core.value_objects.affine_transform import AffineTransform
from backend.src.core.value_objects.size import Size
from backend.src.core.value_objects.time_range import TimeRange


@dataclass(frozen=True)
class CompositionSegment:
    """A source track inserted into the composition at ``insert_at_ms``."""

    track: AssetTrack
    source_range: TimeRange
    insert_at_ms: int = 0


@dataclass(frozen=True)
class RenderInstruction:
    """Orientation-corrected layer instruction for the video segment.

    ``time_range`` starts out spanning the whole composition and is narrowed
    to the accepted trim window before an export starts.
    """

    render_size: Size
    transform: AffineTransform
    time_range: TimeRange

    def narrowed_to(self, time_range: TimeRange) -> RenderInstruction:
        if not time_range.within(self.time_range):
            raise ValueError(
                f"Cannot narrow instruction {self.time_range} to wider range {time_range}"
            )
        return replace(self, time_range=time_range)


@dataclass(frozen=True)
class Composition:
    source_path: str
    duration_ms: int
    video: CompositionSegment
    instruction: RenderInstruction
    audio: Optional[CompositionSegment] = None

    @property
    def includes_audio(self) -> bool:
        return self.audio is not None

    def narrowed_to(self, time_range: TimeRange) -> Composition:
        return replace(self, instruction=self.instruction.narrowed_to(time_range))
