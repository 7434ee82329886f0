"""
Composition building - pure domain logic.

Assembles the derived timeline (video segment, optional audio segment and
the orientation-corrected render instruction) from a loaded asset.
"""
from __future__ import annotations

import logging
from typing import Optional

from backend.src.core.entities.composition import Composition, CompositionSegment, RenderInstruction
from backend.src.core.entities.loaded_asset import LoadedAsset
from backend.src.core.exceptions import InvalidVideoTrackError
from backend.src.core.services.orientation_resolver import OrientationResolver
from backend.src.core.value_objects.time_range import TimeRange

logger = logging.getLogger(__name__)


class CompositionBuilder:
    """Builds a full-duration :class:`Composition` for one export call."""

    def __init__(self, resolver: Optional[OrientationResolver] = None):
        self.resolver = resolver or OrientationResolver()

    def build(self, asset: LoadedAsset, include_audio: bool = True) -> Composition:
        video_track = asset.video_track
        if video_track is None:
            raise InvalidVideoTrackError(f"No video track in {asset.path}")
        if asset.duration_ms <= 0:
            raise InvalidVideoTrackError(f"Video has no playable duration: {asset.path}")

        full_range = TimeRange.full(asset.duration_ms)
        video = CompositionSegment(track=video_track, source_range=full_range)

        audio: Optional[CompositionSegment] = None
        if include_audio:
            audio_track = asset.audio_track
            if audio_track is not None:
                audio = CompositionSegment(track=audio_track, source_range=full_range)
            else:
                logger.info("Audio requested but %s has no audio track; omitting", asset.path)

        render_size, transform = self.resolver.resolve(asset.natural_size, asset.preferred_transform)
        instruction = RenderInstruction(
            render_size=render_size,
            transform=transform,
            time_range=full_range,
        )
        return Composition(
            source_path=asset.path,
            duration_ms=asset.duration_ms,
            video=video,
            audio=audio,
            instruction=instruction,
        )
