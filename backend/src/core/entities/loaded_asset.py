"""LoadedAsset entity representing an opened, metadata-resolved source video."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from backend.src.core.value_objects.affine_transform import AffineTransform
from backend.src.core.value_objects.size import Size


class MediaType(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"


@dataclass(frozen=True)
class AssetTrack:
    """A single elementary stream inside the source container."""

    index: int
    media_type: MediaType
    codec: str = ""


@dataclass
class LoadedAsset:
    """Handle to a decoded container and the metadata the engine needs.

    Owned by exactly one engine instance; replaced wholesale on every
    successful load.
    """

    path: str
    tracks: list[AssetTrack] = field(default_factory=list)
    duration_ms: int = 0
    is_protected: bool = False
    natural_size: Size = field(default_factory=lambda: Size(0, 0))
    preferred_transform: AffineTransform = field(default_factory=AffineTransform.identity)
    is_exportable: bool = True

    @property
    def video_track(self) -> Optional[AssetTrack]:
        return next((t for t in self.tracks if t.media_type is MediaType.VIDEO), None)

    @property
    def audio_track(self) -> Optional[AssetTrack]:
        return next((t for t in self.tracks if t.media_type is MediaType.AUDIO), None)

    @property
    def has_audio(self) -> bool:
        return self.audio_track is not None

    @property
    def duration_seconds(self) -> float:
        return self.duration_ms / 1000.0

    @property
    def resolution_str(self) -> str:
        return f"{self.natural_size.width}x{self.natural_size.height}"
