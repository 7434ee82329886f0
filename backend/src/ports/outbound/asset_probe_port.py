"""Port for resolving container metadata of a source video."""
from __future__ import annotations
from typing import TYPE_CHECKING, Protocol, runtime_checkable
if TYPE_CHECKING:
    from backend.src.core.entities.loaded_asset import LoadedAsset


@runtime_checkable
class AssetProbePort(Protocol):
    async def probe(self, video_path: str) -> LoadedAsset: ...
