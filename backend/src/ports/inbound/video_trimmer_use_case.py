"""Inbound port for the trim-and-export engine."""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable
if TYPE_CHECKING:
    from backend.src.ports.outbound.render_backend_port import ProgressCallback


@runtime_checkable
class VideoTrimmerUseCase(Protocol):
    async def load_video(self, path: str) -> None: ...
    async def trim_video(
        self,
        start_ms: int,
        end_ms: int,
        include_audio: bool = True,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> str: ...
    async def generate_thumbnail(
        self,
        position_ms: int,
        width: Optional[int] = None,
        height: Optional[int] = None,
        quality: int = 80,
    ) -> str: ...
    def clear_cache(self) -> None: ...
    def cancel_trim(self) -> bool: ...
    def release(self) -> None: ...
