"""Port for the render backend that decodes, transforms and encodes pixels."""
from __future__ import annotations
from typing import TYPE_CHECKING, Callable, Optional, Protocol, runtime_checkable
if TYPE_CHECKING:
    from backend.src.core.entities.composition import Composition
    from backend.src.core.value_objects.time_range import TimeRange

ProgressCallback = Callable[[float], None]


@runtime_checkable
class RenderBackendPort(Protocol):
    """Renders ``composition`` clipped to ``time_range`` into ``output_path``.

    Cancelling the awaiting task must stop the backend before the
    ``CancelledError`` propagates.
    """

    async def render(
        self,
        composition: Composition,
        time_range: TimeRange,
        output_path: str,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None: ...
