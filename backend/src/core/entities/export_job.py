"""ExportJob entity - state machine for a single trim export."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from backend.src.core.value_objects.time_range import TimeRange


class ExportState(str, Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    COMPOSING = "composing"
    EXPORTING = "exporting"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({ExportState.COMPLETED, ExportState.FAILED, ExportState.CANCELLED})

_ALLOWED_TRANSITIONS: dict[ExportState, frozenset[ExportState]] = {
    ExportState.IDLE: frozenset({ExportState.PREPARING, ExportState.FAILED, ExportState.CANCELLED}),
    ExportState.PREPARING: frozenset({ExportState.COMPOSING, ExportState.FAILED, ExportState.CANCELLED}),
    ExportState.COMPOSING: frozenset({ExportState.EXPORTING, ExportState.FAILED, ExportState.CANCELLED}),
    ExportState.EXPORTING: TERMINAL_STATES,
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ExportJob:
    """A single export invocation.

    Identity is the generated ``output_path``; it is empty until the job
    leaves ``PREPARING``.
    """

    output_path: str = ""
    state: ExportState = ExportState.IDLE
    time_range: Optional[TimeRange] = None
    cancel_requested: bool = False
    backend_handle: Optional[asyncio.Task[Any]] = None
    progress: float = 0.0
    error: Optional[str] = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def transition(self, new_state: ExportState) -> None:
        allowed = _ALLOWED_TRANSITIONS.get(self.state, frozenset())
        if new_state not in allowed:
            raise ValueError(f"Illegal export transition {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.updated_at = _now()

    def prepare(self, output_path: str) -> None:
        self.transition(ExportState.PREPARING)
        self.output_path = output_path

    def compose(self, time_range: TimeRange) -> None:
        self.transition(ExportState.COMPOSING)
        self.time_range = time_range

    def start_exporting(self) -> None:
        self.transition(ExportState.EXPORTING)

    def complete(self) -> None:
        self.transition(ExportState.COMPLETED)
        self.progress = 1.0
        self.backend_handle = None

    def fail(self, error: str) -> None:
        self.transition(ExportState.FAILED)
        self.error = error
        self.backend_handle = None

    def cancel(self) -> None:
        self.transition(ExportState.CANCELLED)
        self.error = "cancelled"
        self.backend_handle = None

    def request_cancel(self) -> bool:
        """Flag the job for cancellation; returns False once it is terminal."""
        if self.is_terminal:
            return False
        self.cancel_requested = True
        if self.backend_handle is not None and not self.backend_handle.done():
            self.backend_handle.cancel()
        return True

    def update_progress(self, fraction: float) -> None:
        self.progress = min(max(fraction, 0.0), 1.0)
        self.updated_at = _now()
