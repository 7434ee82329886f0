"""TimeRange value object representing a trim window in milliseconds."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TimeRange:
    """Immutable half-open range ``[start_ms, end_ms)``.

    Only the basic shape (non-negative, end after start) is checked here;
    the bound against an asset's duration is enforced by the trim validator.
    """

    start_ms: int
    end_ms: int

    def __post_init__(self) -> None:
        if self.start_ms < 0:
            raise ValueError(f"start_ms ({self.start_ms}) must be non-negative")
        if self.end_ms <= self.start_ms:
            raise ValueError(
                f"end_ms ({self.end_ms}) must be greater than start_ms ({self.start_ms})"
            )

    @classmethod
    def full(cls, duration_ms: int) -> TimeRange:
        return cls(0, duration_ms)

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms

    @property
    def start_seconds(self) -> float:
        return self.start_ms / 1000.0

    @property
    def end_seconds(self) -> float:
        return self.end_ms / 1000.0

    @property
    def duration_seconds(self) -> float:
        return self.duration_ms / 1000.0

    def contains(self, timestamp_ms: int) -> bool:
        return self.start_ms <= timestamp_ms < self.end_ms

    def within(self, other: TimeRange) -> bool:
        return other.start_ms <= self.start_ms and self.end_ms <= other.end_ms
