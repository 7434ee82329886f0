"""Trim range validation, run before any render resource is allocated."""
from __future__ import annotations

from backend.src.core.exceptions import InvalidTimeRangeError
from backend.src.core.value_objects.time_range import TimeRange


class TrimValidator:
    """Checks a requested ``[start_ms, end_ms)`` against an asset's duration."""

    def validate(self, start_ms: int, end_ms: int, duration_ms: int) -> TimeRange:
        if start_ms < 0 or end_ms <= start_ms or end_ms > duration_ms:
            raise InvalidTimeRangeError(
                f"Invalid time range [{start_ms}, {end_ms}) for a {duration_ms}ms video. "
                "Start time must be non-negative and end time must be greater than "
                "start time and within video duration"
            )
        return TimeRange(start_ms=int(start_ms), end_ms=int(end_ms))
