from __future__ import annotations


class SchedulerCallError(Exception):
    """Base class for errors raised while building or checking scheduler calls."""


class MalformedCallError(SchedulerCallError, ValueError):
    """A call whose discriminant and payload disagree. Never transmitted."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"invalid call: {reason}")


class UnsupportedFiltersError(SchedulerCallError, TypeError):
    """Filters attached to a call kind other than ACCEPT or DECLINE.

    This is a programming error; callers are not expected to recover from it.
    """

    def __init__(self, call_type: str) -> None:
        self.call_type = call_type
        super().__init__(f"filters not supported for type {call_type}")
