"""Exception types raised by the dose scheduler."""

from __future__ import annotations

from typing import Optional


class DoseSchedulerError(Exception):
    """Base class for every error raised while building a dose schedule."""


class ValidationError(DoseSchedulerError, ValueError):
    """An order or horizon parameter is outside its declared domain.

    ``field`` names the offending input (``"priority"``, ``"days"``, ...) so
    callers can point the user at the value that needs correcting.
    """

    def __init__(self, field: str, message: str, order_id: Optional[str] = None):
        self.field = field
        self.order_id = order_id
        prefix = f"order {order_id!r}: " if order_id else ""
        super().__init__(f"{prefix}{field} {message}")


class MalformedTimestamp(DoseSchedulerError, ValueError):
    """A date or datetime string could not be parsed."""

    def __init__(self, value: object, reason: str = "unrecognised timestamp format"):
        self.value = value
        super().__init__(f"{reason}: {value!r}")


__all__ = ["DoseSchedulerError", "MalformedTimestamp", "ValidationError"]
