"""Record types flowing through the dose scheduling pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from dosescheduler.errors import ValidationError

SCHEDULED_STATUS = "SCHEDULED"

_REQUIRED_FIELDS = (
    "order_id",
    "patient_id",
    "tz_offset_minutes",
    "start_datetime",
    "frequency_per_day",
    "window_minutes",
    "priority",
)


@dataclass(frozen=True)
class Order:
    """A standing medication order.

    ``start_datetime`` and ``end_datetime`` are local to
    ``tz_offset_minutes`` unless they carry their own zone marker. Field
    ranges are checked by :func:`dosescheduler.validation.validate_order`,
    not here, so that a batch can report the first bad order in input order.
    """

    order_id: str
    patient_id: str
    tz_offset_minutes: int
    start_datetime: str
    frequency_per_day: int
    window_minutes: int
    priority: int
    end_datetime: Optional[str] = None
    do_not_overlap_group: Optional[str] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "Order":
        """Build an order from a JSON-style record.

        Raises:
            ValidationError: If a required field is absent.
        """
        order_id = mapping.get("order_id")
        for name in _REQUIRED_FIELDS:
            if mapping.get(name) is None:
                raise ValidationError(name, "is required", order_id=order_id)
        return cls(
            order_id=mapping["order_id"],
            patient_id=mapping["patient_id"],
            tz_offset_minutes=mapping["tz_offset_minutes"],
            start_datetime=mapping["start_datetime"],
            frequency_per_day=mapping["frequency_per_day"],
            window_minutes=mapping["window_minutes"],
            priority=mapping["priority"],
            end_datetime=mapping.get("end_datetime"),
            do_not_overlap_group=mapping.get("do_not_overlap_group"),
        )


@dataclass(frozen=True)
class CandidateDose:
    """A generated dose instant awaiting conflict resolution."""

    order_id: str
    patient_id: str
    group: Optional[str]
    priority: int
    instant_ms: int
    tz_offset_minutes: int
    window_ms: int


@dataclass(frozen=True)
class DoseEvent:
    """A finalized scheduled administration."""

    event_id: str
    order_id: str
    scheduled_time: str
    status: str = SCHEDULED_STATUS

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


__all__ = ["CandidateDose", "DoseEvent", "Order", "SCHEDULED_STATUS"]
