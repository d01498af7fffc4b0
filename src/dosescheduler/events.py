"""Conversion of winning candidates into dose events."""

from __future__ import annotations

import hashlib
from typing import Iterable, List

from dosescheduler.models import SCHEDULED_STATUS, CandidateDose, DoseEvent
from dosescheduler.utils.time import format_instant


def event_identifier(order_id: str, scheduled_time: str) -> str:
    """SHA-256 hex digest of the order id and rendered local timestamp."""
    return hashlib.sha256(f"{order_id}|{scheduled_time}".encode("utf-8")).hexdigest()


def assemble_events(candidates: Iterable[CandidateDose]) -> List[DoseEvent]:
    """Render accepted candidates as events ordered by instant, then order id."""
    ordered = sorted(candidates, key=lambda c: (c.instant_ms, c.order_id))
    events: List[DoseEvent] = []
    for candidate in ordered:
        scheduled = format_instant(candidate.instant_ms, candidate.tz_offset_minutes)
        events.append(
            DoseEvent(
                event_id=event_identifier(candidate.order_id, scheduled),
                order_id=candidate.order_id,
                scheduled_time=scheduled,
                status=SCHEDULED_STATUS,
            )
        )
    return events


__all__ = ["assemble_events", "event_identifier"]
