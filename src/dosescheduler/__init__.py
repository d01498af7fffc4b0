"""Deterministic medication dose scheduling.

Orders are expanded into candidate doses over a fixed horizon, competing
doses inside a patient's mutual-exclusion group are resolved greedily by
priority, and the survivors are rendered as dose events with stable
content-derived identifiers.
"""

from .config import DoseSchedulerConfig
from .errors import DoseSchedulerError, MalformedTimestamp, ValidationError
from .models import CandidateDose, DoseEvent, Order
from .pipeline import DoseScheduleResult, build_dose_schedule, generate_dose_events

__all__ = [
    "CandidateDose",
    "DoseEvent",
    "DoseScheduleResult",
    "DoseSchedulerConfig",
    "DoseSchedulerError",
    "MalformedTimestamp",
    "Order",
    "ValidationError",
    "build_dose_schedule",
    "generate_dose_events",
]
