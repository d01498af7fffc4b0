"""Candidate dose generation for a single order."""

from __future__ import annotations

import logging
import math
from typing import List

import numpy as np

from dosescheduler.config import DEFAULT_CONFIG, DoseSchedulerConfig
from dosescheduler.models import CandidateDose, Order
from dosescheduler.utils.time import (
    MINUTES_PER_DAY,
    MS_PER_DAY,
    MS_PER_MINUTE,
    local_midnight,
    parse_instant,
)

logger = logging.getLogger(__name__)


def daily_dose_offsets(frequency_per_day: int) -> np.ndarray:
    """Minute offsets of each dose from the daily anchor.

    Dose ``i`` of ``n`` falls ``round(i * 1440 / n)`` minutes after the
    anchor, rounding halves up.

    >>> daily_dose_offsets(3).tolist()
    [0, 480, 960]
    """
    steps = np.arange(frequency_per_day, dtype=float) * (
        MINUTES_PER_DAY / frequency_per_day
    )
    return np.floor(steps + 0.5).astype(np.int64)


def generate_candidates(
    start_date: str,
    days: int,
    order: Order,
    config: DoseSchedulerConfig = DEFAULT_CONFIG,
) -> List[CandidateDose]:
    """Enumerate the order's dose instants inside the scheduling horizon.

    The horizon runs from local midnight of ``start_date`` (in the order's
    own offset) for ``days`` whole days. Doses follow a fixed daily template
    anchored at ``config.anchor_hour`` local time and are kept only when they
    fall inside both the horizon and the order's active window, bounds
    included. ``days + 1`` cycles are laid out so that doses pushed past the
    nominal end by the offset still get considered.

    Args:
        start_date: Horizon start as ``YYYY-MM-DD``.
        days: Horizon length in whole days (already validated).
        order: A validated order.
        config: Scheduling constants.

    Returns:
        Candidates in generation order, at most one per instant.
    """
    offset = int(order.tz_offset_minutes)

    horizon_start = local_midnight(start_date, offset)
    horizon_end = horizon_start + days * MS_PER_DAY

    order_start = parse_instant(order.start_datetime, offset)
    order_end = (
        math.inf
        if order.end_datetime is None
        else parse_instant(order.end_datetime, offset)
    )

    effective_start = max(horizon_start, order_start)
    effective_end = min(horizon_end, order_end)
    if effective_start > effective_end:
        logger.debug(f"Order {order.order_id} is inactive over the horizon")
        return []

    first_anchor = horizon_start + config.anchor_hour * 60 * MS_PER_MINUTE
    cycle_anchors = first_anchor + np.arange(days + 1, dtype=np.int64) * MS_PER_DAY
    dose_offsets = daily_dose_offsets(int(order.frequency_per_day)) * MS_PER_MINUTE
    instants = (cycle_anchors[:, None] + dose_offsets[None, :]).ravel()

    mask = (instants >= effective_start) & (instants <= effective_end)
    kept = dict.fromkeys(int(instant) for instant in instants[mask])

    group = order.do_not_overlap_group or None
    window_ms = int(order.window_minutes) * MS_PER_MINUTE
    return [
        CandidateDose(
            order_id=order.order_id,
            patient_id=order.patient_id,
            group=group,
            priority=int(order.priority),
            instant_ms=instant,
            tz_offset_minutes=offset,
            window_ms=window_ms,
        )
        for instant in kept
    ]


__all__ = ["daily_dose_offsets", "generate_candidates"]
