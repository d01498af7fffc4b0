"""High-level entry points for the dose scheduling pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from tqdm import tqdm

from dosescheduler.config import DEFAULT_CONFIG, DoseSchedulerConfig
from dosescheduler.conflicts import resolve_overlaps
from dosescheduler.events import assemble_events
from dosescheduler.models import CandidateDose, DoseEvent
from dosescheduler.occurrences import generate_candidates
from dosescheduler.utils.time import local_midnight
from dosescheduler.validation import OrderLike, validate_horizon_days, validate_orders

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass
class DoseScheduleResult:
    """Events produced by a scheduling run plus run diagnostics."""

    events: List[DoseEvent] = field(default_factory=list)
    order_count: int = 0
    candidate_count: int = 0
    rejected_count: int = 0
    candidates_per_order: Dict[str, int] = field(default_factory=dict)

    @property
    def event_count(self) -> int:
        return len(self.events)


def build_dose_schedule(
    start_date: str,
    days: int,
    orders: Iterable[OrderLike],
    config: Optional[DoseSchedulerConfig] = None,
) -> DoseScheduleResult:
    """Run every pipeline stage and return events with diagnostics.

    The horizon length is checked before any order is looked at; orders are
    then validated in input order and the first violation aborts the run.

    Args:
        start_date: Horizon start as ``YYYY-MM-DD``.
        days: Horizon length in whole days.
        orders: :class:`~dosescheduler.models.Order` instances or mappings.
        config: Scheduling constants; defaults to :data:`DEFAULT_CONFIG`.

    Raises:
        ValidationError: Bad horizon length or order field.
        MalformedTimestamp: Unparseable start date or order timestamp.
    """
    config = config or DEFAULT_CONFIG

    validate_horizon_days(days, config)
    validated = validate_orders(orders, config)
    local_midnight(start_date, 0)

    logger.info(
        f"Scheduling {len(validated)} orders over {days} day(s) from {start_date}"
    )

    result = DoseScheduleResult(order_count=len(validated))
    candidates: List[CandidateDose] = []

    iterator = validated
    if config.show_progress:
        iterator = tqdm(validated, desc="Generating doses", unit="order", dynamic_ncols=True)

    for order in iterator:
        generated = generate_candidates(start_date, days, order, config)
        logger.debug(f"Order {order.order_id}: {len(generated)} candidate doses")
        result.candidates_per_order[order.order_id] = (
            result.candidates_per_order.get(order.order_id, 0) + len(generated)
        )
        candidates.extend(generated)

    winners = resolve_overlaps(candidates, config)
    result.candidate_count = len(candidates)
    result.rejected_count = len(candidates) - len(winners)
    result.events = assemble_events(winners)

    logger.info(
        f"Accepted {len(winners)} of {len(candidates)} candidate doses "
        f"({result.rejected_count} rejected by overlap resolution)"
    )
    return result


def generate_dose_events(
    start_date: str,
    days: int,
    orders: Iterable[OrderLike],
    config: Optional[DoseSchedulerConfig] = None,
) -> List[DoseEvent]:
    """Return the scheduled dose events for ``orders`` over the horizon."""
    return build_dose_schedule(start_date, days, orders, config).events


__all__ = ["DoseScheduleResult", "build_dose_schedule", "generate_dose_events"]
