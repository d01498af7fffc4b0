"""Greedy overlap resolution within mutual-exclusion groups."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

from dosescheduler.config import DEFAULT_CONFIG, DoseSchedulerConfig
from dosescheduler.models import CandidateDose
from dosescheduler.utils.time import MS_PER_MINUTE

logger = logging.getLogger(__name__)

GroupKey = Tuple[str, str]


def resolution_order(candidate: CandidateDose) -> Tuple[int, str, int]:
    """Sort key for greedy acceptance: priority desc, order id asc, instant asc."""
    return (-candidate.priority, candidate.order_id, candidate.instant_ms)


def group_candidates(
    candidates: Iterable[CandidateDose],
) -> Tuple[Dict[GroupKey, List[CandidateDose]], List[CandidateDose]]:
    """Split candidates into (patient, group) buckets and ungrouped pass-throughs."""
    grouped: Dict[GroupKey, List[CandidateDose]] = {}
    passthrough: List[CandidateDose] = []
    for candidate in candidates:
        if not candidate.group:
            passthrough.append(candidate)
            continue
        grouped.setdefault((candidate.patient_id, candidate.group), []).append(candidate)
    return grouped, passthrough


def _resolve_group(
    candidates: List[CandidateDose], window_minutes: int
) -> List[CandidateDose]:
    window_ms = window_minutes * MS_PER_MINUTE
    accepted: List[CandidateDose] = []
    # At most one accepted dose can sit in any one-minute bucket.
    accepted_by_minute: Dict[int, CandidateDose] = {}

    for candidate in sorted(candidates, key=resolution_order):
        minute = candidate.instant_ms // MS_PER_MINUTE
        conflict = False
        for bucket in range(minute - window_minutes, minute + window_minutes + 1):
            other = accepted_by_minute.get(bucket)
            if other is not None and abs(candidate.instant_ms - other.instant_ms) < window_ms:
                conflict = True
                break
        if conflict:
            continue
        accepted_by_minute[minute] = candidate
        accepted.append(candidate)

    return accepted


def resolve_overlaps(
    candidates: Iterable[CandidateDose],
    config: DoseSchedulerConfig = DEFAULT_CONFIG,
) -> List[CandidateDose]:
    """Keep a non-overlapping subset of each exclusion group.

    Ungrouped candidates are always kept. Inside a group, candidates are
    visited in :func:`resolution_order` and a candidate is dropped when an
    already accepted one lies strictly within
    ``config.overlap_window_minutes`` of it. Accepted doses are never
    displaced by later ones.
    """
    grouped, kept = group_candidates(candidates)
    for (patient_id, group), members in grouped.items():
        winners = _resolve_group(members, config.overlap_window_minutes)
        if len(winners) < len(members):
            logger.debug(
                f"Group {group!r} for patient {patient_id}: "
                f"kept {len(winners)} of {len(members)} doses"
            )
        kept.extend(winners)
    return kept


__all__ = ["group_candidates", "resolution_order", "resolve_overlaps"]
