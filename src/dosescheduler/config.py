"""Configuration for the dose scheduling pipeline.

Every scheduling constant lives on one frozen dataclass so that the pipeline
stages never hard-code the anchor hour, exclusion window or domain ranges.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping

logger = logging.getLogger(__name__)

_INTEGER_FIELDS = (
    "anchor_hour",
    "overlap_window_minutes",
    "min_horizon_days",
    "max_horizon_days",
    "max_frequency_per_day",
    "min_priority",
    "max_priority",
)


@dataclass(frozen=True)
class DoseSchedulerConfig:
    """Master configuration for a dose scheduling run."""

    # ============================================================================
    # DAILY TEMPLATE
    # ============================================================================

    anchor_hour: int = 8
    """Local hour (in each order's own offset) of the first dose of a cycle."""

    # ============================================================================
    # CONFLICT RESOLUTION
    # ============================================================================

    overlap_window_minutes: int = 60
    """Doses in the same exclusion group must be at least this far apart."""

    # ============================================================================
    # DOMAIN RANGES
    # ============================================================================

    min_horizon_days: int = 1
    """Shortest accepted scheduling horizon, in whole days."""

    max_horizon_days: int = 30
    """Longest accepted scheduling horizon, in whole days."""

    max_frequency_per_day: int = 6
    """Upper bound on ``frequency_per_day`` (the lower bound is always 1)."""

    min_priority: int = 1
    """Lowest accepted order priority."""

    max_priority: int = 5
    """Highest accepted order priority. Higher priorities win conflicts."""

    # ============================================================================
    # BEHAVIOR FLAGS
    # ============================================================================

    show_progress: bool = False
    """Show a progress bar while generating candidate doses."""

    # ============================================================================
    # VALIDATION
    # ============================================================================

    def __post_init__(self) -> None:
        """Validate configuration consistency."""
        for name in _INTEGER_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError("%s must be an integer, got %r" % (name, value))

        if not isinstance(self.show_progress, bool):
            raise ValueError(
                "show_progress must be a boolean, got %r" % (self.show_progress,)
            )

        if not 0 <= self.anchor_hour <= 23:
            raise ValueError(
                "anchor_hour must be in [0, 23], got %s" % (self.anchor_hour,)
            )

        if self.overlap_window_minutes <= 0:
            raise ValueError(
                "overlap_window_minutes must be positive, got %s"
                % (self.overlap_window_minutes,)
            )

        if self.min_horizon_days < 1 or self.min_horizon_days > self.max_horizon_days:
            raise ValueError(
                "horizon day range must satisfy 1 <= min <= max, got [%s, %s]"
                % (self.min_horizon_days, self.max_horizon_days)
            )

        if self.max_frequency_per_day < 1:
            raise ValueError(
                "max_frequency_per_day must be at least 1, got %s"
                % (self.max_frequency_per_day,)
            )

        if self.min_priority > self.max_priority:
            raise ValueError(
                "priority range must satisfy min <= max, got [%s, %s]"
                % (self.min_priority, self.max_priority)
            )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "DoseSchedulerConfig":
        """Build a config from a JSON-style mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        return cls(**{key: value for key, value in mapping.items() if key in known})


DEFAULT_CONFIG = DoseSchedulerConfig()


__all__ = ["DEFAULT_CONFIG", "DoseSchedulerConfig"]
