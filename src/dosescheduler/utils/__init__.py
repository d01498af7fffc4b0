"""Utility functions for the dose scheduler."""

from .time import format_instant, format_offset, local_midnight, parse_instant

__all__ = ["format_instant", "format_offset", "local_midnight", "parse_instant"]
