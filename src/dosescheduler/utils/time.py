"""Fixed-offset time arithmetic for the dose scheduler.

Instants are carried around as integer milliseconds since the Unix epoch
(UTC). Wall-clock values are always paired with an explicit offset in
minutes; no zone database is consulted.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from dosescheduler.errors import MalformedTimestamp

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MINUTES_PER_DAY = 24 * 60
MS_PER_DAY = MINUTES_PER_DAY * MS_PER_MINUTE

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$", re.ASCII)
_NAIVE_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2})(?::(\d{2}))?$", re.ASCII
)
_ZONED_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{1,9}))?)?"
    r"(Z|[+-]\d{2}:\d{2})$",
    re.ASCII,
)


def _wall_clock_ms(text: str, *parts: str | None) -> int:
    """Epoch milliseconds of a wall-clock reading taken as if it were UTC."""
    values = [int(part) if part else 0 for part in parts]
    try:
        moment = datetime(*values, tzinfo=timezone.utc)
    except ValueError as exc:
        raise MalformedTimestamp(text, str(exc)) from exc
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def _suffix_minutes(suffix: str) -> int:
    if suffix == "Z":
        return 0
    sign = -1 if suffix[0] == "-" else 1
    hours, minutes = suffix[1:].split(":")
    return sign * (int(hours) * 60 + int(minutes))


def parse_instant(text: str, offset_minutes: int) -> int:
    """Return the absolute instant described by ``text``.

    Parameters
    ----------
    text
        ``YYYY-MM-DD``, ``YYYY-MM-DDTHH:MM[:SS]`` or an ISO-8601 timestamp
        ending in ``Z`` or ``±HH:MM``.
    offset_minutes
        UTC offset used for timestamps without a zone marker. Ignored when
        ``text`` carries its own offset.

    Returns
    -------
    int
        Milliseconds since the Unix epoch.

    Raises
    ------
    MalformedTimestamp
        If ``text`` matches none of the accepted forms or names an
        impossible calendar value.

    Examples
    --------
    >>> parse_instant("2026-01-15T08:00", 60)
    1768460400000
    >>> parse_instant("2026-01-15T07:00:00Z", 60)
    1768460400000
    """
    if not isinstance(text, str):
        raise MalformedTimestamp(text, "timestamp must be a string")
    text = text.strip()

    match = _ZONED_PATTERN.match(text)
    if match:
        year, month, day, hour, minute, second, fraction, suffix = match.groups()
        if abs(_suffix_minutes(suffix)) >= MINUTES_PER_DAY:
            raise MalformedTimestamp(text, "offset out of range")
        instant = _wall_clock_ms(text, year, month, day, hour, minute, second)
        if fraction:
            instant += int(fraction[:3].ljust(3, "0"))
        return instant - _suffix_minutes(suffix) * MS_PER_MINUTE

    match = _NAIVE_PATTERN.match(text)
    if match:
        return _wall_clock_ms(text, *match.groups()) - offset_minutes * MS_PER_MINUTE

    match = _DATE_PATTERN.match(text)
    if match:
        return _wall_clock_ms(text, *match.groups()) - offset_minutes * MS_PER_MINUTE

    raise MalformedTimestamp(text)


def local_midnight(date_text: str, offset_minutes: int) -> int:
    """Return local midnight of ``date_text`` at ``offset_minutes``.

    This is UTC midnight of the calendar date minus the offset, and anchors
    the scheduling horizon.

    >>> local_midnight("2026-01-15", 0)
    1768435200000
    """
    if not isinstance(date_text, str):
        raise MalformedTimestamp(date_text, "date must be a string")
    match = _DATE_PATTERN.match(date_text.strip())
    if not match:
        raise MalformedTimestamp(date_text, "expected YYYY-MM-DD")
    return _wall_clock_ms(date_text, *match.groups()) - offset_minutes * MS_PER_MINUTE


def format_offset(offset_minutes: int) -> str:
    """Render an offset as ``+HH:MM`` or ``-HH:MM``.

    >>> format_offset(-330)
    '-05:30'
    """
    sign = "+" if offset_minutes >= 0 else "-"
    hours, minutes = divmod(abs(offset_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def format_instant(epoch_ms: int, offset_minutes: int) -> str:
    """Render ``epoch_ms`` as local ISO-8601 text in the given offset.

    Sub-second precision is dropped.

    >>> format_instant(1768464000000, 0)
    '2026-01-15T08:00:00+00:00'
    >>> format_instant(1768464000000, -300)
    '2026-01-15T03:00:00-05:00'
    """
    local = _EPOCH + timedelta(
        milliseconds=epoch_ms + offset_minutes * MS_PER_MINUTE
    )
    return (
        f"{local.year:04d}-{local.month:02d}-{local.day:02d}"
        f"T{local.hour:02d}:{local.minute:02d}:{local.second:02d}"
        f"{format_offset(offset_minutes)}"
    )


__all__ = [
    "MINUTES_PER_DAY",
    "MS_PER_DAY",
    "MS_PER_MINUTE",
    "format_instant",
    "format_offset",
    "local_midnight",
    "parse_instant",
]
