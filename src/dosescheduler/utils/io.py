"""Reading orders from and writing events to tabular files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

import numpy as np
import pandas as pd

from dosescheduler.models import DoseEvent

LOGGER = logging.getLogger(__name__)

EVENT_COLUMNS = ["event_id", "order_id", "scheduled_time", "status"]

_TEXT_COLUMNS = {
    "order_id": str,
    "patient_id": str,
    "start_datetime": str,
    "end_datetime": str,
    "do_not_overlap_group": str,
}
_INTEGER_COLUMNS = ("tz_offset_minutes", "frequency_per_day", "window_minutes", "priority")


def _clean_record(record: Dict[str, Any], from_csv: bool) -> Dict[str, Any]:
    """Turn blank cells and empty strings into None, numpy integers into ints.

    For CSV input, whole floats in integer columns are also turned back into
    ints, since pandas upcasts integer columns that contain blanks. JSON
    values are left as written.
    """
    cleaned: Dict[str, Any] = {}
    for key, value in record.items():
        if isinstance(value, str) and not value.strip():
            cleaned[key] = None
        elif not isinstance(value, (list, dict)) and pd.isna(value):
            cleaned[key] = None
        elif isinstance(value, np.integer):
            cleaned[key] = int(value)
        elif (
            from_csv
            and key in _INTEGER_COLUMNS
            and isinstance(value, (float, np.floating))
            and float(value).is_integer()
        ):
            # pandas upcasts integer columns with blanks to float
            cleaned[key] = int(value)
        else:
            cleaned[key] = value
    return cleaned


def load_orders(path: Path) -> List[Dict[str, Any]]:
    """Read order records from a CSV or JSON file.

    JSON input may be a list of objects or an object with an ``"orders"``
    list. Records are returned as plain dictionaries; validation happens in
    the pipeline. Whole-number floats in integer columns are only converted
    for CSV input, so a JSON ``"priority": 3.0`` is rejected downstream.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the suffix is not ``.csv`` or ``.json`` or the JSON
            document has the wrong shape.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Orders file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        frame = pd.read_csv(path, dtype=_TEXT_COLUMNS, keep_default_na=True)
        records = frame.to_dict(orient="records")
    elif suffix == ".json":
        with open(path, "r") as f:
            payload = json.load(f)
        if isinstance(payload, dict):
            payload = payload.get("orders")
        if not isinstance(payload, list):
            raise ValueError(
                f"{path}: expected a list of orders or an object with an 'orders' list"
            )
        records = payload
    else:
        raise ValueError(f"Unsupported orders file type: {path.suffix!r}")

    LOGGER.info(f"Loaded {len(records)} orders from {path}")
    return [_clean_record(dict(record), from_csv=suffix == ".csv") for record in records]


def events_to_frame(events: Iterable[DoseEvent]) -> pd.DataFrame:
    """Tabulate events with one row per event."""
    return pd.DataFrame([event.to_dict() for event in events], columns=EVENT_COLUMNS)


def write_events(events: Iterable[DoseEvent], path: Path) -> Path:
    """Write events to ``path`` as CSV or JSON, chosen by suffix."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in (".csv", ".json"):
        raise ValueError(f"Unsupported events file type: {path.suffix!r}")

    frame = events_to_frame(events)
    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".csv":
        frame.to_csv(path, index=False)
    else:
        frame.to_json(path, orient="records", indent=2)

    LOGGER.info(f"Wrote {len(frame)} events to {path}")
    return path


__all__ = ["EVENT_COLUMNS", "events_to_frame", "load_orders", "write_events"]
