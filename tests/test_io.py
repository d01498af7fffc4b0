"""Unit tests for utils.io module."""

import json

import pandas as pd
import pytest

from dosescheduler.models import DoseEvent
from dosescheduler.pipeline import generate_dose_events
from dosescheduler.utils.io import EVENT_COLUMNS, events_to_frame, load_orders, write_events


ORDER_ROWS = [
    {
        "order_id": "ORD-1",
        "patient_id": "0042",
        "tz_offset_minutes": -300,
        "start_datetime": "2026-01-15T00:00",
        "end_datetime": "",
        "frequency_per_day": 2,
        "window_minutes": 30,
        "do_not_overlap_group": "",
        "priority": 3,
    },
    {
        "order_id": "ORD-2",
        "patient_id": "0042",
        "tz_offset_minutes": 60,
        "start_datetime": "2026-01-15T00:00:00Z",
        "end_datetime": "2026-01-16T00:00",
        "frequency_per_day": 1,
        "window_minutes": 0,
        "do_not_overlap_group": "sedatives",
        "priority": 5,
    },
]


def _event(order_id="ORD-1"):
    return DoseEvent(
        event_id="abc123",
        order_id=order_id,
        scheduled_time="2026-01-15T08:00:00+00:00",
    )


class TestLoadOrders:
    """Test reading order files."""

    def test_csv(self, tmp_path):
        """Test that blank cells become None and numbers plain ints."""
        path = tmp_path / "orders.csv"
        pd.DataFrame(ORDER_ROWS).to_csv(path, index=False)

        records = load_orders(path)

        assert len(records) == 2
        first, second = records
        assert first["patient_id"] == "0042"
        assert first["end_datetime"] is None
        assert first["do_not_overlap_group"] is None
        assert first["tz_offset_minutes"] == -300
        assert type(first["tz_offset_minutes"]) is int
        assert type(first["priority"]) is int
        assert second["do_not_overlap_group"] == "sedatives"
        assert second["end_datetime"] == "2026-01-16T00:00"

    def test_csv_integer_column_with_blanks(self, tmp_path):
        """Float-upcast integer columns are turned back into ints."""
        path = tmp_path / "orders.csv"
        rows = [dict(ORDER_ROWS[0]), dict(ORDER_ROWS[1], window_minutes=None)]
        pd.DataFrame(rows).to_csv(path, index=False)

        first, second = load_orders(path)

        assert first["window_minutes"] == 30
        assert type(first["window_minutes"]) is int
        assert second["window_minutes"] is None

    def test_json_list(self, tmp_path):
        path = tmp_path / "orders.json"
        path.write_text(json.dumps(ORDER_ROWS))

        records = load_orders(path)

        assert [r["order_id"] for r in records] == ["ORD-1", "ORD-2"]

    def test_json_object_with_orders(self, tmp_path):
        path = tmp_path / "orders.json"
        path.write_text(json.dumps({"orders": ORDER_ROWS[:1]}))

        assert load_orders(path)[0]["order_id"] == "ORD-1"

    def test_json_wrong_shape(self, tmp_path):
        path = tmp_path / "orders.json"
        path.write_text(json.dumps({"items": []}))

        with pytest.raises(ValueError, match="expected a list of orders"):
            load_orders(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_orders(tmp_path / "missing.csv")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "orders.xlsx"
        path.write_text("")

        with pytest.raises(ValueError, match="Unsupported orders file type"):
            load_orders(path)

    def test_loaded_csv_schedules(self, tmp_path):
        """Records read from CSV pass validation and schedule cleanly."""
        path = tmp_path / "orders.csv"
        pd.DataFrame(ORDER_ROWS).to_csv(path, index=False)

        events = generate_dose_events("2026-01-15", 1, load_orders(path))

        assert [(e.order_id, e.scheduled_time) for e in events] == [
            ("ORD-2", "2026-01-15T08:00:00+01:00"),
            ("ORD-1", "2026-01-15T08:00:00-05:00"),
            ("ORD-1", "2026-01-15T20:00:00-05:00"),
        ]


class TestWriteEvents:
    """Test event output files."""

    def test_events_to_frame(self):
        frame = events_to_frame([_event("A"), _event("B")])

        assert list(frame.columns) == EVENT_COLUMNS
        assert frame["order_id"].tolist() == ["A", "B"]
        assert (frame["status"] == "SCHEDULED").all()

    def test_empty_frame_keeps_columns(self):
        assert list(events_to_frame([]).columns) == EVENT_COLUMNS

    def test_write_csv(self, tmp_path):
        path = tmp_path / "out" / "events.csv"

        write_events([_event()], path)

        frame = pd.read_csv(path, dtype=str)
        assert frame.to_dict(orient="records") == [_event().to_dict()]

    def test_write_json(self, tmp_path):
        path = tmp_path / "events.json"

        write_events([_event()], path)

        assert json.loads(path.read_text()) == [_event().to_dict()]

    def test_unsupported_suffix(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported events file type"):
            write_events([_event()], tmp_path / "events.txt")


class TestJsonValues:
    """JSON records are cleaned of blanks but otherwise kept as written."""

    def test_empty_strings_become_none(self, tmp_path):
        path = tmp_path / "orders.json"
        path.write_text(json.dumps(ORDER_ROWS[:1]))

        (record,) = load_orders(path)

        assert record["end_datetime"] is None
        assert record["do_not_overlap_group"] is None

    def test_json_float_integers_left_alone(self, tmp_path):
        """JSON values are not coerced, so 3.0 fails the integer check."""
        from dosescheduler.errors import ValidationError

        path = tmp_path / "orders.json"
        path.write_text(json.dumps([dict(ORDER_ROWS[0], priority=3.0)]))

        (record,) = load_orders(path)

        assert record["priority"] == 3.0
        assert type(record["priority"]) is float
        with pytest.raises(ValidationError, match="priority"):
            generate_dose_events("2026-01-15", 1, [record])
