"""Unit tests for the dose scheduler configuration."""

import logging

import pytest

from dosescheduler.config import DEFAULT_CONFIG, DoseSchedulerConfig


class TestDoseSchedulerConfig:
    """Tests for the configuration dataclass."""

    def test_defaults(self):
        """Test the default scheduling constants."""
        config = DoseSchedulerConfig()

        assert config.anchor_hour == 8
        assert config.overlap_window_minutes == 60
        assert config.min_horizon_days == 1
        assert config.max_horizon_days == 30
        assert config.max_frequency_per_day == 6
        assert (config.min_priority, config.max_priority) == (1, 5)
        assert config.show_progress is False

    def test_default_config_matches_fresh_instance(self):
        assert DEFAULT_CONFIG == DoseSchedulerConfig()

    def test_config_is_frozen(self):
        """Test that config cannot be mutated after creation."""
        config = DoseSchedulerConfig()
        with pytest.raises(AttributeError):
            config.anchor_hour = 9

    @pytest.mark.parametrize("hour", [-1, 24])
    def test_anchor_hour_validation_fail(self, hour):
        with pytest.raises(ValueError, match="anchor_hour must be in"):
            DoseSchedulerConfig(anchor_hour=hour)

    def test_overlap_window_validation_fail(self):
        with pytest.raises(ValueError, match="overlap_window_minutes must be positive"):
            DoseSchedulerConfig(overlap_window_minutes=0)

    def test_horizon_range_validation_fail(self):
        """Test that an inverted horizon range raises error."""
        with pytest.raises(ValueError, match="horizon day range"):
            DoseSchedulerConfig(min_horizon_days=10, max_horizon_days=5)
        with pytest.raises(ValueError, match="horizon day range"):
            DoseSchedulerConfig(min_horizon_days=0)

    def test_frequency_validation_fail(self):
        with pytest.raises(ValueError, match="max_frequency_per_day"):
            DoseSchedulerConfig(max_frequency_per_day=0)

    def test_priority_range_validation_fail(self):
        with pytest.raises(ValueError, match="priority range"):
            DoseSchedulerConfig(min_priority=5, max_priority=1)


class TestConfigFromMapping:
    """Tests for building config from JSON-style data."""

    def test_known_keys_applied(self):
        config = DoseSchedulerConfig.from_mapping(
            {"overlap_window_minutes": 30, "show_progress": True}
        )

        assert config.overlap_window_minutes == 30
        assert config.show_progress is True
        assert config.anchor_hour == 8

    def test_unknown_keys_ignored_with_warning(self, caplog):
        """Test that stray keys are logged and dropped."""
        with caplog.at_level(logging.WARNING, logger="dosescheduler.config"):
            config = DoseSchedulerConfig.from_mapping({"anchor_hour": 6, "colour": "blue"})

        assert config.anchor_hour == 6
        assert "colour" in caplog.text

    def test_invalid_values_still_validated(self):
        with pytest.raises(ValueError, match="anchor_hour"):
            DoseSchedulerConfig.from_mapping({"anchor_hour": 30})


class TestConfigTypes:
    """Tests that wrongly typed values are rejected up front."""

    def test_float_overlap_window(self):
        with pytest.raises(ValueError, match="overlap_window_minutes must be an integer"):
            DoseSchedulerConfig(overlap_window_minutes=30.5)

    def test_string_anchor_hour_from_mapping(self):
        """JSON strings are not coerced into integers."""
        with pytest.raises(ValueError, match="anchor_hour must be an integer"):
            DoseSchedulerConfig.from_mapping({"anchor_hour": "8"})

    def test_bool_is_not_an_integer(self):
        with pytest.raises(ValueError, match="max_priority must be an integer"):
            DoseSchedulerConfig(max_priority=True)

    def test_show_progress_must_be_bool(self):
        with pytest.raises(ValueError, match="show_progress must be a boolean"):
            DoseSchedulerConfig.from_mapping({"show_progress": "yes"})

    def test_cli_config_with_string_value_exits_1(self, tmp_path):
        """The driver reports a bad config file instead of crashing."""
        import json

        import run_dose_scheduler

        orders = tmp_path / "orders.json"
        orders.write_text("[]")
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"overlap_window_minutes": "60"}))

        code = run_dose_scheduler.main(
            [
                "--start", "2026-01-15",
                "--days", "1",
                "--orders", str(orders),
                "--output", str(tmp_path / "events.csv"),
                "--config", str(config),
            ]
        )

        assert code == 1
        assert not (tmp_path / "events.csv").exists()
