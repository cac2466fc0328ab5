"""
tests/test_point_service.py
Tests for services/point_service.py (snapshot reading and point processing).
"""
import logging

import pytest
import sys, pathlib
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from domain.comfort import ACTION_NONE
from services.config_service import parse_config
from services.point_service import (
    SensorReading,
    parse_snapshot,
    point_hover_text,
    points_to_frame,
    process_points,
    read_numeric,
)


@pytest.fixture
def config():
    return parse_config({
        "points": [
            {"temp": "sensor.t1", "humidity": "sensor.h1", "label": "Living"},
            {"temp": "sensor.t2", "humidity": "sensor.h2", "label": "Bedroom"},
            {"temp": "sensor.t3", "humidity": "sensor.h3", "label": "Attic"},
        ],
    })


@pytest.fixture
def snapshot():
    return {
        "sensor.t1": {"state": "22.0", "last_changed": "2024-01-01T12:00:00+00:00"},
        "sensor.h1": {"state": "60"},
        "sensor.t2": "23",
        "sensor.h2": 50,
        "sensor.t3": {"state": "18.5"},
    }


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------
class TestSnapshot:

    def test_accepts_both_shapes(self, snapshot):
        readings = parse_snapshot(snapshot)
        assert readings["sensor.t1"] == SensorReading("22.0", "2024-01-01T12:00:00+00:00")
        assert readings["sensor.h2"] == SensorReading(50)

    def test_empty(self):
        assert parse_snapshot(None) == {}

    def test_read_numeric(self, snapshot):
        readings = parse_snapshot(snapshot)
        assert read_numeric(readings, "sensor.t1") == 22.0
        assert read_numeric(readings, "sensor.h2") == 50.0

    @pytest.mark.parametrize("state", ["unavailable", "unknown", None, "nan", "inf", ""])
    def test_non_numeric_is_none(self, state, caplog):
        readings = parse_snapshot({"sensor.x": {"state": state}})
        with caplog.at_level(logging.WARNING):
            assert read_numeric(readings, "sensor.x") is None
        assert "sensor.x" in caplog.text

    def test_missing_is_none(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert read_numeric({}, "sensor.gone") is None
        assert "not found" in caplog.text


# ---------------------------------------------------------------------------
# Processing
# ---------------------------------------------------------------------------
class TestProcessPoints:

    def test_missing_humidity_drops_point(self, config, snapshot):
        points = process_points(config, snapshot)
        assert [p.label for p in points] == ["Living", "Bedroom"]

    def test_derived_values(self, config, snapshot):
        living = process_points(config, snapshot)[0]
        assert living.temp == 22.0 and living.humidity == 60.0
        assert living.properties.dew_point == pytest.approx(13.9, abs=0.1)
        assert living.in_comfort_zone
        assert living.last_changed == "2024-01-01T12:00:00+00:00"

    def test_comfortable_point_needs_no_action(self, config, snapshot):
        bedroom = process_points(config, snapshot)[1]
        assert bedroom.recommendation.action == ACTION_NONE
        assert bedroom.recommendation.total_power == 0.0
        assert bedroom.comfort_status == ()

    def test_fahrenheit_readings_converted(self):
        cfg = parse_config({"temperatureUnit": "F", "points": [{"temp": "t", "humidity": "h"}]})
        point = process_points(cfg, {"t": "71.6", "h": "60"})[0]
        assert point.temp == pytest.approx(22.0)

    def test_nothing_available(self, config):
        assert process_points(config, {}) == []


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------
class TestFrame:

    def test_one_row_per_point(self, config, snapshot):
        df = points_to_frame(process_points(config, snapshot))
        assert list(df["Label"]) == ["Living", "Bedroom"]
        assert df.loc[0, "Temperature"] == "22.0°C"
        assert df.loc[0, "Enthalpy (kJ/kg)"] == pytest.approx(47.3, abs=0.5)

    def test_fahrenheit_display(self, config, snapshot):
        df = points_to_frame(process_points(config, snapshot), "F")
        assert df.loc[0, "Temperature"] == "71.6°F"

    def test_action_columns_only_in_advanced_mode(self, config, snapshot):
        points = process_points(config, snapshot)
        assert "Power (W)" in points_to_frame(points).columns
        standard = points_to_frame(points, "C", "standard")
        assert "Power (W)" not in standard.columns
        assert "Mold risk" in standard.columns

    def test_empty_frame_has_columns(self):
        df = points_to_frame([])
        assert df.empty
        assert "Label" in df.columns


# ---------------------------------------------------------------------------
# Tooltip
# ---------------------------------------------------------------------------
class TestHoverText:

    def test_derived_values_listed(self, config, snapshot):
        text = point_hover_text(process_points(config, snapshot)[0])
        assert text.startswith("<b>Living</b>")
        assert "Temperature: <b>22.0°C</b>" in text
        assert "Humidity: <b>60.0%</b>" in text
        assert "Dew point: 13.9°C" in text
        assert "In comfort zone" in text
        assert "Updated 2024-01-01T12:00:00+00:00" in text

    def test_action_for_cold_point(self):
        cfg = parse_config({"points": [{"temp": "t", "humidity": "h", "label": "Cellar"}]})
        text = point_hover_text(process_points(cfg, {"t": "18", "h": "50"})[0])
        assert "Action: heat (" in text
        assert "In comfort zone" not in text

    def test_label_escaped_and_unit_applied(self):
        cfg = parse_config({"points": [{"temp": "t", "humidity": "h", "label": "R&D <lab>"}]})
        text = point_hover_text(process_points(cfg, {"t": "22", "h": "50"})[0], "F")
        assert "<b>R&amp;D &lt;lab&gt;</b>" in text
        assert "71.6°F" in text
