"""
services/point_service.py
=========================
Resolves configured points against a sensor snapshot and derives everything
the chart and the data table show for them.

Sensor problems never raise: a missing identifier or a non-numeric state
drops that point for the current cycle and logs a warning.
"""
from __future__ import annotations

import dataclasses
import html
import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from config import MODE_ADVANCED, UNIT_FAHRENHEIT
from domain.comfort import ActionRecommendation, comfort_status, is_in_comfort_zone, recommend_action
from domain.psychrometrics import DerivedProperties, derive_properties, fahrenheit_to_celsius
from services.config_service import ChartConfig, PointConfig
from utils.helpers import format_temperature, mold_risk_level

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class SensorReading:
    state: Any
    last_changed: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class ProcessedPoint:
    """One configured point with its readings (°C, %RH) and derived values."""

    config: PointConfig
    temp: float
    humidity: float
    properties: DerivedProperties
    in_comfort_zone: bool
    recommendation: ActionRecommendation
    comfort_status: Tuple[str, ...] = ()
    last_changed: Optional[str] = None

    @property
    def label(self) -> str:
        return self.config.label

    @property
    def color(self) -> str:
        return self.config.color


# ---------------------------------------------------------------------------
# Snapshot access
# ---------------------------------------------------------------------------

def parse_snapshot(raw: Optional[Mapping[str, Any]]) -> Dict[str, SensorReading]:
    """
    Accepts ``{id: value}`` or ``{id: {"state": ..., "last_changed": ...}}``.
    """
    snapshot: Dict[str, SensorReading] = {}
    for identifier, value in (raw or {}).items():
        if isinstance(value, SensorReading):
            snapshot[identifier] = value
        elif isinstance(value, Mapping):
            snapshot[identifier] = SensorReading(value.get("state"), value.get("last_changed"))
        else:
            snapshot[identifier] = SensorReading(value)
    return snapshot


def read_numeric(snapshot: Mapping[str, SensorReading], identifier: str) -> Optional[float]:
    """Finite numeric state of ``identifier``, or None (warning logged)."""
    reading = snapshot.get(identifier)
    if reading is None:
        logger.warning("Entity %s not found in snapshot", identifier)
        return None
    try:
        value = float(reading.state)
    except (TypeError, ValueError):
        logger.warning("Entity %s has non-numeric state %r", identifier, reading.state)
        return None
    if not math.isfinite(value):
        logger.warning("Entity %s has non-finite state %r", identifier, reading.state)
        return None
    return value


# ---------------------------------------------------------------------------
# Processing
# ---------------------------------------------------------------------------

def process_point(
    point: PointConfig,
    snapshot: Mapping[str, SensorReading],
    config: ChartConfig,
) -> Optional[ProcessedPoint]:
    temp = read_numeric(snapshot, point.temp)
    humidity = read_numeric(snapshot, point.humidity)
    if temp is None or humidity is None:
        logger.warning("Point '%s' skipped: reading unavailable", point.label)
        return None

    if config.options.temperature_unit == UNIT_FAHRENHEIT:
        temp = fahrenheit_to_celsius(temp)

    comfort = config.comfort
    return ProcessedPoint(
        config=point,
        temp=temp,
        humidity=humidity,
        properties=derive_properties(temp, humidity),
        in_comfort_zone=is_in_comfort_zone(temp, humidity, comfort),
        recommendation=recommend_action(temp, humidity, comfort, config.mass_flow_rate),
        comfort_status=comfort_status(temp, humidity, comfort),
        last_changed=snapshot[point.temp].last_changed,
    )


def process_points(config: ChartConfig, snapshot: Mapping[str, Any]) -> List[ProcessedPoint]:
    """All configured points that have usable readings, in configuration order."""
    readings = parse_snapshot(snapshot)
    processed = [process_point(p, readings, config) for p in config.points]
    points = [p for p in processed if p is not None]
    if len(points) < len(config.points):
        logger.warning("%d of %d point(s) dropped", len(config.points) - len(points), len(config.points))
    return points


# ---------------------------------------------------------------------------
# Tabular view
# ---------------------------------------------------------------------------

ACTION_COLUMNS = ["Action", "Power (W)", "Ideal setpoint"]


def points_to_frame(
    points: List[ProcessedPoint],
    temperature_unit: str = "C",
    display_mode: str = MODE_ADVANCED,
) -> pd.DataFrame:
    """
    One row per point, temperatures formatted in the display unit.

    The action columns are only kept in advanced mode.
    """
    rows = []
    for p in points:
        props = p.properties
        rec = p.recommendation
        rows.append({
            "Label": p.label,
            "Temperature": format_temperature(p.temp, temperature_unit),
            "Humidity (%)": round(p.humidity, 1),
            "Dew point": format_temperature(props.dew_point, temperature_unit),
            "Wet bulb": format_temperature(props.wet_bulb, temperature_unit),
            "Enthalpy (kJ/kg)": round(props.enthalpy, 1),
            "Water content (kg/kg)": round(props.mixing_ratio, 4),
            "Abs. humidity (g/m³)": round(props.absolute_humidity, 2),
            "Specific volume (m³/kg)": round(props.specific_volume, 3),
            "Mold risk": mold_risk_level(props.mold_risk),
            "PMV": round(props.pmv, 2),
            "In comfort": p.in_comfort_zone,
            "Action": ", ".join(rec.actions) or rec.action,
            "Power (W)": round(rec.total_power, 1),
            "Ideal setpoint": (
                f"{format_temperature(rec.ideal_temp, temperature_unit)}, {rec.ideal_humidity:.0f}%"
            ),
        })
    columns = [
        "Label", "Temperature", "Humidity (%)", "Dew point", "Wet bulb",
        "Enthalpy (kJ/kg)", "Water content (kg/kg)", "Abs. humidity (g/m³)",
        "Specific volume (m³/kg)", "Mold risk", "PMV", "In comfort",
    ] + ACTION_COLUMNS
    df = pd.DataFrame(rows, columns=columns)
    if display_mode != MODE_ADVANCED:
        df = df.drop(columns=ACTION_COLUMNS)
    return df


def point_hover_text(point: ProcessedPoint, temperature_unit: str = "C") -> str:
    """Tooltip body for one point (Plotly hover HTML)."""
    props = point.properties
    rec = point.recommendation
    lines = [
        f"<b>{html.escape(point.label)}</b>",
        f"Temperature: <b>{format_temperature(point.temp, temperature_unit)}</b>",
        f"Humidity: <b>{point.humidity:.1f}%</b>",
        f"Dew point: {format_temperature(props.dew_point, temperature_unit)}",
        f"Wet bulb: {format_temperature(props.wet_bulb, temperature_unit)}",
        f"Enthalpy: {props.enthalpy:.1f} kJ/kg",
        f"Water content: {props.mixing_ratio * 1000.0:.1f} g/kg",
        f"Mold risk: {mold_risk_level(props.mold_risk)}",
    ]
    if point.in_comfort_zone:
        lines.append("In comfort zone")
    else:
        lines.append(f"Action: {', '.join(rec.actions)} ({rec.total_power:.0f} W)")
    if point.last_changed:
        lines.append(f"<i>Updated {html.escape(str(point.last_changed))}</i>")
    return "<br>".join(lines)
