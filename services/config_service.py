"""
services/config_service.py
==========================
Turns the raw chart configuration dictionary into a validated ``ChartConfig``.

Validation happens once, before any render: a malformed configuration raises
``ConfigurationError`` here instead of surfacing half-way through painting.
Comfort and zoom temperatures are given in the configured temperature unit
and converted to °C; everything downstream works in °C.
"""
from __future__ import annotations

import dataclasses
import logging
import math
from typing import Any, Dict, Mapping, Optional, Tuple

from config import (
    CHART_HEIGHT_PX,
    CHART_WIDTH_PX,
    DEFAULT_COLORS,
    DEFAULT_COMFORT_RANGE,
    DEFAULT_ICON,
    DEFAULT_MASS_FLOW_RATE,
    DISPLAY_MODES,
    MODE_MINIMAL,
    MODE_STANDARD,
    TEMPERATURE_UNIT_ALIASES,
    UNIT_CELSIUS,
    UNIT_FAHRENHEIT,
    VAPOR_PRESSURE_CEILING,
)
from domain.comfort import ComfortRange
from domain.coordinates import ZoomRange
from domain.isolines import WET_BULB_STRATEGIES
from domain.psychrometrics import fahrenheit_to_celsius
from utils.helpers import palette_color

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """The chart configuration cannot be rendered."""


@dataclasses.dataclass(frozen=True)
class PointConfig:
    temp: str
    humidity: str
    color: str
    label: str
    icon: str = DEFAULT_ICON


@dataclasses.dataclass(frozen=True)
class ChartOptions:
    """Styling and layer toggles."""

    bg_color: str
    grid_color: str
    curve_color: str
    text_color: str
    comfort_color: str
    dark_mode: bool = False
    show_enthalpy: bool = True
    show_wet_bulb: bool = True
    show_dew_point: bool = True
    show_point_labels: bool = True
    show_vapor_pressure: bool = True
    display_mode: str = MODE_STANDARD
    temperature_unit: str = UNIT_CELSIUS
    wet_bulb_strategy: str = "scan"

    @property
    def enthalpy_enabled(self) -> bool:
        return self.show_enthalpy and self.display_mode != MODE_MINIMAL

    @property
    def wet_bulb_enabled(self) -> bool:
        return self.show_wet_bulb and self.display_mode != MODE_MINIMAL

    @property
    def dew_point_enabled(self) -> bool:
        return self.show_dew_point and self.display_mode != MODE_MINIMAL


@dataclasses.dataclass(frozen=True)
class ChartConfig:
    points: Tuple[PointConfig, ...]
    comfort: ComfortRange
    mass_flow_rate: float
    options: ChartOptions
    width: float = CHART_WIDTH_PX
    height: float = CHART_HEIGHT_PX
    max_vapor_pressure: float = VAPOR_PRESSURE_CEILING
    zoom: Optional[ZoomRange] = None
    title: str = ""


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------

def _as_float(raw: Mapping[str, Any], key: str, default: Optional[float]) -> Optional[float]:
    value = raw.get(key)
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'{key}' must be a number, got {value!r}")
    if not math.isfinite(number):
        raise ConfigurationError(f"'{key}' must be finite, got {value!r}")
    return number


def _as_bool(raw: Mapping[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _text(raw: Mapping[str, Any], key: str, default: str) -> str:
    """``raw[key]`` as a string; YAML hands over bare numbers as int/float."""
    value = raw.get(key)
    if value is None or value == "":
        return default
    return str(value)


def _unit(raw: Mapping[str, Any]) -> str:
    value = raw.get("temperatureUnit")
    if value is None or value == "":
        return UNIT_CELSIUS
    unit = TEMPERATURE_UNIT_ALIASES.get(str(value).strip().lower())
    if unit is None:
        raise ConfigurationError(f"Unknown temperatureUnit {value!r}. Options: 'C', 'F'")
    return unit


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def _parse_points(raw_points: Any) -> Tuple[PointConfig, ...]:
    if not raw_points:
        raise ConfigurationError("At least one point must be configured under 'points'")
    if not isinstance(raw_points, (list, tuple)):
        raise ConfigurationError("'points' must be a list")

    points = []
    for i, entry in enumerate(raw_points):
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"Point #{i + 1} must be a mapping")
        temp_id = entry.get("temp")
        hum_id = entry.get("humidity")
        if not temp_id or not hum_id:
            raise ConfigurationError(
                f"Point #{i + 1} needs both a 'temp' and a 'humidity' identifier"
            )
        points.append(PointConfig(
            temp=str(temp_id),
            humidity=str(hum_id),
            color=_text(entry, "color", palette_color(i)),
            label=_text(entry, "label", f"{temp_id} & {hum_id}"),
            icon=_text(entry, "icon", DEFAULT_ICON),
        ))
    return tuple(points)


def _parse_comfort(raw: Mapping[str, Any], unit: str) -> ComfortRange:
    section = raw.get("comfortRange") or {}
    values = {key: _as_float(section, key, default) for key, default in DEFAULT_COMFORT_RANGE.items()}

    # Defaults are in °C, configured temperatures in the display unit
    if unit == UNIT_FAHRENHEIT:
        for key in ("tempMin", "tempMax"):
            if section.get(key) not in (None, ""):
                values[key] = fahrenheit_to_celsius(values[key])

    if values["tempMin"] > values["tempMax"]:
        raise ConfigurationError("comfortRange: tempMin must not exceed tempMax")
    if values["rhMin"] > values["rhMax"]:
        raise ConfigurationError("comfortRange: rhMin must not exceed rhMax")
    return ComfortRange(values["tempMin"], values["tempMax"], values["rhMin"], values["rhMax"])


def _parse_zoom(raw: Mapping[str, Any], unit: str) -> Optional[ZoomRange]:
    temp_min = _as_float(raw, "zoom_temp_min", None)
    temp_max = _as_float(raw, "zoom_temp_max", None)
    if temp_min is None or temp_max is None:
        return None
    if temp_min >= temp_max:
        raise ConfigurationError("zoom_temp_min must be lower than zoom_temp_max")
    if unit == UNIT_FAHRENHEIT:
        temp_min, temp_max = fahrenheit_to_celsius(temp_min), fahrenheit_to_celsius(temp_max)
    return ZoomRange(
        temp_min=temp_min,
        temp_max=temp_max,
        humidity_min=_as_float(raw, "zoom_humidity_min", None),
        humidity_max=_as_float(raw, "zoom_humidity_max", None),
    )


def _parse_options(raw: Mapping[str, Any], unit: str) -> ChartOptions:
    dark = _as_bool(raw, "darkMode", False)
    colors: Dict[str, str] = {
        key: str(raw.get(key) or (dark_value if dark else light_value))
        for key, (light_value, dark_value) in DEFAULT_COLORS.items()
    }

    mode = str(raw.get("displayMode") or MODE_STANDARD).lower()
    if mode not in DISPLAY_MODES:
        raise ConfigurationError(f"Unknown displayMode {raw.get('displayMode')!r}. Options: {list(DISPLAY_MODES)}")

    strategy = str(raw.get("wetBulbStrategy") or "scan")
    if strategy not in WET_BULB_STRATEGIES:
        raise ConfigurationError(f"Unknown wetBulbStrategy {strategy!r}. Options: {sorted(WET_BULB_STRATEGIES)}")

    return ChartOptions(
        bg_color=colors["bgColor"],
        grid_color=colors["gridColor"],
        curve_color=colors["curveColor"],
        text_color=colors["textColor"],
        comfort_color=colors["comfortColor"],
        dark_mode=dark,
        show_enthalpy=_as_bool(raw, "showEnthalpy", True),
        show_wet_bulb=_as_bool(raw, "showWetBulb", True),
        show_dew_point=_as_bool(raw, "showDewPoint", True),
        show_point_labels=_as_bool(raw, "showPointLabels", True),
        show_vapor_pressure=_as_bool(raw, "showVaporPressure", True),
        display_mode=mode,
        temperature_unit=unit,
        wet_bulb_strategy=strategy,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def parse_config(raw: Optional[Mapping[str, Any]]) -> ChartConfig:
    """
    Validate ``raw`` and build the immutable chart configuration.

    Raises ConfigurationError for: no points, a point missing an identifier,
    an inverted comfort range, a non-positive mass flow rate, an unknown
    display mode, temperature unit or wet-bulb strategy, an inverted zoom
    window and a non-positive canvas size.
    """
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Configuration must be a mapping")

    unit = _unit(raw)
    points = _parse_points(raw.get("points"))
    comfort = _parse_comfort(raw, unit)

    mass_flow_rate = _as_float(raw, "massFlowRate", DEFAULT_MASS_FLOW_RATE)
    if mass_flow_rate <= 0:
        raise ConfigurationError("massFlowRate must be positive")

    width = _as_float(raw, "width", float(CHART_WIDTH_PX))
    height = _as_float(raw, "height", float(CHART_HEIGHT_PX))
    if width <= 0 or height <= 0:
        raise ConfigurationError("Canvas width and height must be positive")

    max_vp = _as_float(raw, "maxVaporPressure", VAPOR_PRESSURE_CEILING)
    if max_vp <= 0:
        raise ConfigurationError("maxVaporPressure must be positive")

    config = ChartConfig(
        points=points,
        comfort=comfort,
        mass_flow_rate=mass_flow_rate,
        options=_parse_options(raw, unit),
        width=width,
        height=height,
        max_vapor_pressure=max_vp,
        zoom=_parse_zoom(raw, unit),
        title=str(raw.get("chartTitle") or ""),
    )
    logger.debug("Parsed chart config with %d point(s), mode=%s", len(points), config.options.display_mode)
    return config
