"""
domain/coordinates.py
=====================
Mapping between the psychrometric domain and canvas pixels.

The abscissa is dry-bulb temperature, the ordinate is vapor pressure, so
constant-RH lines are curves in pixel space. Zoom and pan are an affine step
applied after the physical mapping:

    X' = (X − cx) · zoom + cx + pan_x
    Y' = (Y − cy) · zoom + cy + pan_y

``ViewTransform`` is an immutable value built by ``derive_view``; a canvas
resize means deriving a new one, never patching the old one.
"""
from __future__ import annotations

import dataclasses
from typing import Optional, Tuple, Union

import numpy as np

from config import (
    CHART_RH_MAX,
    CHART_RH_MIN,
    CHART_TEMP_MAX,
    CHART_TEMP_MIN,
    MAX_ZOOM,
    MIN_ZOOM,
    PLOT_BOTTOM,
    PLOT_LEFT,
    PLOT_RIGHT,
    PLOT_TOP,
    REFERENCE_HEIGHT,
    REFERENCE_WIDTH,
    VAPOR_PRESSURE_CEILING,
)
from domain.psychrometrics import saturation_pressure, vapor_pressure

Number = Union[float, np.ndarray]


@dataclasses.dataclass(frozen=True)
class ZoomRange:
    """Sub-window the user wants to see; humidity bounds are optional."""

    temp_min: float
    temp_max: float
    humidity_min: Optional[float] = None
    humidity_max: Optional[float] = None

    @property
    def has_humidity(self) -> bool:
        return self.humidity_min is not None and self.humidity_max is not None


@dataclasses.dataclass(frozen=True)
class ChartBounds:
    """
    Working window of the renderer.

    max_vapor_pressure is derived from (max_temp, max_hum) and capped by the
    chart's ordinate ceiling; it is the linear scale of the vertical axis.
    """

    min_temp: float
    max_temp: float
    min_hum: float
    max_hum: float
    max_vapor_pressure: float

    @classmethod
    def from_window(
        cls,
        min_temp: float,
        max_temp: float,
        min_hum: float = CHART_RH_MIN,
        max_hum: float = CHART_RH_MAX,
        vapor_pressure_ceiling: float = VAPOR_PRESSURE_CEILING,
    ) -> "ChartBounds":
        max_vp = min(vapor_pressure(max_temp, max_hum), vapor_pressure_ceiling)
        return cls(min_temp, max_temp, min_hum, max_hum, max_vp)


def default_domain(vapor_pressure_ceiling: float = VAPOR_PRESSURE_CEILING) -> ChartBounds:
    """The fixed chart domain: −10..50 °C, 0..100 %RH."""
    return ChartBounds.from_window(
        CHART_TEMP_MIN, CHART_TEMP_MAX, CHART_RH_MIN, CHART_RH_MAX, vapor_pressure_ceiling
    )


@dataclasses.dataclass(frozen=True)
class ViewTransform:
    """
    Forward and inverse pixel mapping for one canvas size and zoom state.

    Parameters
    ----------
    width, height      : Canvas size                      [px]
    temp_min, temp_max : Temperature domain on the x axis [°C]
    max_vapor_pressure : Vapor pressure at the plot top   [kPa]
    zoom               : Affine scale around the canvas center
    pan_x, pan_y       : Affine offsets                   [px]
    """

    width: float
    height: float
    temp_min: float = CHART_TEMP_MIN
    temp_max: float = CHART_TEMP_MAX
    max_vapor_pressure: float = VAPOR_PRESSURE_CEILING
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    @property
    def scale_x(self) -> float:
        return self.width / REFERENCE_WIDTH

    @property
    def scale_y(self) -> float:
        return self.height / REFERENCE_HEIGHT

    @property
    def scale(self) -> float:
        return min(self.scale_x, self.scale_y)

    @property
    def plot_area(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) of the inner plot rectangle [px]."""
        return (
            PLOT_LEFT * self.scale_x,
            PLOT_TOP * self.scale_y,
            PLOT_RIGHT * self.scale_x,
            PLOT_BOTTOM * self.scale_y,
        )

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2.0, self.height / 2.0

    # ------------------------------------------------------------------
    # Forward
    # ------------------------------------------------------------------

    def base_x(self, temp: Number) -> Number:
        left, _, right, _ = self.plot_area
        return left + (temp - self.temp_min) / (self.temp_max - self.temp_min) * (right - left)

    def base_y(self, pv: Number) -> Number:
        _, top, _, bottom = self.plot_area
        return bottom - pv / self.max_vapor_pressure * (bottom - top)

    def temp_to_x(self, temp: Number) -> Number:
        cx, _ = self.center
        return (self.base_x(temp) - cx) * self.zoom + cx + self.pan_x

    def vapor_pressure_to_y(self, pv: Number) -> Number:
        _, cy = self.center
        return (self.base_y(pv) - cy) * self.zoom + cy + self.pan_y

    def humidity_to_y(self, temp: Number, rh: Number) -> Number:
        return self.vapor_pressure_to_y(vapor_pressure(temp, rh))

    # ------------------------------------------------------------------
    # Inverse
    # ------------------------------------------------------------------

    def x_to_temp(self, x: Number) -> Number:
        cx, _ = self.center
        left, _, right, _ = self.plot_area
        bx = (x - cx - self.pan_x) / self.zoom + cx
        return self.temp_min + (bx - left) / (right - left) * (self.temp_max - self.temp_min)

    def y_to_vapor_pressure(self, y: Number) -> Number:
        _, cy = self.center
        _, top, _, bottom = self.plot_area
        by = (y - cy - self.pan_y) / self.zoom + cy
        return (bottom - by) / (bottom - top) * self.max_vapor_pressure

    def y_to_humidity(self, y: Number, temp: Number) -> Number:
        """RH at pixel row ``y``; the temperature fixes the saturation pressure."""
        return self.y_to_vapor_pressure(y) / saturation_pressure(temp) * 100.0

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def is_point_visible(self, x: float, y: float) -> bool:
        return 0 <= x <= self.width and 0 <= y <= self.height

    def in_plot_area(self, x: float, y: float) -> bool:
        left, top, right, bottom = self.plot_area
        return left <= x <= right and top <= y <= bottom

    def visible_temp_range(self) -> Tuple[float, float]:
        left, _, right, _ = self.plot_area
        return float(self.x_to_temp(left)), float(self.x_to_temp(right))


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def zoom_level(zoom_range: ZoomRange, full_range: float) -> float:
    """full / desired temperature span, clamped to [MIN_ZOOM, MAX_ZOOM]."""
    desired = zoom_range.temp_max - zoom_range.temp_min
    if desired <= 0:
        return MAX_ZOOM
    return min(MAX_ZOOM, max(MIN_ZOOM, full_range / desired))


def derive_view(
    width: float,
    height: float,
    zoom_range: Optional[ZoomRange] = None,
    domain: Optional[ChartBounds] = None,
) -> ViewTransform:
    """
    Build the transform for a canvas size and an optional zoom window.

    The midpoint of the zoom window's temperature range lands on the canvas
    horizontal center. With both humidity bounds configured, the vapor
    pressure of (mid temperature, mid humidity) lands on the vertical center.
    """
    domain = domain or default_domain()
    base = ViewTransform(
        width=width,
        height=height,
        temp_min=domain.min_temp,
        temp_max=domain.max_temp,
        max_vapor_pressure=domain.max_vapor_pressure,
    )
    if zoom_range is None:
        return base

    zoom = zoom_level(zoom_range, domain.max_temp - domain.min_temp)
    cx, cy = base.center
    mid_temp = (zoom_range.temp_min + zoom_range.temp_max) / 2.0
    pan_x = -(base.base_x(mid_temp) - cx) * zoom

    pan_y = 0.0
    if zoom_range.has_humidity:
        mid_rh = (zoom_range.humidity_min + zoom_range.humidity_max) / 2.0
        pan_y = -(base.base_y(vapor_pressure(mid_temp, mid_rh)) - cy) * zoom

    return dataclasses.replace(base, zoom=zoom, pan_x=float(pan_x), pan_y=float(pan_y))


def visible_bounds(
    view: ViewTransform,
    vapor_pressure_ceiling: float = VAPOR_PRESSURE_CEILING,
) -> ChartBounds:
    """
    Temperature window visible through the plot area, clamped to the domain.
    """
    lo, hi = view.visible_temp_range()
    min_temp = max(view.temp_min, lo)
    max_temp = min(view.temp_max, hi)
    _, top, _, _ = view.plot_area
    ceiling = min(vapor_pressure_ceiling, float(view.y_to_vapor_pressure(top)))
    return ChartBounds.from_window(min_temp, max_temp, CHART_RH_MIN, CHART_RH_MAX, ceiling)
