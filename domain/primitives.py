"""
domain/primitives.py
====================
Backend-independent drawing commands produced by the chart renderer.

Coordinates are canvas pixels (origin top-left, y pointing down). A command
only describes what to draw; issuing it against a surface is the job of
``services.chart_service.paint``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

Point = Tuple[float, float]

LAYER_GRID = "grid"
LAYER_RH_CURVES = "rh_curves"
LAYER_ENTHALPY = "enthalpy"
LAYER_WET_BULB = "wet_bulb"
LAYER_COMFORT_ZONE = "comfort_zone"
LAYER_POINTS = "points"
LAYER_DEW_POINT = "dew_point"
LAYER_LABELS = "labels"

# Later layers are drawn over earlier ones
LAYER_ORDER: Tuple[str, ...] = (
    LAYER_GRID,
    LAYER_RH_CURVES,
    LAYER_ENTHALPY,
    LAYER_WET_BULB,
    LAYER_COMFORT_ZONE,
    LAYER_POINTS,
    LAYER_DEW_POINT,
    LAYER_LABELS,
)


@dataclass(frozen=True)
class Gradient:
    """Two-stop linear gradient between two canvas points."""

    start: Point
    end: Point
    start_color: str
    end_color: str


@dataclass(frozen=True)
class PathCommand:
    """
    Polyline (or quadratic-midpoint smoothed curve) with optional fill.

    smooth=True draws quadratic segments through the midpoints of
    consecutive samples instead of straight segments.
    """

    layer: str
    points: Tuple[Point, ...]
    stroke: Optional[str] = None
    line_width: float = 1.0
    dash: Tuple[float, ...] = ()
    fill: Optional[str] = None
    gradient: Optional[Gradient] = None
    closed: bool = False
    smooth: bool = False


@dataclass(frozen=True)
class CircleCommand:
    layer: str
    center: Point
    radius: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    line_width: float = 1.0


@dataclass(frozen=True)
class TextCommand:
    layer: str
    position: Point
    text: str
    color: str
    font_size: float = 12.0
    bold: bool = False
    align: str = "left"


@dataclass(frozen=True)
class RectCommand:
    layer: str
    origin: Point
    width: float
    height: float
    fill: str


def _finite(values: Sequence[float]) -> bool:
    return all(math.isfinite(v) for v in values)


def is_finite(command) -> bool:
    """True when every coordinate of the command is a finite number."""
    if isinstance(command, PathCommand):
        return all(_finite(p) for p in command.points)
    if isinstance(command, CircleCommand):
        return _finite((*command.center, command.radius))
    if isinstance(command, TextCommand):
        return _finite(command.position)
    if isinstance(command, RectCommand):
        return _finite((*command.origin, command.width, command.height))
    return False
