"""
services/chart_service.py
=========================
Chart renderer: turns processed points and a view transform into an ordered
list of drawing commands, and issues those commands against a surface.

``build_chart_commands`` is pure. Layers are emitted in a fixed order so that
later ones are drawn over earlier ones:

    grid → RH curves → enthalpy → wet bulb → comfort zone → points
         → dew-point guides → labels

Curves that end up with fewer than two samples, labels without a visible
anchor and commands with non-finite coordinates are left out of the frame.
"""
from __future__ import annotations

import collections
import dataclasses
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from config import (
    DEW_POINT_COLOR,
    ENTHALPY_COLOR,
    ENTHALPY_TEMP_STEP,
    ENTHALPY_VALUES,
    LABEL_BACKGROUND,
    NO_VALID_ENTITY_MESSAGE,
    POINT_OUTLINE_COLOR,
    RH_CURVE_TEMP_STEP,
    RH_CURVE_VALUES,
    SATURATION_CURVE_COLOR,
    TEMP_GRID_END_F,
    TEMP_GRID_START_F,
    TEMP_GRID_STEP_C,
    TEMP_GRID_STEP_F,
    UNIT_FAHRENHEIT,
    WET_BULB_COLOR,
    WET_BULB_TEMP_STEP,
    WET_BULB_VALUES,
)
from domain.comfort import ComfortRange
from domain.coordinates import ChartBounds, ViewTransform, default_domain, derive_view, visible_bounds
from domain.isolines import (
    aligned_range,
    comfort_zone_outline,
    enthalpy_isoline,
    label_anchor,
    quadratic_midpoint_segments,
    rh_curve,
    sample_range,
    solve_for_wet_bulb_isoline,
    vapor_pressure_grid_step,
)
from domain.primitives import (
    LAYER_COMFORT_ZONE,
    LAYER_DEW_POINT,
    LAYER_ENTHALPY,
    LAYER_GRID,
    LAYER_LABELS,
    LAYER_ORDER,
    LAYER_POINTS,
    LAYER_RH_CURVES,
    LAYER_WET_BULB,
    CircleCommand,
    Gradient,
    PathCommand,
    RectCommand,
    TextCommand,
    is_finite,
)
from domain.psychrometrics import fahrenheit_to_celsius
from services.config_service import ChartConfig, ChartOptions
from services.point_service import ProcessedPoint, process_points
from utils.helpers import gradient_stops, set_alpha

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Styling (reference-canvas units, multiplied by the view scale)
# ---------------------------------------------------------------------------
GRID_DASH = (5.0, 5.0)
ENTHALPY_DASH = (2.0, 3.0)
WET_BULB_DASH = (1.0, 4.0)
GUIDE_DASH = (5.0, 5.0)
DEW_POINT_DASH = (3.0, 3.0)
POINT_RADIUS = 6.0
HALO_RADIUS = 10.0
HALO_ALPHA = 0.25
DEW_POINT_RADIUS = 4.0
LABEL_PADDING = 4.0
CHAR_WIDTH_RATIO = 0.6   # approximate glyph width / font size


@dataclasses.dataclass
class RenderResult:
    points: List[ProcessedPoint]
    commands: List[Any]
    view: ViewTransform
    bounds: ChartBounds
    messages: List[str] = dataclasses.field(default_factory=list)


def _font_size(view: ViewTransform) -> float:
    return max(10.0, 12.0 * view.scale)


def _scaled(pattern: Sequence[float], scale: float) -> tuple:
    return tuple(d * scale for d in pattern)


def _to_pixels(view: ViewTransform, curve) -> List[tuple]:
    if not curve:
        return []
    temps = np.array([t for t, _ in curve], dtype=float)
    rhs = np.array([rh for _, rh in curve], dtype=float)
    xs = np.atleast_1d(view.temp_to_x(temps))
    ys = np.atleast_1d(view.humidity_to_y(temps, rhs))
    return [(float(x), float(y)) for x, y in zip(xs, ys)]


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------

def _grid(view: ViewTransform, bounds: ChartBounds, options: ChartOptions) -> List[Any]:
    s = view.scale
    left, top, right, bottom = view.plot_area
    font = _font_size(view)
    dash = _scaled(GRID_DASH, s)
    commands: List[Any] = []

    if options.show_vapor_pressure:
        step = vapor_pressure_grid_step(bounds.max_vapor_pressure)
        for pv in sample_range(0.0, bounds.max_vapor_pressure, step):
            y = float(view.vapor_pressure_to_y(pv))
            if not view.is_point_visible(left, y):
                continue
            commands.append(PathCommand(LAYER_GRID, ((left, y), (right, y)), stroke=options.grid_color,
                                        line_width=s, dash=dash))
            commands.append(TextCommand(LAYER_GRID, (10 * view.scale_x, y + 5 * view.scale_y),
                                        f"{pv:.1f} kPa", options.text_color, font))

    if options.temperature_unit == UNIT_FAHRENHEIT:
        ticks = [(fahrenheit_to_celsius(f), f"{f:g}°F")
                 for f in sample_range(TEMP_GRID_START_F, TEMP_GRID_END_F, TEMP_GRID_STEP_F)]
    else:
        ticks = [(t, f"{t:g}°C") for t in aligned_range(bounds.min_temp, bounds.max_temp, TEMP_GRID_STEP_C)]

    for temp, text in ticks:
        if not bounds.min_temp - 1e-6 <= temp <= bounds.max_temp + 1e-6:
            continue
        x = float(view.temp_to_x(temp))
        commands.append(PathCommand(LAYER_GRID, ((x, bottom), (x, top)), stroke=options.grid_color,
                                    line_width=s, dash=dash))
        commands.append(TextCommand(LAYER_GRID, (x - 15 * view.scale_x, bottom + 20 * view.scale_y),
                                    text, options.text_color, font))
    return commands


def _rh_curves(view: ViewTransform, bounds: ChartBounds, options: ChartOptions) -> List[Any]:
    s = view.scale
    temps = aligned_range(bounds.min_temp, bounds.max_temp, RH_CURVE_TEMP_STEP)
    commands: List[Any] = []
    for rh in RH_CURVE_VALUES:
        pixels = _to_pixels(view, rh_curve(rh, temps))
        if len(pixels) < 2:
            continue
        stroke = SATURATION_CURVE_COLOR if rh == 100 else options.curve_color
        width = (1.5 if rh % 20 == 0 else 0.8) * s
        commands.append(PathCommand(LAYER_RH_CURVES, tuple(pixels), stroke=stroke, line_width=width))

        anchor = label_anchor(pixels, view.plot_area)
        if anchor is not None:
            ax, ay = anchor
            commands.append(TextCommand(LAYER_RH_CURVES, (ax + 5 * s, ay), f"{rh}%",
                                        options.text_color, _font_size(view)))
    return commands


def _enthalpy_curves(view: ViewTransform, bounds: ChartBounds, options: ChartOptions) -> List[Any]:
    s = view.scale
    temps = aligned_range(bounds.min_temp, bounds.max_temp, ENTHALPY_TEMP_STEP)
    stroke = ENTHALPY_COLOR[1] if options.dark_mode else ENTHALPY_COLOR[0]
    commands: List[Any] = []
    for h in ENTHALPY_VALUES:
        pixels = _to_pixels(view, enthalpy_isoline(h, temps))
        if len(pixels) < 2:
            continue
        commands.append(PathCommand(LAYER_ENTHALPY, tuple(pixels), stroke=stroke, line_width=s,
                                    dash=_scaled(ENTHALPY_DASH, s), smooth=len(pixels) >= 3))
    return commands


def _wet_bulb_curves(view: ViewTransform, bounds: ChartBounds, options: ChartOptions) -> List[Any]:
    s = view.scale
    temps = aligned_range(bounds.min_temp, bounds.max_temp, WET_BULB_TEMP_STEP)
    stroke = WET_BULB_COLOR[1] if options.dark_mode else WET_BULB_COLOR[0]
    commands: List[Any] = []
    for tw in WET_BULB_VALUES:
        if not bounds.min_temp <= tw <= bounds.max_temp:
            continue
        line = solve_for_wet_bulb_isoline(tw, temps, strategy=options.wet_bulb_strategy)
        pixels = _to_pixels(view, line)
        if len(pixels) < 2:
            continue
        commands.append(PathCommand(LAYER_WET_BULB, tuple(pixels), stroke=stroke, line_width=s,
                                    dash=_scaled(WET_BULB_DASH, s)))
    return commands


def _comfort_zone(view: ViewTransform, comfort: ComfortRange, options: ChartOptions) -> List[Any]:
    pixels = _to_pixels(view, comfort_zone_outline(comfort))
    if len(pixels) < 2:
        return []
    color = options.comfort_color
    avg = comfort.mid_temp
    y_top = float(view.humidity_to_y(avg, comfort.rh_max))
    y_bottom = float(view.humidity_to_y(avg, comfort.rh_min))
    start_color, end_color = gradient_stops(color)
    gradient = Gradient(start=(0.0, y_top), end=(0.0, y_bottom), start_color=start_color, end_color=end_color)
    return [PathCommand(LAYER_COMFORT_ZONE, tuple(pixels), stroke=color, line_width=2 * view.scale,
                        gradient=gradient, closed=True)]


def _data_points(view: ViewTransform, points: Sequence[ProcessedPoint], options: ChartOptions) -> List[Any]:
    s = view.scale
    left, _, _, bottom = view.plot_area
    outline = POINT_OUTLINE_COLOR[1] if options.dark_mode else POINT_OUTLINE_COLOR[0]
    dash = _scaled(GUIDE_DASH, s)
    commands: List[Any] = []
    for p in points:
        x = float(view.temp_to_x(p.temp))
        y = float(view.humidity_to_y(p.temp, p.humidity))
        commands.extend([
            PathCommand(LAYER_POINTS, ((x, bottom), (x, y)), stroke=p.color, line_width=s, dash=dash),
            PathCommand(LAYER_POINTS, ((left, y), (x, y)), stroke=p.color, line_width=s, dash=dash),
            CircleCommand(LAYER_POINTS, (x, y), HALO_RADIUS * s, stroke=set_alpha(p.color, HALO_ALPHA),
                          line_width=3 * s),
            CircleCommand(LAYER_POINTS, (x, y), POINT_RADIUS * s, fill=p.color, stroke=outline,
                          line_width=2 * s),
        ])
    return commands


def _dew_point_guides(view: ViewTransform, points: Sequence[ProcessedPoint]) -> List[Any]:
    s = view.scale
    commands: List[Any] = []
    for p in points:
        x = float(view.temp_to_x(p.temp))
        y = float(view.humidity_to_y(p.temp, p.humidity))
        dew = p.properties.dew_point
        dx = float(view.temp_to_x(dew))
        dy = float(view.humidity_to_y(dew, 100.0))
        commands.append(CircleCommand(LAYER_DEW_POINT, (dx, dy), DEW_POINT_RADIUS * s, fill=DEW_POINT_COLOR))
        commands.append(PathCommand(LAYER_DEW_POINT, ((x, y), (dx, dy)), stroke=DEW_POINT_COLOR,
                                    line_width=s, dash=_scaled(DEW_POINT_DASH, s)))
    return commands


def _labels(view: ViewTransform, points: Sequence[ProcessedPoint], options: ChartOptions) -> List[Any]:
    s = view.scale
    font = _font_size(view)
    pad = LABEL_PADDING * s
    background = LABEL_BACKGROUND[1] if options.dark_mode else LABEL_BACKGROUND[0]
    commands: List[Any] = []
    for p in points:
        x = float(view.temp_to_x(p.temp))
        y = float(view.humidity_to_y(p.temp, p.humidity))
        text_width = len(p.label) * font * CHAR_WIDTH_RATIO
        commands.append(RectCommand(LAYER_LABELS, (x - text_width / 2 - pad, y - 20 * s - pad),
                                    text_width + 2 * pad, 14 * s + 2 * pad, background))
        commands.append(TextCommand(LAYER_LABELS, (x, y - 12 * s), p.label, p.color, font,
                                    bold=True, align="center"))
    return commands


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_chart_commands(
    points: Sequence[ProcessedPoint],
    view: ViewTransform,
    bounds: ChartBounds,
    comfort: ComfortRange,
    options: ChartOptions,
) -> List[Any]:
    """Ordered drawing commands for one frame."""
    layers: Dict[str, List[Any]] = {
        LAYER_GRID: _grid(view, bounds, options),
        LAYER_RH_CURVES: _rh_curves(view, bounds, options),
        LAYER_COMFORT_ZONE: _comfort_zone(view, comfort, options),
        LAYER_POINTS: _data_points(view, points, options),
    }
    if options.enthalpy_enabled:
        layers[LAYER_ENTHALPY] = _enthalpy_curves(view, bounds, options)
    if options.wet_bulb_enabled:
        layers[LAYER_WET_BULB] = _wet_bulb_curves(view, bounds, options)
    if options.dew_point_enabled:
        layers[LAYER_DEW_POINT] = _dew_point_guides(view, points)
    if options.show_point_labels:
        layers[LAYER_LABELS] = _labels(view, points, options)

    commands = [cmd for layer in LAYER_ORDER for cmd in layers.get(layer, [])]
    finite = [cmd for cmd in commands if is_finite(cmd)]
    if len(finite) < len(commands):
        logger.debug("Dropped %d command(s) with non-finite coordinates", len(commands) - len(finite))
    return finite


def paint(commands: Sequence[Any], surface) -> None:
    """Issue ``commands`` to ``surface`` in order."""
    for cmd in commands:
        if isinstance(cmd, PathCommand):
            surface.begin_path()
            surface.move_to(*cmd.points[0])
            if cmd.smooth and len(cmd.points) >= 3:
                for (cx, cy), (x, y) in quadratic_midpoint_segments(cmd.points):
                    surface.quadratic_curve_to(cx, cy, x, y)
            else:
                for x, y in cmd.points[1:]:
                    surface.line_to(x, y)
            if cmd.closed:
                surface.close_path()
            if cmd.gradient is not None:
                surface.fill(cmd.gradient)
            elif cmd.fill is not None:
                surface.fill(cmd.fill)
            if cmd.stroke is not None:
                surface.stroke(cmd.stroke, cmd.line_width, cmd.dash)
        elif isinstance(cmd, CircleCommand):
            surface.begin_path()
            surface.arc(cmd.center[0], cmd.center[1], cmd.radius)
            if cmd.fill is not None:
                surface.fill(cmd.fill)
            if cmd.stroke is not None:
                surface.stroke(cmd.stroke, cmd.line_width, ())
        elif isinstance(cmd, RectCommand):
            surface.fill_rect(cmd.origin[0], cmd.origin[1], cmd.width, cmd.height, cmd.fill)
        elif isinstance(cmd, TextCommand):
            surface.fill_text(cmd.text, cmd.position[0], cmd.position[1], cmd.color,
                              cmd.font_size, cmd.bold, cmd.align)
        else:
            raise TypeError(f"Unsupported drawing command: {cmd!r}")


def render_chart(
    config: ChartConfig,
    snapshot: Optional[Mapping[str, Any]],
    surface=None,
) -> RenderResult:
    """
    One full render cycle: process points, derive the view, build and paint.

    With no usable point the result carries the "no valid entity" message and
    no commands; the surface is only cleared.
    """
    points = process_points(config, snapshot or {})
    view = derive_view(config.width, config.height, config.zoom, default_domain(config.max_vapor_pressure))
    bounds = visible_bounds(view, config.max_vapor_pressure)
    result = RenderResult(points=points, commands=[], view=view, bounds=bounds)

    if surface is not None:
        surface.clear(config.options.bg_color)

    if not points:
        logger.warning("No valid point to render")
        result.messages.append(NO_VALID_ENTITY_MESSAGE)
        return result

    skipped = len(config.points) - len(points)
    if skipped:
        result.messages.append(f"{skipped} point(s) skipped: sensor reading unavailable.")

    result.commands = build_chart_commands(points, view, bounds, config.comfort, config.options)
    if surface is not None:
        paint(result.commands, surface)

    counts = collections.Counter(cmd.layer for cmd in result.commands)
    logger.debug("Rendered %d command(s): %s", len(result.commands), dict(counts))
    return result
