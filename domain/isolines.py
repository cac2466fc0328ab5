"""
domain/isolines.py
==================
Sampling of the chart's curve families in the physical (T, RH) domain.

Nothing here knows about pixels except ``label_anchor``, which receives
already-mapped points. Every curve is returned as a list of (T, RH) pairs;
the renderer maps them through a ``ViewTransform``.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from config import (
    AIR_SPECIFIC_HEAT,
    COMFORT_EDGE_RH_STEP,
    COMFORT_EDGE_TEMP_STEP,
    ENTHALPY_MAX_MIXING_RATIO,
    ENTHALPY_MIN_RH,
    LATENT_HEAT,
    VAPOR_SPECIFIC_HEAT,
    WET_BULB_RH_STEP,
    WET_BULB_TOLERANCE,
)
from domain.comfort import ComfortRange
from domain.psychrometrics import saturation_pressure, vapor_pressure_from_mixing_ratio, wet_bulb

StatePoint = Tuple[float, float]   # (temperature °C, RH %)
PixelPoint = Tuple[float, float]


# ---------------------------------------------------------------------------
# Sampling helpers
# ---------------------------------------------------------------------------

def sample_range(start: float, stop: float, step: float) -> np.ndarray:
    """start, start+step, … up to and including ``stop`` when it falls on the grid."""
    if stop < start or step <= 0:
        return np.empty(0)
    n = int(math.floor((stop - start) / step + 1e-6)) + 1
    return start + step * np.arange(n)


def aligned_range(start: float, stop: float, step: float) -> np.ndarray:
    """Multiples of ``step`` inside [start, stop]."""
    first = math.ceil(start / step - 1e-6) * step
    return sample_range(first, stop, step)


def edge_samples(start: float, stop: float, step: float) -> np.ndarray:
    """Both endpoints plus evenly spaced samples no further apart than ``step``."""
    n = max(2, int(math.ceil(abs(stop - start) / step)) + 1)
    return np.linspace(start, stop, n)


def vapor_pressure_grid_step(max_vapor_pressure: float) -> float:
    """Spacing of the horizontal grid lines [kPa]."""
    if max_vapor_pressure <= 1.0:
        return 0.1
    if max_vapor_pressure <= 5.0:
        return 0.5
    return 1.0


# ---------------------------------------------------------------------------
# Relative humidity
# ---------------------------------------------------------------------------

def rh_curve(rh: float, temps: Sequence[float]) -> List[StatePoint]:
    return [(float(t), float(rh)) for t in temps]


def label_anchor(
    pixel_points: Sequence[PixelPoint],
    plot_area: Tuple[float, float, float, float],
) -> Optional[PixelPoint]:
    """
    Rightmost sample inside the plot's inner bounds.

    Points are ordered by increasing temperature; the search starts at the
    max-temperature end and walks inward. None when nothing is visible.
    """
    left, top, right, bottom = plot_area
    for x, y in reversed(pixel_points):
        if left <= x <= right and top <= y <= bottom:
            return x, y
    return None


# ---------------------------------------------------------------------------
# Enthalpy
# ---------------------------------------------------------------------------

def enthalpy_isoline(h: float, temps: Sequence[float]) -> List[StatePoint]:
    """
    Constant-enthalpy line.

    For each temperature the enthalpy equation is solved for W, negative or
    implausibly wet (W > 0.05) solutions are rejected and the rest converted
    back to RH; only 10–100 %RH is kept.
    """
    t = np.asarray(temps, dtype=float)
    if t.size == 0:
        return []
    w = (h - AIR_SPECIFIC_HEAT * t) / (LATENT_HEAT + VAPOR_SPECIFIC_HEAT * t)
    valid = (w >= 0) & (w <= ENTHALPY_MAX_MIXING_RATIO)
    pv = np.asarray(vapor_pressure_from_mixing_ratio(np.where(valid, w, 0.0)))
    rh = pv / np.asarray(saturation_pressure(t)) * 100.0
    keep = valid & (rh >= ENTHALPY_MIN_RH) & (rh <= 100.0)
    return [(float(a), float(b)) for a, b in zip(t[keep], rh[keep])]


def quadratic_midpoint_segments(
    points: Sequence[PixelPoint],
) -> List[Tuple[PixelPoint, PixelPoint]]:
    """
    Quadratic-midpoint spline through ``points``.

    Returns (control, end) pairs to follow a move to ``points[0]``: each
    sample becomes a control point and the curve passes through the
    midpoints between samples, ending on the last sample. Needs ≥ 3 points.
    """
    if len(points) < 3:
        return []
    segments = []
    for i in range(1, len(points) - 1):
        (x0, y0), (x1, y1) = points[i], points[i + 1]
        segments.append(((x0, y0), ((x0 + x1) / 2.0, (y0 + y1) / 2.0)))
    segments.append((tuple(points[-2]), tuple(points[-1])))
    return segments


# ---------------------------------------------------------------------------
# Wet bulb
# ---------------------------------------------------------------------------
# A strategy maps (tw, dry-bulb temps, rh_step, tolerance) to one RH per
# temperature, NaN where no RH reproduces the target wet bulb.

WetBulbStrategy = Callable[[float, np.ndarray, float, float], np.ndarray]


def _scan_strategy(tw: float, temps: np.ndarray, rh_step: float, tolerance: float) -> np.ndarray:
    """Scan RH downward from 100 % and accept the first match within tolerance."""
    rhs = np.arange(100.0, 0.0, -rh_step)
    calc = np.asarray(wet_bulb(temps[:, None], rhs[None, :]))
    hits = np.abs(calc - tw) < tolerance
    first = np.argmax(hits, axis=1)
    found = hits.any(axis=1)
    return np.where(found, rhs[first], np.nan)


def _bisection_strategy(tw: float, temps: np.ndarray, rh_step: float, tolerance: float) -> np.ndarray:
    """Bisection on RH in [rh_step, 100]; rows without a sign change give NaN."""
    lo = np.full(temps.shape, rh_step)
    hi = np.full(temps.shape, 100.0)
    f_lo = np.asarray(wet_bulb(temps, lo)) - tw
    f_hi = np.asarray(wet_bulb(temps, hi)) - tw
    bracketed = np.sign(f_lo) != np.sign(f_hi)

    for _ in range(50):
        mid = (lo + hi) / 2.0
        f_mid = np.asarray(wet_bulb(temps, mid)) - tw
        left = np.sign(f_mid) == np.sign(f_lo)
        lo = np.where(left, mid, lo)
        f_lo = np.where(left, f_mid, f_lo)
        hi = np.where(left, hi, mid)

    rh = (lo + hi) / 2.0
    ok = bracketed & (np.abs(np.asarray(wet_bulb(temps, rh)) - tw) < tolerance)
    return np.where(ok, rh, np.nan)


WET_BULB_STRATEGIES: Dict[str, WetBulbStrategy] = {
    "scan": _scan_strategy,
    "bisection": _bisection_strategy,
}


def solve_for_wet_bulb_isoline(
    tw: float,
    temps: Sequence[float],
    strategy: str = "scan",
    rh_step: float = WET_BULB_RH_STEP,
    tolerance: float = WET_BULB_TOLERANCE,
) -> List[StatePoint]:
    """
    Constant wet-bulb line as (T, RH) pairs.

    The line starts at the saturation point (tw, 100 %), where wet bulb and
    dry bulb coincide; only dry-bulb temperatures above ``tw`` are searched.
    Temperatures for which the strategy finds no RH are skipped.
    """
    try:
        solve = WET_BULB_STRATEGIES[strategy]
    except KeyError:
        raise ValueError(f"Unknown wet-bulb strategy '{strategy}'. Options: {sorted(WET_BULB_STRATEGIES)}")

    t = np.asarray(temps, dtype=float)
    t = t[t > tw]
    line: List[StatePoint] = [(float(tw), 100.0)]
    if t.size == 0:
        return line

    rh = solve(tw, t, rh_step, tolerance)
    line.extend((float(a), float(b)) for a, b in zip(t, rh) if not np.isnan(b))
    return line


# ---------------------------------------------------------------------------
# Comfort zone
# ---------------------------------------------------------------------------

def comfort_zone_outline(
    comfort: ComfortRange,
    temp_step: float = COMFORT_EDGE_TEMP_STEP,
    rh_step: float = COMFORT_EDGE_RH_STEP,
) -> List[StatePoint]:
    """
    Closed outline of the comfort rectangle, sampled along every edge.

    Order: top edge (rh_max) left → right, right edge (temp_max) down, bottom
    edge (rh_min) right → left, left edge (temp_min) up. The last point
    repeats the first.
    """
    c = comfort
    edges = [
        [(t, c.rh_max) for t in edge_samples(c.temp_min, c.temp_max, temp_step)],
        [(c.temp_max, rh) for rh in edge_samples(c.rh_max, c.rh_min, rh_step)],
        [(t, c.rh_min) for t in edge_samples(c.temp_max, c.temp_min, temp_step)],
        [(c.temp_min, rh) for rh in edge_samples(c.rh_min, c.rh_max, rh_step)],
    ]
    outline: List[StatePoint] = [tuple(map(float, edges[0][0]))]
    for edge in edges:
        outline.extend((float(t), float(rh)) for t, rh in edge[1:])
    return outline
