"""
domain/psychrometrics.py
========================
Moist-air thermodynamic model used by the chart and the point processor.

Pure functions of (temperature [°C], relative humidity [%]). Pressures in kPa,
mixing ratios in kg water / kg dry air, enthalpy in kJ/kg dry air.
Every function accepts a float or a numpy array; scalars in, floats out.

All vapor pressures are derived from the single ``saturation_pressure``
implementation so that quantities computed from the same state agree.
This module has zero dependencies on Dash, pandas, or any service layer.
"""
from __future__ import annotations

import dataclasses
from typing import Union

import numpy as np

from config import (
    AIR_SPECIFIC_HEAT,
    ATMOSPHERIC_PRESSURE,
    DEW_POINT_FLOOR,
    DEW_POINT_MIN_RH,
    DRY_AIR_GAS_CONSTANT,
    KELVIN_OFFSET,
    LATENT_HEAT,
    MAGNUS_A,
    MAGNUS_B,
    MAGNUS_P0,
    MAX_VAPOR_PRESSURE_FRACTION,
    MET_TO_W_M2,
    MOLD_RISK_DEW_POINT_BONUS,
    MOLD_RISK_DEW_POINT_THRESHOLD,
    MOLD_RISK_MAX,
    MOLECULAR_WEIGHT_RATIO,
    PMV_AIR_VELOCITY,
    PMV_CLOTHING,
    PMV_LIMIT,
    PMV_METABOLIC_RATE,
    VAPOR_SPECIFIC_HEAT,
    WATER_VAPOR_GAS_CONSTANT,
)

Number = Union[float, np.ndarray]


def _out(value):
    """Return a plain float for 0-d results, the array otherwise."""
    arr = np.asarray(value, dtype=float)
    return float(arr) if arr.ndim == 0 else arr


# ---------------------------------------------------------------------------
# Unit conversion (presentation boundary only)
# ---------------------------------------------------------------------------

def celsius_to_fahrenheit(temp_c: Number) -> Number:
    return temp_c * 9.0 / 5.0 + 32.0


def fahrenheit_to_celsius(temp_f: Number) -> Number:
    return (temp_f - 32.0) * 5.0 / 9.0


# ---------------------------------------------------------------------------
# Vapor pressure
# ---------------------------------------------------------------------------

def saturation_pressure(temp: Number) -> Number:
    """Magnus-Tetens saturation vapor pressure over water [kPa]."""
    t = np.asarray(temp, dtype=float)
    return _out(MAGNUS_P0 * np.exp(MAGNUS_A * t / (t + MAGNUS_B)))


def vapor_pressure(temp: Number, rh: Number) -> Number:
    """Partial pressure of water vapor [kPa]."""
    return _out(np.asarray(rh, dtype=float) / 100.0 * saturation_pressure(temp))


def mixing_ratio_from_vapor_pressure(pv: Number) -> Number:
    """
    W = 0.622 · Pv / (P − Pv).

    Pv is capped at MAX_VAPOR_PRESSURE_FRACTION · P, otherwise W diverges
    when the saturation pressure approaches atmospheric pressure.
    """
    p = np.minimum(np.asarray(pv, dtype=float), MAX_VAPOR_PRESSURE_FRACTION * ATMOSPHERIC_PRESSURE)
    return _out(MOLECULAR_WEIGHT_RATIO * p / (ATMOSPHERIC_PRESSURE - p))


def vapor_pressure_from_mixing_ratio(w: Number) -> Number:
    """Inverse of ``mixing_ratio_from_vapor_pressure`` [kPa]."""
    w = np.asarray(w, dtype=float)
    return _out(w * ATMOSPHERIC_PRESSURE / (MOLECULAR_WEIGHT_RATIO + w))


# ---------------------------------------------------------------------------
# Derived quantities
# ---------------------------------------------------------------------------

def dew_point(temp: Number, rh: Number) -> Number:
    """
    Dew point from the inverted Magnus formula [°C].

    RH below DEW_POINT_MIN_RH returns DEW_POINT_FLOOR instead of −∞.
    """
    t = np.asarray(temp, dtype=float)
    h = np.asarray(rh, dtype=float)
    dry = h < DEW_POINT_MIN_RH
    alpha = MAGNUS_A * t / (MAGNUS_B + t) + np.log(np.maximum(h, DEW_POINT_MIN_RH) / 100.0)
    return _out(np.where(dry, DEW_POINT_FLOOR, MAGNUS_B * alpha / (MAGNUS_A - alpha)))


def mixing_ratio(temp: Number, rh: Number) -> Number:
    """Water content [kg/kg dry air]."""
    return mixing_ratio_from_vapor_pressure(vapor_pressure(temp, rh))


def enthalpy(temp: Number, w: Number) -> Number:
    """Specific enthalpy of moist air [kJ/kg dry air]."""
    t = np.asarray(temp, dtype=float)
    return _out(AIR_SPECIFIC_HEAT * t + np.asarray(w, dtype=float) * (LATENT_HEAT + VAPOR_SPECIFIC_HEAT * t))


def moist_air_enthalpy(temp: Number, rh: Number) -> Number:
    return enthalpy(temp, mixing_ratio(temp, rh))


def absolute_humidity(temp: Number, rh: Number) -> Number:
    """Water vapor density ρv = Pv / (Rv · T) [g/m³]."""
    pv_pa = np.asarray(vapor_pressure(temp, rh)) * 1000.0
    density = pv_pa / (WATER_VAPOR_GAS_CONSTANT * (np.asarray(temp, dtype=float) + KELVIN_OFFSET))
    return _out(density * 1000.0)


def wet_bulb(temp: Number, rh: Number) -> Number:
    """
    Stull (2011) closed-form wet-bulb temperature [°C].

    Valid for roughly 5–99 %RH and −20–50 °C; outside that band it is only
    indicative.
    """
    t = np.asarray(temp, dtype=float)
    h = np.asarray(rh, dtype=float)
    tw = (
        t * np.arctan(0.151977 * np.sqrt(h + 8.313659))
        + np.arctan(t + h)
        - np.arctan(h - 1.676331)
        + 0.00391838 * np.power(h, 1.5) * np.arctan(0.023101 * h)
        - 4.686035
    )
    return _out(tw)


def specific_volume(temp: Number, rh: Number) -> Number:
    """Volume of moist air per kg of dry air [m³/kg]."""
    t_k = np.asarray(temp, dtype=float) + KELVIN_OFFSET
    pv = np.minimum(np.asarray(vapor_pressure(temp, rh)), MAX_VAPOR_PRESSURE_FRACTION * ATMOSPHERIC_PRESSURE)
    w = np.asarray(mixing_ratio(temp, rh))
    # R_d [J/(kg·K)] / P [kPa] yields litres per kg
    return _out(DRY_AIR_GAS_CONSTANT * t_k / (ATMOSPHERIC_PRESSURE - pv) * (1.0 + 1.608 * w) / 1000.0)


# ---------------------------------------------------------------------------
# Heuristic indices
# ---------------------------------------------------------------------------

def mold_risk(temp: float, rh: float) -> float:
    """
    Mold-growth risk score on a 0–6 scale.

    Simplified heuristic (not VTT / IEA Annex 55): a temperature band, a
    humidity band and a bonus when the dew point exceeds 12 °C, summed and
    clamped.
    """
    risk = 0.0

    if temp < 5:
        risk += 0.0
    elif temp < 15:
        risk += 1.0
    elif temp < 20:
        risk += 2.0
    elif temp < 25:
        risk += 3.0
    else:
        risk += 2.5

    if rh < 60:
        risk += 0.0
    elif rh < 70:
        risk += 1.0
    elif rh < 80:
        risk += 2.0
    elif rh < 90:
        risk += 2.5
    else:
        risk += 3.0

    if dew_point(temp, rh) > MOLD_RISK_DEW_POINT_THRESHOLD:
        risk += MOLD_RISK_DEW_POINT_BONUS

    return float(min(max(risk, 0.0), MOLD_RISK_MAX))


def pmv(temp: float, rh: float) -> float:
    """
    Predicted Mean Vote, simplified Fanger approximation.

    Indicative only: clothing, metabolic rate and air velocity are fixed,
    radiant temperature equals air temperature. Clamped to [−3, +3].
    """
    ta = float(temp)
    tr = ta
    met_w = PMV_METABOLIC_RATE * MET_TO_W_M2
    pa = rh / 100.0 * 10.0 * np.exp(16.6536 - 4030.183 / (ta + 235.0))

    value = 0.303 * np.exp(-0.036 * met_w) + 0.028
    value *= (
        (met_w - MET_TO_W_M2)
        - 0.42 * (met_w - 50.0)
        - 0.0173 * met_w * (5.87 - pa)
        - 0.0014 * met_w * (34.0 - ta)
        - 3.96e-8 * PMV_CLOTHING * ((tr + 273.0) ** 4 - (ta + 273.0) ** 4)
        - 0.072 * PMV_CLOTHING * (34.0 - ta)
        - 0.054 * (5.87 - pa)
    )

    if PMV_AIR_VELOCITY > 0.1:
        value -= 0.2223 * (1.0 - np.exp(-1.387 * PMV_AIR_VELOCITY))

    return float(np.clip(value, -PMV_LIMIT, PMV_LIMIT))


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------

@dataclasses.dataclass(frozen=True)
class DerivedProperties:
    """All quantities derived from one (temperature, RH) state."""

    dew_point: float          # °C
    mixing_ratio: float       # kg/kg
    enthalpy: float           # kJ/kg
    absolute_humidity: float  # g/m³
    wet_bulb: float           # °C
    vapor_pressure: float     # kPa
    specific_volume: float    # m³/kg
    mold_risk: float          # 0..6
    pmv: float                # −3..+3


def derive_properties(temp: float, rh: float) -> DerivedProperties:
    w = mixing_ratio(temp, rh)
    return DerivedProperties(
        dew_point=dew_point(temp, rh),
        mixing_ratio=w,
        enthalpy=enthalpy(temp, w),
        absolute_humidity=absolute_humidity(temp, rh),
        wet_bulb=wet_bulb(temp, rh),
        vapor_pressure=vapor_pressure(temp, rh),
        specific_volume=specific_volume(temp, rh),
        mold_risk=mold_risk(temp, rh),
        pmv=pmv(temp, rh),
    )
