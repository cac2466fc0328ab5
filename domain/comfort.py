"""
domain/comfort.py
=================
Comfort-zone membership, ideal setpoints and corrective HVAC power.

Temperatures in °C, relative humidity in %, mass flow in kg/s dry air,
powers in W. No Dash, no UI, no orchestration.
"""
from __future__ import annotations

import dataclasses
from typing import Tuple

from config import AIR_SPECIFIC_HEAT, LATENT_HEAT, SETPOINT_RH_MARGIN, SUMMER_THRESHOLD
from domain.psychrometrics import mixing_ratio

ACTION_HEAT = "heat"
ACTION_COOL = "cool"
ACTION_HUMIDIFY = "humidify"
ACTION_DEHUMIDIFY = "dehumidify"
ACTION_NONE = "none"

STATUS_TOO_COLD = "too_cold"
STATUS_TOO_HOT = "too_hot"
STATUS_TOO_DRY = "too_dry"
STATUS_TOO_HUMID = "too_humid"


@dataclasses.dataclass(frozen=True)
class ComfortRange:
    """Closed rectangle in the (temperature, RH) plane."""

    temp_min: float
    temp_max: float
    rh_min: float
    rh_max: float

    @property
    def mid_temp(self) -> float:
        return (self.temp_min + self.temp_max) / 2.0


@dataclasses.dataclass(frozen=True)
class ActionRecommendation:
    """
    Corrective action towards the nearest comfort-rectangle edge.

    action      : primary action – the temperature action wins when both
                  axes are out of range
    actions     : every applicable action, temperature first
    *_power     : non-negative estimates [W]
    ideal_*     : suggested setpoint
    """

    action: str
    actions: Tuple[str, ...]
    heating_power: float
    cooling_power: float
    humidification_power: float
    dehumidification_power: float
    total_power: float
    ideal_temp: float
    ideal_humidity: float


def is_in_comfort_zone(temp: float, rh: float, comfort: ComfortRange) -> bool:
    """Inclusive on all four bounds."""
    return (
        comfort.temp_min <= temp <= comfort.temp_max
        and comfort.rh_min <= rh <= comfort.rh_max
    )


def comfort_status(temp: float, rh: float, comfort: ComfortRange) -> Tuple[str, ...]:
    """Out-of-range flags; empty when the state is comfortable."""
    flags = []
    if temp < comfort.temp_min:
        flags.append(STATUS_TOO_COLD)
    elif temp > comfort.temp_max:
        flags.append(STATUS_TOO_HOT)
    if rh < comfort.rh_min:
        flags.append(STATUS_TOO_DRY)
    elif rh > comfort.rh_max:
        flags.append(STATUS_TOO_HUMID)
    return tuple(flags)


# ---------------------------------------------------------------------------
# Power estimates
# ---------------------------------------------------------------------------

def heating_power(temp: float, target_temp: float, mass_flow_rate: float) -> float:
    """Sensible power ṁ · c_p · ΔT [W]; negative when the target is colder."""
    return mass_flow_rate * AIR_SPECIFIC_HEAT * (target_temp - temp) * 1000


def cooling_power(temp: float, target_temp: float, mass_flow_rate: float) -> float:
    return abs(heating_power(temp, target_temp, mass_flow_rate))


def humidity_power(temp: float, rh: float, target_rh: float, mass_flow_rate: float) -> float:
    """
    Latent power to move from ``rh`` to ``target_rh`` at constant temperature [W].
    """
    delta_w = mixing_ratio(temp, target_rh) - mixing_ratio(temp, rh)
    return abs(delta_w * mass_flow_rate * LATENT_HEAT * 1000)


# ---------------------------------------------------------------------------
# Setpoint and recommendation
# ---------------------------------------------------------------------------

def ideal_setpoint(temp: float, rh: float, comfort: ComfortRange) -> Tuple[float, float]:
    """
    Nearest comfortable (temperature, RH).

    Inside the zone an energy-saving suggestion is returned instead: the low
    end of the temperature band and a humid-side RH in winter, the reverse in
    summer (T > SUMMER_THRESHOLD).
    """
    ideal_temp = min(max(temp, comfort.temp_min), comfort.temp_max)
    ideal_rh = min(max(rh, comfort.rh_min), comfort.rh_max)

    if ideal_temp == temp and ideal_rh == rh:
        if temp > SUMMER_THRESHOLD:
            ideal_temp = min(temp, comfort.temp_max)
            ideal_rh = max(comfort.rh_min, min(rh, comfort.rh_min + SETPOINT_RH_MARGIN))
        else:
            ideal_temp = max(temp, comfort.temp_min)
            ideal_rh = min(comfort.rh_max, max(rh, comfort.rh_max - SETPOINT_RH_MARGIN))

    return ideal_temp, ideal_rh


def recommend_action(
    temp: float,
    rh: float,
    comfort: ComfortRange,
    mass_flow_rate: float,
) -> ActionRecommendation:
    """Power needed to reach the nearest edge of the comfort rectangle."""
    actions = []
    heating = cooling = humidification = dehumidification = 0.0

    if temp < comfort.temp_min:
        actions.append(ACTION_HEAT)
        heating = heating_power(temp, comfort.temp_min, mass_flow_rate)
    elif temp > comfort.temp_max:
        actions.append(ACTION_COOL)
        cooling = cooling_power(temp, comfort.temp_max, mass_flow_rate)

    if rh < comfort.rh_min:
        actions.append(ACTION_HUMIDIFY)
        humidification = humidity_power(temp, rh, comfort.rh_min, mass_flow_rate)
    elif rh > comfort.rh_max:
        actions.append(ACTION_DEHUMIDIFY)
        dehumidification = humidity_power(temp, rh, comfort.rh_max, mass_flow_rate)

    ideal_temp, ideal_rh = ideal_setpoint(temp, rh, comfort)
    return ActionRecommendation(
        action=actions[0] if actions else ACTION_NONE,
        actions=tuple(actions),
        heating_power=heating,
        cooling_power=cooling,
        humidification_power=humidification,
        dehumidification_power=dehumidification,
        total_power=heating + cooling + humidification + dehumidification,
        ideal_temp=ideal_temp,
        ideal_humidity=ideal_rh,
    )
