"""
config.py
=========
Application-wide constants: physical constants, chart layout, sampling
resolution, default colors and the stub chart configuration used by the UI.
No business logic lives here.
"""
from __future__ import annotations
from typing import Any, Dict, List, Tuple

# ---------------------------------------------------------------------------
# Physical constants
# ---------------------------------------------------------------------------
ATMOSPHERIC_PRESSURE: float = 101.325   # Sea-level pressure               [kPa]
MAGNUS_A: float = 17.27                 # Magnus-Tetens coefficient         [-]
MAGNUS_B: float = 237.3                 # Magnus-Tetens coefficient         [°C]
MAGNUS_P0: float = 0.61078              # Saturation pressure at 0 °C       [kPa]
MOLECULAR_WEIGHT_RATIO: float = 0.622   # M_water / M_dry_air               [-]
AIR_SPECIFIC_HEAT: float = 1.006        # c_p dry air                       [kJ/(kg·K)]
VAPOR_SPECIFIC_HEAT: float = 1.84       # c_p water vapour                  [kJ/(kg·K)]
LATENT_HEAT: float = 2501.0             # h_fg at 0 °C                      [kJ/kg]
DRY_AIR_GAS_CONSTANT: float = 287.058   # R_d                               [J/(kg·K)]
WATER_VAPOR_GAS_CONSTANT: float = 461.5 # R_v                               [J/(kg·K)]
KELVIN_OFFSET: float = 273.15

# ---------------------------------------------------------------------------
# Singularity guards
# ---------------------------------------------------------------------------
DEW_POINT_MIN_RH: float = 0.01          # Below this RH [%] ln(RH) is not evaluated
DEW_POINT_FLOOR: float = -100.0         # Dew point returned for (almost) dry air [°C]
MAX_VAPOR_PRESSURE_FRACTION: float = 0.99  # Pv is capped at this fraction of P

# ---------------------------------------------------------------------------
# Thermal comfort (simplified Fanger PMV – fixed, not user-configurable)
# ---------------------------------------------------------------------------
PMV_CLOTHING: float = 0.7       # clo
PMV_METABOLIC_RATE: float = 1.2  # met
PMV_AIR_VELOCITY: float = 0.1   # m/s
MET_TO_W_M2: float = 58.15
PMV_LIMIT: float = 3.0

SUMMER_THRESHOLD: float = 23.0  # °C above which the ideal setpoint assumes summer
SETPOINT_RH_MARGIN: float = 5.0  # %RH nudged towards the comfortable band edge

MOLD_RISK_MAX: float = 6.0
MOLD_RISK_DEW_POINT_THRESHOLD: float = 12.0  # °C
MOLD_RISK_DEW_POINT_BONUS: float = 0.5

# ---------------------------------------------------------------------------
# Chart layout (reference canvas 800 × 600, scaled to the real size)
# ---------------------------------------------------------------------------
REFERENCE_WIDTH: float = 800.0
REFERENCE_HEIGHT: float = 600.0
PLOT_LEFT: float = 50.0
PLOT_RIGHT: float = 750.0
PLOT_TOP: float = 50.0
PLOT_BOTTOM: float = 550.0

CHART_TEMP_MIN: float = -10.0
CHART_TEMP_MAX: float = 50.0
CHART_RH_MIN: float = 0.0
CHART_RH_MAX: float = 100.0
VAPOR_PRESSURE_CEILING: float = 4.0  # Ordinate top of the default chart [kPa]

MIN_ZOOM: float = 0.5
MAX_ZOOM: float = 3.0

# ---------------------------------------------------------------------------
# Sampling resolution
# ---------------------------------------------------------------------------
RH_CURVE_VALUES: List[int] = [10, 20, 30, 40, 50, 60, 70, 80, 90, 100]
RH_CURVE_TEMP_STEP: float = 1.0      # °C
ENTHALPY_VALUES: List[int] = list(range(0, 101, 10))  # kJ/kg
ENTHALPY_TEMP_STEP: float = 0.5      # °C
ENTHALPY_MAX_MIXING_RATIO: float = 0.05
ENTHALPY_MIN_RH: float = 10.0
WET_BULB_VALUES: List[int] = list(range(-5, 36, 5))  # °C
WET_BULB_TEMP_STEP: float = 0.5      # °C
WET_BULB_RH_STEP: float = 1.0        # %RH decrement of the linear scan
WET_BULB_TOLERANCE: float = 0.2      # °C
COMFORT_EDGE_TEMP_STEP: float = 0.5  # °C
COMFORT_EDGE_RH_STEP: float = 1.0    # %RH

TEMP_GRID_STEP_C: float = 5.0
TEMP_GRID_STEP_F: float = 9.0
TEMP_GRID_START_F: float = 14.0
TEMP_GRID_END_F: float = 122.0

# ---------------------------------------------------------------------------
# Display modes and units
# ---------------------------------------------------------------------------
MODE_MINIMAL  = "minimal"    # Points and comfort zone only
MODE_STANDARD = "standard"   # + optional iso-lines
MODE_ADVANCED = "advanced"   # + actions / power in the data table
DISPLAY_MODES = (MODE_MINIMAL, MODE_STANDARD, MODE_ADVANCED)

UNIT_CELSIUS = "C"
UNIT_FAHRENHEIT = "F"
TEMPERATURE_UNIT_ALIASES: Dict[str, str] = {
    "c": UNIT_CELSIUS, "celsius": UNIT_CELSIUS, "°c": UNIT_CELSIUS,
    "f": UNIT_FAHRENHEIT, "fahrenheit": UNIT_FAHRENHEIT, "°f": UNIT_FAHRENHEIT,
}

DEFAULT_MASS_FLOW_RATE: float = 0.5  # kg/s dry air
DEFAULT_COMFORT_RANGE: Dict[str, float] = {"tempMin": 20.0, "tempMax": 26.0, "rhMin": 40.0, "rhMax": 60.0}
DEFAULT_ICON = "mdi:thermometer"
MDI_STYLESHEET = "https://cdn.jsdelivr.net/npm/@mdi/font@7.4.47/css/materialdesignicons.min.css"

# ---------------------------------------------------------------------------
# Colors  (light, dark)
# ---------------------------------------------------------------------------
DEFAULT_COLORS: Dict[str, Tuple[str, str]] = {
    "bgColor":      ("#ffffff", "#1c1c1c"),
    "gridColor":    ("#cccccc", "#444444"),
    "curveColor":   ("#1f77b4", "#4fc3f7"),
    "textColor":    ("#333333", "#e0e0e0"),
    "comfortColor": ("rgba(144, 238, 144, 0.5)", "rgba(100, 200, 100, 0.3)"),
}
SATURATION_CURVE_COLOR = "rgba(30, 144, 255, 0.8)"
ENTHALPY_COLOR: Tuple[str, str] = ("rgba(255, 99, 71, 0.7)", "rgba(255, 165, 0, 0.7)")
WET_BULB_COLOR: Tuple[str, str] = ("rgba(0, 100, 255, 0.4)", "rgba(0, 255, 255, 0.4)")
DEW_POINT_COLOR = "rgba(0, 0, 255, 0.5)"
POINT_OUTLINE_COLOR: Tuple[str, str] = ("#000000", "#ffffff")
LABEL_BACKGROUND: Tuple[str, str] = ("rgba(255, 255, 255, 0.9)", "rgba(0, 0, 0, 0.7)")

# Deterministic replacement for a point without a configured color
POINT_PALETTE: List[str] = [
    "#e6194b", "#3cb44b", "#4363d8", "#f58231", "#911eb4",
    "#42d4f4", "#f032e6", "#9a6324", "#800000", "#000075",
]

# Mold risk levels 0..6  (light, dark)
MOLD_RISK_LEVELS: List[str] = ["none", "very low", "low", "moderate", "high", "very high", "critical"]
MOLD_RISK_COLORS: Dict[int, Tuple[str, str]] = {
    0: ("#2E7D32", "#4CAF50"),
    1: ("#558B2F", "#8BC34A"),
    2: ("#9E9D24", "#CDDC39"),
    3: ("#F9A825", "#FFEB3B"),
    4: ("#EF6C00", "#FFC107"),
    5: ("#E65100", "#FF9800"),
    6: ("#C62828", "#FF5722"),
}

# ---------------------------------------------------------------------------
# UI display
# ---------------------------------------------------------------------------
CHART_WIDTH_PX = 800
CHART_HEIGHT_PX = 600
NO_VALID_ENTITY_MESSAGE = "No valid entity found. Check your configuration."

DEFAULT_CHART_CONFIG: Dict[str, Any] = {
    "chartTitle": "Psychrometric chart",
    "points": [
        {"temp": "sensor.living_temperature", "humidity": "sensor.living_humidity",
         "color": "#e6194b", "label": "Living"},
        {"temp": "sensor.bedroom_temperature", "humidity": "sensor.bedroom_humidity",
         "color": "#4363d8", "label": "Bedroom"},
    ],
    "comfortRange": dict(DEFAULT_COMFORT_RANGE),
    "massFlowRate": DEFAULT_MASS_FLOW_RATE,
    "showEnthalpy": True,
    "showWetBulb": True,
    "showDewPoint": True,
    "showPointLabels": True,
    "displayMode": MODE_STANDARD,
    "darkMode": False,
}

DEFAULT_SNAPSHOT: Dict[str, Any] = {
    "sensor.living_temperature": {"state": "22.0", "last_changed": "2024-01-01T12:00:00+00:00"},
    "sensor.living_humidity": {"state": "60", "last_changed": "2024-01-01T12:00:00+00:00"},
    "sensor.bedroom_temperature": {"state": "17.5", "last_changed": "2024-01-01T12:00:00+00:00"},
    "sensor.bedroom_humidity": {"state": "72", "last_changed": "2024-01-01T12:00:00+00:00"},
}
