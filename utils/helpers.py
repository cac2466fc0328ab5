"""
utils/helpers.py
================
Small presentation helpers: CSS color parsing, alpha adjustment and the
mold-risk / palette lookups used by the renderer and the UI.
"""
from __future__ import annotations

import math
import re
from typing import Optional, Tuple

from config import MOLD_RISK_COLORS, MOLD_RISK_LEVELS, POINT_PALETTE

RGBA = Tuple[int, int, int, float]

_RGBA_RE = re.compile(r"rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([\d.]+)\s*)?\)")


def parse_color(color: Optional[str]) -> RGBA:
    """
    Parse ``#rgb``, ``#rrggbb``, ``#rrggbbaa``, ``rgb(...)`` or ``rgba(...)``.

    Anything else falls back to opaque black.
    """
    if not color:
        return 0, 0, 0, 1.0
    color = color.strip()

    if color.startswith("#"):
        hex_part = color[1:]
        if len(hex_part) == 3:
            hex_part = "".join(c * 2 for c in hex_part)
        try:
            r, g, b = (int(hex_part[i:i + 2], 16) for i in (0, 2, 4))
            a = int(hex_part[6:8], 16) / 255.0 if len(hex_part) == 8 else 1.0
        except ValueError:
            return 0, 0, 0, 1.0
        return r, g, b, a

    match = _RGBA_RE.match(color)
    if match:
        r, g, b = (int(match.group(i)) for i in (1, 2, 3))
        a = float(match.group(4)) if match.group(4) is not None else 1.0
        return r, g, b, a

    return 0, 0, 0, 1.0


def rgba_to_string(rgba: RGBA) -> str:
    r, g, b, a = rgba
    return f"rgba({r}, {g}, {b}, {round(a, 3)})"


def gradient_stops(color: str, delta: float = 0.2) -> Tuple[str, str]:
    """
    (start, end) colors for a two-stop gradient around ``color``.

    Only ``rgb(...)`` / ``rgba(...)`` colors are shifted, by -delta and +delta
    on the alpha channel (clamped to [0, 1], a missing alpha counts as 0.5).
    Any other color is used unchanged for both stops.
    """
    match = _RGBA_RE.match(color.strip())
    if not match:
        return color, color
    r, g, b = (int(match.group(i)) for i in (1, 2, 3))
    a = float(match.group(4)) if match.group(4) is not None else 0.5
    return (
        rgba_to_string((r, g, b, max(0.0, a - delta))),
        rgba_to_string((r, g, b, min(1.0, a + delta))),
    )


def set_alpha(color: str, alpha: float) -> str:
    r, g, b, _ = parse_color(color)
    return rgba_to_string((r, g, b, min(1.0, max(0.0, alpha))))


def palette_color(index: int) -> str:
    """Deterministic color for the index-th point without a configured one."""
    return POINT_PALETTE[index % len(POINT_PALETTE)]


# ---------------------------------------------------------------------------
# Mold risk
# ---------------------------------------------------------------------------

def mold_risk_level(risk: float) -> str:
    """Level name for a 0..6 mold-risk score."""
    if not math.isfinite(risk):
        return MOLD_RISK_LEVELS[0]
    index = int(min(max(math.floor(risk), 0), len(MOLD_RISK_LEVELS) - 1))
    return MOLD_RISK_LEVELS[index]


def mold_risk_color(risk: float, dark_mode: bool = False) -> str:
    if not math.isfinite(risk):
        risk = 0.0
    index = int(min(max(math.floor(risk), 0), max(MOLD_RISK_COLORS)))
    light, dark = MOLD_RISK_COLORS[index]
    return dark if dark_mode else light


def format_temperature(temp_c: float, unit: str, decimals: int = 1) -> str:
    """Celsius value shown in the display unit ('C' or 'F')."""
    if unit == "F":
        return f"{temp_c * 9.0 / 5.0 + 32.0:.{decimals}f}°F"
    return f"{temp_c:.{decimals}f}°C"


def icon_class(icon: str) -> str:
    """CSS classes for a Home-Assistant style ``mdi:name`` icon."""
    name = icon.split(":", 1)[1] if ":" in icon else icon
    return f"mdi mdi-{name}"
