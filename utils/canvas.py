"""
utils/canvas.py
===============
The 2-D surface contract the chart renderer paints on, and an in-memory
surface that records every call.

Coordinates are canvas pixels, origin top-left, y pointing down. A surface is
owned by one render call; nothing here is thread-safe.
"""
from __future__ import annotations

from typing import Any, List, Protocol, Sequence, Tuple, Union

from domain.primitives import Gradient

FillStyle = Union[str, Gradient]


class Surface(Protocol):
    def clear(self, color: str) -> None: ...

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def quadratic_curve_to(self, cx: float, cy: float, x: float, y: float) -> None: ...

    def arc(self, x: float, y: float, radius: float) -> None:
        """Full circle around (x, y)."""

    def close_path(self) -> None: ...

    def fill(self, style: FillStyle) -> None: ...

    def stroke(self, color: str, line_width: float = 1.0, dash: Sequence[float] = ()) -> None: ...

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None: ...

    def fill_text(self, text: str, x: float, y: float, color: str,
                  font_size: float = 12.0, bold: bool = False, align: str = "left") -> None: ...


class RecordingSurface:
    """Appends ``(operation, args)`` for every call; used to inspect a frame."""

    def __init__(self):
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def _record(self, op: str, *args) -> None:
        self.calls.append((op, args))

    def operations(self) -> List[str]:
        return [op for op, _ in self.calls]

    def clear(self, color):
        self._record("clear", color)

    def begin_path(self):
        self._record("begin_path")

    def move_to(self, x, y):
        self._record("move_to", x, y)

    def line_to(self, x, y):
        self._record("line_to", x, y)

    def quadratic_curve_to(self, cx, cy, x, y):
        self._record("quadratic_curve_to", cx, cy, x, y)

    def arc(self, x, y, radius):
        self._record("arc", x, y, radius)

    def close_path(self):
        self._record("close_path")

    def fill(self, style):
        self._record("fill", style)

    def stroke(self, color, line_width=1.0, dash=()):
        self._record("stroke", color, line_width, tuple(dash))

    def fill_rect(self, x, y, width, height, color):
        self._record("fill_rect", x, y, width, height, color)

    def fill_text(self, text, x, y, color, font_size=12.0, bold=False, align="left"):
        self._record("fill_text", text, x, y, color, font_size, bold, align)
