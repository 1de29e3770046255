"""Character-cell canvas that stencil programs paint on."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

__all__ = [
    "DEFAULT_CANVAS_WIDTH",
    "DEFAULT_CANVAS_HEIGHT",
    "MAX_CANVAS_WIDTH",
    "MAX_CANVAS_HEIGHT",
    "ANSI_RESET",
    "Color",
    "Canvas",
    "value_to_color",
]

DEFAULT_CANVAS_WIDTH = 100
DEFAULT_CANVAS_HEIGHT = 100
MAX_CANVAS_WIDTH = 200
MAX_CANVAS_HEIGHT = 200

ANSI_RESET = "\033[0m"
ANSI_BOLD = "\033[1m"


@dataclass(frozen=True)
class Color:
    """One of the eight ANSI colours: black, red, green, yellow, blue, magenta, cyan, white."""

    code: int = 0

    def ansi(self) -> str:
        """The escape sequence that sets this colour as background."""
        return f"\033[{40 + self.code}m"


def value_to_color(value: int) -> Color:
    """Map any integer onto one of the eight colours."""
    return Color(value % 8)


class Canvas:
    """A fixed-size grid of colours, black when created or cleared."""

    def __init__(self, width: int = DEFAULT_CANVAS_WIDTH, height: int = DEFAULT_CANVAS_HEIGHT):
        width = min(width, MAX_CANVAS_WIDTH)
        height = min(height, MAX_CANVAS_HEIGHT)
        if width <= 0:
            width = DEFAULT_CANVAS_WIDTH
        if height <= 0:
            height = DEFAULT_CANVAS_HEIGHT
        self.width = width
        self.height = height
        self._cells: List[Color] = []
        self.clear()

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def paint_pixel(self, x: int, y: int, color: int) -> None:
        """Set a cell from an integer colour value; points off the canvas are ignored."""
        if self._inside(x, y):
            self._cells[y * self.width + x] = value_to_color(color)

    def pixel(self, x: int, y: int) -> Color:
        """The colour at a cell."""
        if not self._inside(x, y):
            raise IndexError(f"({x}, {y}) is outside a {self.width}x{self.height} canvas")
        return self._cells[y * self.width + x]

    def clear(self) -> None:
        """Paint every cell black."""
        self._cells = [Color(0)] * (self.width * self.height)

    def render(self) -> str:
        """The canvas as ANSI-coloured text, two spaces per cell, one line per row."""
        rows = (
            "".join(
                f"{cell.ansi()}  {ANSI_RESET}"
                for cell in self._cells[row * self.width:(row + 1) * self.width]
            )
            + "\n"
            for row in range(self.height)
        )
        return "".join(rows)

    def render_to(self, file: Optional[TextIO] = None) -> None:
        """Write the rendering to ``file`` (standard output by default)."""
        (file if file is not None else sys.stdout).write(self.render())