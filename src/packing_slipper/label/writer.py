"""Line-oriented text writer for the fixed-size label page.

The writer keeps its own cursor in top-left page coordinates (y grows down the
page) and converts to PDF coordinates only when drawing. It never adds a second
page: anything pushed past the bottom edge is clipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from packing_slipper.config import FontsConfig
from packing_slipper.errors import RenderError
from packing_slipper.label.fonts import FontStyle, LabelFonts, register_fonts

logger = logging.getLogger(__name__)

PAGE_WIDTH = 144.0  # points
PAGE_HEIGHT = 504.0  # points
FONT_SIZE = 10
LINE_SPACING = 13.0
DEFAULT_MARGIN = 10.0  # points


class DrawingSurface(Protocol):
    """The subset of `reportlab.pdfgen.canvas.Canvas` the writer uses."""

    def setFont(self, psfontname: str, size: float) -> None: ...  # noqa: N802

    def drawString(self, x: float, y: float, text: str) -> Any: ...  # noqa: N802

    def drawImage(  # noqa: N802
        self, image: Any, x: float, y: float, width: float, height: float, mask: Any
    ) -> Any: ...

    def save(self) -> None: ...


@dataclass(frozen=True, slots=True)
class Margins:
    left: float = DEFAULT_MARGIN
    top: float = DEFAULT_MARGIN
    right: float = DEFAULT_MARGIN
    bottom: float = DEFAULT_MARGIN


def _break_token(token: str, measure: Callable[[str], float], max_width: float) -> list[str]:
    pieces: list[str] = []
    current = ""
    for char in token:
        if current and measure(current + char) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def wrap_text(text: str, font_name: str, font_size: float, max_width: float) -> list[str]:
    """Greedy word wrap using the font's advance widths.

    Every returned row fits within `max_width`. A word that is wider than
    `max_width` on its own is broken between characters. Embedded newlines start
    a new row.
    """
    if max_width <= 0:
        raise ValueError("max_width must be positive")

    def measure(s: str) -> float:
        return pdfmetrics.stringWidth(s, font_name, font_size)

    rows: list[str] = []
    for paragraph in text.split("\n"):
        line = ""
        for word in paragraph.split():
            candidate = f"{line} {word}" if line else word
            if measure(candidate) <= max_width:
                line = candidate
                continue

            if line:
                rows.append(line)
                line = ""

            if measure(word) <= max_width:
                line = word
            else:
                pieces = _break_token(word, measure, max_width)
                rows.extend(pieces[:-1])
                line = pieces[-1]

        if line or not paragraph.strip():
            rows.append(line)
    return rows


class LabelWriter:
    """A drawing surface plus cursor and font state."""

    def __init__(
        self,
        surface: DrawingSurface,
        fonts: LabelFonts | None = None,
        *,
        page_width: float = PAGE_WIDTH,
        page_height: float = PAGE_HEIGHT,
        margins: Margins | None = None,
        font_size: float = FONT_SIZE,
        line_spacing: float = LINE_SPACING,
    ) -> None:
        self.surface = surface
        self.fonts = fonts or LabelFonts()
        self.page_width = page_width
        self.page_height = page_height
        self.margins = margins or Margins()
        self.font_size = font_size
        self.line_spacing = line_spacing

        self.x = self.margins.left
        self.y = self.margins.top
        self.style = FontStyle.REGULAR
        self._apply_font()

    @property
    def printable_width(self) -> float:
        return self.page_width - self.margins.right

    @property
    def font_name(self) -> str:
        return self.fonts.name_for(self.style)

    def _apply_font(self) -> None:
        self.surface.setFont(self.font_name, self.font_size)

    def change_font_style(self, style: FontStyle) -> None:
        self.style = style
        self._apply_font()

    def set_xy(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def line_break(self, height: float) -> None:
        self.x = self.margins.left
        self.y += height

    def wrap(self, text: str) -> list[str]:
        return wrap_text(text, self.font_name, self.font_size, self.printable_width)

    def _draw_row(self, text: str) -> None:
        baseline = self.page_height - self.y - pdfmetrics.getAscent(self.font_name, self.font_size)
        self.surface.drawString(self.x, baseline, text)

    def write_line(self, text: str) -> list[str]:
        """Write `text` at the cursor, wrapping at the printable width.

        One trailing newline is a normal line end. Each trailing newline beyond
        the first adds one blank line of spacing. Returns the rows drawn.
        """
        trimmed = text.rstrip("\n")
        newlines = len(text) - len(trimmed)

        rows: list[str] = []
        if trimmed:
            rows = self.wrap(trimmed)
            for row in rows:
                self._draw_row(row)
                self.line_break(self.line_spacing)

        if newlines > 1:
            self.line_break(self.line_spacing * (newlines - 1))
        return rows

    def draw_image(self, path: Path, x: float, y: float) -> tuple[float, float]:
        """Draw an image at its natural size with its top-left corner at (x, y)."""

        try:
            reader = ImageReader(str(path.expanduser()))
            width, height = reader.getSize()
        except Exception as exc:
            raise RenderError(f"failed to load image {path}: {exc}") from exc

        self.surface.drawImage(
            reader,
            x,
            self.page_height - y - height,
            width=width,
            height=height,
            mask="auto",
        )
        logger.debug("Drew image", extra={"path": str(path), "width": width, "height": height})
        return float(width), float(height)

    def save(self) -> None:
        try:
            self.surface.save()
        except OSError as exc:
            raise RenderError(f"failed to write PDF: {exc}") from exc


def create_label(output_path: Path, fonts_config: FontsConfig | None = None) -> LabelWriter:
    """Start a blank label page with regular style active."""

    fonts = register_fonts(fonts_config)
    canvas = Canvas(str(output_path), pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
    return LabelWriter(canvas, fonts)
