"""Font faces used on the label."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from packing_slipper.config import FontsConfig
from packing_slipper.errors import RenderError

logger = logging.getLogger(__name__)

BUILTIN_REGULAR = "Helvetica"
BUILTIN_BOLD = "Helvetica-Bold"

REGULAR_FACE_NAME = "PackingSlip-Regular"
BOLD_FACE_NAME = "PackingSlip-Bold"


class FontStyle(enum.Enum):
    REGULAR = "regular"
    BOLD = "bold"


@dataclass(frozen=True, slots=True)
class LabelFonts:
    """reportlab font names for each style."""

    regular: str = BUILTIN_REGULAR
    bold: str = BUILTIN_BOLD

    def name_for(self, style: FontStyle) -> str:
        if style is FontStyle.BOLD:
            return self.bold
        return self.regular


def _register_ttf(face_name: str, path: Path) -> str:
    try:
        pdfmetrics.registerFont(TTFont(face_name, str(path.expanduser())))
    except (OSError, TTFError) as exc:
        raise RenderError(f"failed to load font {path}: {exc}") from exc
    logger.debug("Registered font", extra={"face": face_name, "path": str(path)})
    return face_name


def register_fonts(config: FontsConfig | None = None) -> LabelFonts:
    """Register any configured TrueType faces and return the names to draw with."""

    if config is None:
        return LabelFonts()

    regular = BUILTIN_REGULAR
    bold = BUILTIN_BOLD
    if config.regular is not None:
        regular = _register_ttf(REGULAR_FACE_NAME, config.regular)
    if config.bold is not None:
        bold = _register_ttf(BOLD_FACE_NAME, config.bold)
    return LabelFonts(regular=regular, bold=bold)
