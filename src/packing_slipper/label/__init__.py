"""Label page drawing."""

from packing_slipper.label.fonts import FontStyle, LabelFonts
from packing_slipper.label.packing_slip import build_packing_slip, render_packing_slip
from packing_slipper.label.writer import LabelWriter, create_label, wrap_text

__all__ = [
    "FontStyle",
    "LabelFonts",
    "LabelWriter",
    "build_packing_slip",
    "create_label",
    "render_packing_slip",
    "wrap_text",
]
