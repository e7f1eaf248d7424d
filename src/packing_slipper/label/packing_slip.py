"""Lay out an order onto the packing slip label."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from packing_slipper.config import LabelConfig
from packing_slipper.label.fonts import FontStyle
from packing_slipper.label.writer import LabelWriter, create_label
from packing_slipper.shopify.models import Order

logger = logging.getLogger(__name__)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_order_date(value: datetime) -> str:
    """Format like "Jan 2, 2006", independent of the current locale."""

    return f"{_MONTHS[value.month - 1]} {value.day}, {value.year}"


def render_packing_slip(writer: LabelWriter, order: Order, config: LabelConfig) -> None:
    """Draw logo, header, address, line items, then salutation and signature."""

    writer.set_xy(writer.margins.left, config.logo.vertical_space)
    writer.draw_image(config.logo.filename, writer.x, writer.y)

    writer.set_xy(writer.margins.left, config.text.vertical_space)
    writer.write_line(f"Order {order.name}")
    writer.write_line(format_order_date(order.created_at) + "\n\n")

    writer.change_font_style(FontStyle.BOLD)
    writer.write_line("SHIP TO\n")

    address = order.shipping_address
    writer.change_font_style(FontStyle.REGULAR)
    writer.write_line(address.full_name)
    writer.write_line(address.address1)
    if address.address2:
        writer.write_line(address.address2)
    writer.write_line(f"{address.city} {address.province_code} {address.zip}\n")
    writer.write_line(address.country + "\n\n")

    for item in order.line_items:
        writer.change_font_style(FontStyle.REGULAR)
        writer.write_line(f"Qty {item.quantity}")
        writer.change_font_style(FontStyle.BOLD)
        writer.write_line(item.name)
        writer.change_font_style(FontStyle.REGULAR)
        writer.write_line(f"SKU: {item.sku}\n\n")

    writer.write_line(config.text.salutation)
    writer.change_font_style(FontStyle.BOLD)
    writer.write_line(config.text.signature)

    if writer.y > writer.page_height:
        logger.warning(
            "Packing slip content runs past the bottom of the label",
            extra={"order": order.name, "y": writer.y, "page_height": writer.page_height},
        )


def build_packing_slip(order: Order, config: LabelConfig, output_path: Path) -> Path:
    """Render `order` to a PDF at `output_path`."""

    writer = create_label(output_path, config.fonts)
    render_packing_slip(writer, order, config)
    writer.save()
    logger.info("Packing slip written", extra={"path": str(output_path), "order": order.name})
    return output_path
