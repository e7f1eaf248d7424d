"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from packing_slipper.config import LabelConfig, LogoConfig, TextConfig
from packing_slipper.shopify.models import Order


class RecordingSurface:
    """Stands in for a reportlab canvas and records what gets drawn."""

    def __init__(self) -> None:
        self.events: list[tuple[Any, ...]] = []
        self.font: tuple[str, float] | None = None
        self.saved = False

    def setFont(self, psfontname: str, size: float) -> None:  # noqa: N802
        self.font = (psfontname, size)
        self.events.append(("font", psfontname, size))

    def drawString(self, x: float, y: float, text: str) -> None:  # noqa: N802
        assert self.font is not None
        self.events.append(("text", x, y, text, self.font[0]))

    def drawImage(self, image, x, y, width=None, height=None, mask=None) -> None:  # noqa: N802
        self.events.append(("image", x, y, width, height))

    def save(self) -> None:
        self.saved = True

    @property
    def texts(self) -> list[str]:
        return [e[3] for e in self.events if e[0] == "text"]

    @property
    def drawn(self) -> list[tuple[Any, ...]]:
        return [e for e in self.events if e[0] in {"text", "image"}]


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def logo_path(tmp_path: Path) -> Path:
    """A small PNG logo, 80x40 pixels."""
    path = tmp_path / "logo.png"
    Image.new("RGB", (80, 40), color=(200, 30, 30)).save(path)
    return path


@pytest.fixture
def label_config(logo_path: Path) -> LabelConfig:
    return LabelConfig(
        logo=LogoConfig(filename=logo_path, vertical_space=20),
        text=TextConfig(
            salutation="Thanks for shopping!",
            signature="The Shop",
            vertical_space=110,
        ),
    )


@pytest.fixture
def order_payload() -> dict[str, Any]:
    """A trimmed-down order as returned by the Shopify orders endpoint."""
    return {
        "id": 450789469,
        "name": "#1001",
        "created_at": "2024-03-05T14:22:10-05:00",
        "financial_status": "paid",
        "shipping_address": {
            "first_name": "Jane",
            "last_name": "Doe",
            "address1": "1 Main St",
            "address2": "Apt 4",
            "city": "Springfield",
            "province_code": "IL",
            "zip": "62701",
            "country": "United States",
            "phone": None,
        },
        "line_items": [
            {"id": 1, "name": "Widget", "quantity": 2, "sku": "W-1"},
            {"id": 2, "name": "Gadget", "quantity": 1, "sku": None},
        ],
    }


@pytest.fixture
def order(order_payload: dict[str, Any]) -> Order:
    return Order.model_validate(order_payload)
