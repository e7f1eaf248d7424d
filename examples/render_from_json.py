#!/usr/bin/env python3
"""Render a packing slip from a saved order payload (no network, no sops).

Useful for checking a label layout:

* `--order` is a JSON file holding one order object as returned by the
  Shopify orders endpoint
* `--config` is the usual plaintext configuration YAML
"""

from __future__ import annotations

import argparse
import json
from collections.abc import Sequence
from pathlib import Path

from packing_slipper.config import load_label_config
from packing_slipper.label.packing_slip import build_packing_slip
from packing_slipper.logging import configure_logging
from packing_slipper.shopify.models import Order


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a packing slip from an order JSON file.")
    parser.add_argument("--order", required=True, help="Order JSON file")
    parser.add_argument("--config", required=True, help="Configuration YAML file")
    parser.add_argument("--outfile", default="packingslip.pdf", help="Output PDF filename")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging("INFO")

    payload = json.loads(Path(args.order).read_text(encoding="utf-8"))
    order = Order.model_validate(payload.get("order", payload))
    config = load_label_config(Path(args.config))

    path = build_packing_slip(order, config, Path(args.outfile))
    print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
