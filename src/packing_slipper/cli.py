"""CLI entrypoint: fetch one order and write its packing slip."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from packing_slipper import __version__
from packing_slipper.config import PackingSlipSettings, load_config
from packing_slipper.label.packing_slip import build_packing_slip
from packing_slipper.logging import configure_logging
from packing_slipper.shopify.client import ShopifyClient
from packing_slipper.sops import SopsDecryptor

logger = logging.getLogger(__name__)

DEFAULT_OUTFILE = "packingslip.pdf"


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError("must be zero or greater")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="packing-slipper",
        description="Render the most recent Shopify order as a 2x7 inch packing slip PDF",
    )
    parser.add_argument("--version", action="version", version=f"packing-slipper {__version__}")
    parser.add_argument(
        "--outfile",
        default=DEFAULT_OUTFILE,
        help=f"Output PDF filename (default: {DEFAULT_OUTFILE})",
    )
    parser.add_argument(
        "--offset",
        type=_non_negative_int,
        default=0,
        help="Offset from most recent order to retrieve (default: 0)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Configuration YAML file (default: ~/.config/packingslipper/configuration.yaml)",
    )
    parser.add_argument(
        "--secrets",
        default=None,
        help="Encrypted secrets YAML file (default: ~/.config/packingslipper/secrets.enc.yaml)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Display extra information on STDOUT",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = PackingSlipSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment / .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, verbose=args.verbose)

    config_path = Path(args.config).expanduser() if args.config else settings.default_config_path
    secrets_path = (
        Path(args.secrets).expanduser() if args.secrets else settings.default_secrets_path
    )
    output_path = Path(args.outfile)
    logger.info("Using config", extra={"configuration": str(config_path)})
    logger.info("Using config", extra={"secrets": str(secrets_path)})

    try:
        cfg = load_config(config_path, secrets_path, SopsDecryptor(settings.sops_binary))

        with ShopifyClient(
            token=cfg.secrets.api.token,
            shop=cfg.secrets.api.shop,
            api_version=settings.shopify_api_version,
            timeout=settings.request_timeout,
        ) as shopify:
            order = shopify.get_order_by_offset(args.offset)
        logger.info("Got orders", extra={"latest": order.name, "offset": args.offset})

        build_packing_slip(order, cfg.config, output_path)
    except Exception:
        logger.exception("Packing slip failed")
        return 1

    logger.info("Done", extra={"outfile": str(output_path)})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
