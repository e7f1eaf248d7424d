"""packing-slipper.

Fetches one Shopify order and renders it as a 144x504 pt packing slip PDF:
- configuration loaded from YAML, secrets decrypted with sops
- structured logging
- a single-page label drawn with reportlab
"""

__version__ = "0.1.0"

from packing_slipper.config import PackingSlipSettings  # noqa: E402

__all__ = ["__version__", "PackingSlipSettings"]
