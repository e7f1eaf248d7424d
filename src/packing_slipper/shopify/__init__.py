"""Shopify order access."""

from packing_slipper.shopify.client import ShopifyClient
from packing_slipper.shopify.models import LineItem, Order, ShippingAddress

__all__ = ["LineItem", "Order", "ShippingAddress", "ShopifyClient"]
