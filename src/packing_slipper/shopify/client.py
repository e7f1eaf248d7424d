"""Shopify Admin REST API client.

Only the single read the packing slip needs: list orders, pick one by offset.
No pagination and no retries; a failed or slow request aborts the run.
"""

from __future__ import annotations

import json
import logging
import time
from types import TracebackType
from typing import Any

import requests
from pydantic import ValidationError

from packing_slipper import __version__
from packing_slipper.config import DEFAULT_SHOPIFY_API_VERSION
from packing_slipper.errors import OrderFetchError, OrderNotFoundError
from packing_slipper.shopify.models import Order

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


def shop_base_url(shop: str) -> str:
    """Return the store URL for a shop handle or a full domain."""

    shop = shop.strip().rstrip("/")
    if not shop:
        raise ValueError("Shopify shop name is required")
    if shop.startswith(("http://", "https://")):
        return shop
    if "." in shop:
        return f"https://{shop}"
    return f"https://{shop}.myshopify.com"


class ShopifyClient:
    """Small wrapper around `requests` for the Shopify order list endpoint."""

    def __init__(
        self,
        *,
        token: str,
        shop: str,
        api_version: str = DEFAULT_SHOPIFY_API_VERSION,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise ValueError("Shopify API token is required")

        self._base_url = shop_base_url(shop)
        self._api_version = api_version
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "X-Shopify-Access-Token": token,
                "Accept": "application/json",
                "User-Agent": f"packing-slipper/{__version__}",
            }
        )

    def _api_url(self, path: str) -> str:
        path = path.lstrip("/")
        return f"{self._base_url}/admin/api/{self._api_version}/{path}"

    def _read_body(self, resp: requests.Response, deadline: float) -> bytes:
        body = bytearray()
        for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
            body.extend(chunk)
            if time.monotonic() > deadline:
                raise requests.Timeout(f"response not complete within {self._timeout}s")
        return bytes(body)

    def list_orders(self, *, status: str = "any") -> list[Order]:
        """Return the first page of orders, newest first.

        `timeout` bounds the whole request, not only each socket read.
        """

        url = self._api_url("orders.json")
        logger.debug("Listing orders", extra={"url": url, "status": status})

        deadline = time.monotonic() + self._timeout
        try:
            resp = self._session.get(
                url, params={"status": status}, timeout=self._timeout, stream=True
            )
            try:
                resp.raise_for_status()
                body = self._read_body(resp, deadline)
            finally:
                resp.close()
            data: dict[str, Any] = json.loads(body)
        except requests.Timeout as exc:
            raise OrderFetchError(f"order request timed out after {self._timeout}s") from exc
        except requests.RequestException as exc:
            raise OrderFetchError(f"failed to list orders: {exc}") from exc
        except ValueError as exc:
            raise OrderFetchError(f"order response is not valid JSON: {exc}") from exc

        raw_orders = data.get("orders") if isinstance(data, dict) else None
        if not isinstance(raw_orders, list):
            raise OrderFetchError("order response has no 'orders' list")

        try:
            orders = [Order.model_validate(item) for item in raw_orders]
        except ValidationError as exc:
            raise OrderFetchError(f"unexpected order payload: {exc}") from exc

        logger.debug("Orders received", extra={"count": len(orders)})
        return orders

    def get_order_by_offset(self, offset: int, *, status: str = "any") -> Order:
        """Return the order `offset` places back from the most recent one."""

        if offset < 0:
            raise ValueError("offset must be a non-negative integer")

        orders = self.list_orders(status=status)
        if offset >= len(orders):
            raise OrderNotFoundError(offset, len(orders))
        return orders[offset]

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> ShopifyClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
