"""Unit tests for the Shopify order client (mocked HTTP)."""

from __future__ import annotations

import itertools
import json
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from packing_slipper.errors import OrderFetchError, OrderNotFoundError
from packing_slipper.config import DEFAULT_SHOPIFY_API_VERSION
from packing_slipper.shopify import client as client_module
from packing_slipper.shopify.client import ShopifyClient, shop_base_url


def _session(payload: Any = None, *, status_error: Exception | None = None) -> Mock:
    session = Mock()
    session.headers = {}
    resp = Mock()
    if status_error is not None:
        resp.raise_for_status.side_effect = status_error
    body = json.dumps(payload).encode("utf-8")
    resp.iter_content.return_value = [body[:20], body[20:]]
    session.get.return_value = resp
    return session


def _orders(*names: str) -> dict[str, Any]:
    return {
        "orders": [
            {
                "id": i,
                "name": name,
                "created_at": "2024-03-05T14:22:10-05:00",
                "line_items": [],
            }
            for i, name in enumerate(names, start=1)
        ]
    }


@pytest.mark.parametrize(
    ("shop", "expected"),
    [
        ("my-shop", "https://my-shop.myshopify.com"),
        ("my-shop.myshopify.com", "https://my-shop.myshopify.com"),
        ("https://shop.example.com/", "https://shop.example.com"),
    ],
)
def test_shop_base_url(shop: str, expected: str) -> None:
    assert shop_base_url(shop) == expected


def test_list_orders_calls_orders_endpoint() -> None:
    session = _session(_orders("#1002", "#1001"))
    client = ShopifyClient(
        token="shpat_test", shop="my-shop", api_version="2024-04", timeout=10, session=session
    )

    orders = client.list_orders()

    assert [o.name for o in orders] == ["#1002", "#1001"]
    session.get.assert_called_once_with(
        "https://my-shop.myshopify.com/admin/api/2024-04/orders.json",
        params={"status": "any"},
        timeout=10,
        stream=True,
    )
    session.get.return_value.close.assert_called_once()
    assert session.headers["X-Shopify-Access-Token"] == "shpat_test"


def test_get_order_by_offset_picks_from_newest() -> None:
    client = ShopifyClient(token="t", shop="s", session=_session(_orders("#3", "#2", "#1")))

    assert client.get_order_by_offset(0).name == "#3"
    assert client.get_order_by_offset(2).name == "#1"


@pytest.mark.parametrize("offset", [1, 5])
def test_offset_past_the_end_is_not_found(offset: int) -> None:
    client = ShopifyClient(token="t", shop="s", session=_session(_orders("#1")))

    with pytest.raises(OrderNotFoundError) as excinfo:
        client.get_order_by_offset(offset)

    assert excinfo.value.offset == offset
    assert excinfo.value.available == 1


def test_no_orders_is_not_found() -> None:
    client = ShopifyClient(token="t", shop="s", session=_session({"orders": []}))

    with pytest.raises(OrderNotFoundError):
        client.get_order_by_offset(0)


def test_negative_offset_is_rejected() -> None:
    session = _session(_orders("#1"))
    client = ShopifyClient(token="t", shop="s", session=session)

    with pytest.raises(ValueError):
        client.get_order_by_offset(-1)
    session.get.assert_not_called()


def test_http_error_is_wrapped() -> None:
    session = _session(status_error=requests.HTTPError("401 Client Error: Unauthorized"))
    client = ShopifyClient(token="t", shop="s", session=session)

    with pytest.raises(OrderFetchError, match="Unauthorized"):
        client.list_orders()


def test_timeout_is_wrapped() -> None:
    session = _session()
    session.get.side_effect = requests.Timeout("read timed out")
    client = ShopifyClient(token="t", shop="s", timeout=10, session=session)

    with pytest.raises(OrderFetchError, match="timed out after 10"):
        client.list_orders()


def test_unexpected_payload_is_rejected() -> None:
    client = ShopifyClient(token="t", shop="s", session=_session({"errors": "Not Found"}))

    with pytest.raises(OrderFetchError, match="no 'orders' list"):
        client.list_orders()


def test_missing_token_is_rejected() -> None:
    with pytest.raises(ValueError):
        ShopifyClient(token="", shop="s", session=_session())


def test_context_manager_closes_session() -> None:
    session = _session(_orders("#1"))
    with ShopifyClient(token="t", shop="s", session=session) as client:
        client.list_orders()

    session.close.assert_called_once()


def test_null_fields_become_empty_strings(order_payload) -> None:
    order_payload["shipping_address"]["address2"] = None
    order_payload["shipping_address"]["province_code"] = None
    client = ShopifyClient(token="t", shop="s", session=_session({"orders": [order_payload]}))

    order = client.get_order_by_offset(0)

    assert order.shipping_address.address2 == ""
    assert order.shipping_address.province_code == ""
    assert order.shipping_address.full_name == "Jane Doe"
    assert order.line_items[1].sku == ""


def test_timeout_is_a_total_deadline(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _session(_orders("#1"))
    clock = itertools.chain([100.0, 104.0], itertools.repeat(111.0))
    monkeypatch.setattr(client_module.time, "monotonic", lambda: next(clock))
    client = ShopifyClient(token="t", shop="s", timeout=10, session=session)

    with pytest.raises(OrderFetchError, match="timed out after 10"):
        client.list_orders()

    session.get.return_value.close.assert_called_once()


def test_invalid_json_body_is_wrapped() -> None:
    session = _session()
    session.get.return_value.iter_content.return_value = [b"<html>oops"]
    client = ShopifyClient(token="t", shop="s", session=session)

    with pytest.raises(OrderFetchError, match="not valid JSON"):
        client.list_orders()


def test_api_version_defaults_to_settings_default() -> None:
    session = _session(_orders("#1"))
    client = ShopifyClient(token="t", shop="s", session=session)

    client.list_orders()

    url = session.get.call_args.args[0]
    assert url == f"https://s.myshopify.com/admin/api/{DEFAULT_SHOPIFY_API_VERSION}/orders.json"
