from __future__ import annotations

from typing import Any

from shop_api_tester.http import RequestClient, path_segment
from shop_api_tester.models import ApiResult


class CartApi:
    def __init__(self, http_client: RequestClient):
        self._http_client = http_client

    def get_cart(self, token: str, cart_id: str) -> ApiResult:
        return self._http_client.send(f"/cart/{path_segment(cart_id)}", "GET", None, token)

    def clear_cart(self, token: str, cart_id: str) -> ApiResult:
        return self._http_client.send(f"/cart/clear/{path_segment(cart_id)}", "PUT", None, token)

    def remove_item(self, token: str, item_id: str) -> ApiResult:
        return self._http_client.send(
            f"/cart/items/{path_segment(item_id)}",
            "DELETE",
            {"cartItemId": item_id},
            token,
        )

    def update_item_quantity(self, token: str, item_id: str, quantity: int) -> ApiResult:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")
        return self._http_client.send(
            f"/cart/items/{path_segment(item_id)}",
            "PATCH",
            {"cartItemId": item_id, "quantity": quantity},
            token,
        )


def cart_total(cart: dict[str, Any] | None) -> float:
    if not isinstance(cart, dict):
        return 0.0
    total = 0.0
    for item in cart.get("items") or []:
        if not isinstance(item, dict):
            continue
        try:
            total += float(item.get("amount") or 0) * int(item.get("quantity") or 0)
        except (TypeError, ValueError):
            continue
    return total


def next_quantity(item: dict[str, Any], change: int) -> int | None:
    """Quantity after ``change``, or None when it would leave 1..stock."""
    quantity = int(item.get("quantity") or 0) + change
    product = item.get("product")
    stock = int(product.get("quantity") or 0) if isinstance(product, dict) else 0
    if 0 < quantity <= stock:
        return quantity
    return None


def find_cart_item(cart: dict[str, Any] | None, item_id: str) -> dict[str, Any] | None:
    if not isinstance(cart, dict):
        return None
    for item in cart.get("items") or []:
        if isinstance(item, dict) and str(item.get("id")) == item_id:
            return item
    return None
