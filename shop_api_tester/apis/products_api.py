from __future__ import annotations

from typing import Any

from shop_api_tester.http import RequestClient
from shop_api_tester.models import ApiResult

INTEGER_FIELDS = ("quantity", "minPurchase", "categoryId")
FLOAT_FIELDS = ("mktPrice", "sellingPrice")
TEXT_FIELDS = ("name", "description", "brand", "size", "img", "shopId")


class ProductsApi:
    def __init__(self, http_client: RequestClient):
        self._http_client = http_client

    def list_products(self) -> ApiResult:
        return self._http_client.send("/products", "GET")

    def create_product(self, token: str | None, product: dict[str, Any]) -> ApiResult:
        payload = build_product_payload(product)
        if not payload["name"]:
            raise ValueError("Product name is required")
        return self._http_client.send("/products", "POST", payload, token)


def build_product_payload(form: dict[str, Any]) -> dict[str, Any]:
    """Turn raw form strings into the product body the backend expects.

    Numbers that do not parse become 0; colors are a comma separated list.
    """
    payload: dict[str, Any] = {}
    for field in TEXT_FIELDS:
        payload[field] = str(form.get(field) or "").strip()
    for field in INTEGER_FIELDS:
        payload[field] = _parse_number(form.get(field), int)
    for field in FLOAT_FIELDS:
        payload[field] = _parse_number(form.get(field), float)

    colors = form.get("colors") or ""
    if isinstance(colors, str):
        colors = colors.split(",")
    payload["colors"] = [str(color).strip() for color in colors if str(color).strip()]
    return payload


def _parse_number(value: Any, kind):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return kind(value)
    try:
        return kind(str(value).strip())
    except (TypeError, ValueError):
        return kind(0)
