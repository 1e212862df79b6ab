from __future__ import annotations

import json
from typing import Any

from shop_api_tester.apis.cart_api import cart_total
from shop_api_tester.models import SUCCESS_SENTINEL, ApiResult, Failure, unwrap_body

NO_SUMMARY = "No summary available for this response."


def render_raw(result: ApiResult) -> str:
    return json.dumps(result.to_dict(), indent=2, default=str)


def summarize(result: ApiResult) -> str:
    if isinstance(result, Failure):
        return f"Request failed: {result.error}"

    data = result.data
    if data == SUCCESS_SENTINEL:
        return SUCCESS_SENTINEL

    body = unwrap_body(data)

    if isinstance(body, dict) and isinstance(body.get("items"), list):
        return _summarize_cart(body)

    for key, render in (
        ("categories", _render_category),
        ("shops", _render_shop),
        ("products", _render_product),
        ("users", _render_user),
    ):
        records = body.get(key) if isinstance(body, dict) else None
        if isinstance(records, list):
            return _render_list(key, records, render)

    if isinstance(body, list):
        return _render_list("records", body, _render_generic)

    if isinstance(body, dict):
        if isinstance(body.get("user"), dict):
            return "Signed in as " + _render_user(body["user"])
        if body.get("username") or body.get("phone"):
            return _render_user(body)

    return NO_SUMMARY


def _render_list(label: str, records: list[Any], render) -> str:
    if not records:
        return f"No {label} found."
    lines = [f"{len(records)} {label}:"]
    for record in records:
        if isinstance(record, dict):
            lines.append(f"- {render(record)}")
    return "\n".join(lines)


def _render_category(category: dict[str, Any]) -> str:
    description = str(category.get("description") or "").strip()
    name = str(category.get("name") or "(unnamed)")
    return f"{name}: {description}" if description else name


def _render_shop(shop: dict[str, Any]) -> str:
    name = str(shop.get("name") or shop.get("desc") or "(unnamed)")
    address = " ".join(
        str(shop.get(field) or "").strip() for field in ("buildingName", "shopNumber", "street")
    ).strip()
    return f"{name} ({address})" if address else name


def _render_product(product: dict[str, Any]) -> str:
    name = str(product.get("name") or "(unnamed)")
    price = product.get("sellingPrice")
    return f"{name} | {product.get('brand') or '-'} | KSh {price}" if price is not None else name


def _render_user(user: dict[str, Any]) -> str:
    username = str(user.get("username") or user.get("phone") or user.get("id") or "(unknown)")
    role = str(user.get("role") or "").strip()
    return f"{username} [{role}]" if role else username


def _render_generic(record: dict[str, Any]) -> str:
    for key in ("name", "username", "id"):
        if record.get(key):
            return str(record[key])
    return json.dumps(record, default=str)


def _summarize_cart(cart: dict[str, Any]) -> str:
    items = [item for item in cart["items"] if isinstance(item, dict)]
    lines = [f"Cart {cart.get('id', '?')} ({len(items)} items)"]
    for item in items:
        product = item.get("product") if isinstance(item.get("product"), dict) else {}
        name = product.get("name") or item.get("productId") or item.get("id")
        lines.append(f"- {name} x{item.get('quantity', 0)} @ KSh {item.get('amount', 0)}")
    lines.append(f"Subtotal: KSh {cart_total(cart):.2f}")
    return "\n".join(lines)
