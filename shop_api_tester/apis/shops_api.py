from __future__ import annotations

from typing import Any

from shop_api_tester.http import RequestClient
from shop_api_tester.models import ApiResult

SHOP_FIELDS = ("desc", "street", "businessType", "buildingName", "shopNumber", "userId")


class ShopsApi:
    def __init__(self, http_client: RequestClient):
        self._http_client = http_client

    def list_shops(self, token: str | None) -> ApiResult:
        return self._http_client.send("/shops", "GET", None, token)

    def create_shop(self, token: str | None, shop: dict[str, Any]) -> ApiResult:
        payload = {field: str(shop.get(field) or "").strip() for field in SHOP_FIELDS}
        if not payload["userId"]:
            raise ValueError("Shop owner user id is required")

        name = str(shop.get("name") or "").strip()
        if name:
            payload["name"] = name
        return self._http_client.send("/shops", "POST", payload, token)
