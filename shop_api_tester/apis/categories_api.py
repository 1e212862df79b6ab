from __future__ import annotations

from shop_api_tester.http import RequestClient
from shop_api_tester.models import ApiResult


class CategoriesApi:
    def __init__(self, http_client: RequestClient):
        self._http_client = http_client

    def list_categories(self) -> ApiResult:
        return self._http_client.send("/categories", "GET")

    def create_category(self, token: str | None, name: str, description: str = "") -> ApiResult:
        name = name.strip()
        if not name:
            raise ValueError("Category name is required")
        payload = {"name": name, "description": description.strip()}
        return self._http_client.send("/categories", "POST", payload, token)
