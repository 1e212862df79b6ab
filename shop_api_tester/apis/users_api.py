from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

from shop_api_tester.http import RequestClient, path_segment
from shop_api_tester.models import ApiResult

USER_ROLES = ("buyer", "seller", "admin")

_REQUIRED_REGISTRATION_FIELDS = ("username", "password", "phone", "role")
_READ_ONLY_FIELDS = ("id", "createdAt", "updatedAt", "password")


class UsersApi:
    def __init__(self, http_client: RequestClient):
        self._http_client = http_client

    def register(self, user: dict[str, Any]) -> ApiResult:
        missing = [field for field in _REQUIRED_REGISTRATION_FIELDS if not str(user.get(field) or "").strip()]
        if missing:
            raise ValueError("Please fill in all required fields: " + ", ".join(missing))
        if user["role"] not in USER_ROLES:
            raise ValueError("Role must be one of: " + ", ".join(USER_ROLES))

        payload = {field: user[field] for field in _REQUIRED_REGISTRATION_FIELDS}
        return self._http_client.send("/users/register", "POST", payload)

    def get_user(self, token: str, user_id: str) -> ApiResult:
        return self._http_client.send(f"/users/{path_segment(user_id)}", "GET", None, token)

    def update_user(self, token: str, user_id: str, user: dict[str, Any]) -> ApiResult:
        payload = self.build_update_payload(user)
        if not payload:
            raise ValueError("Provide at least one field to update")
        return self._http_client.send(f"/users/{path_segment(user_id)}", "PATCH", payload, token)

    def list_users(self, token: str, page: int = 1, limit: int = 10) -> ApiResult:
        query = urlencode({"page": page, "limit": limit})
        return self._http_client.send(f"/users?{query}", "GET", None, token)

    @staticmethod
    def build_update_payload(user: dict[str, Any]) -> dict[str, Any]:
        return {
            key: value
            for key, value in user.items()
            if key not in _READ_ONLY_FIELDS and value not in (None, "")
        }

