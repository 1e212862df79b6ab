from __future__ import annotations

import logging
from typing import Any

from shop_api_tester.credentials import ACCESS_TOKEN, REFRESH_TOKEN, USER_ID, CredentialStore
from shop_api_tester.http import REFRESH_TOKEN_PATH, RequestClient, extract_tokens
from shop_api_tester.models import ApiResult, Success

logger = logging.getLogger(__name__)


class AuthApi:
    def __init__(self, http_client: RequestClient, store: CredentialStore):
        self._http_client = http_client
        self._store = store

    def login(self, phone: str, password: str) -> ApiResult:
        phone = phone.strip()
        if not phone or not password:
            raise ValueError("Phone and password are required")

        result = self._http_client.send("/auth/login", "POST", {"phone": phone, "password": password})
        if not isinstance(result, Success):
            return result

        tokens = extract_tokens(result.data)
        if tokens is None:
            logger.warning("Login succeeded but the response carried no tokens")
            return result

        access_token, refresh_token = tokens
        self._store.set(ACCESS_TOKEN, access_token)
        self._store.set(REFRESH_TOKEN, refresh_token)
        self._store.set(USER_ID, self._extract_user_id(result.data))
        return result

    def logout(self) -> ApiResult:
        refresh_token = self._store.get(REFRESH_TOKEN)
        result = self._http_client.send("/auth/logout", "POST", {"refreshToken": refresh_token})
        # local credentials go regardless of what the backend said
        self._store.clear_all()
        return result

    def refresh_token(self) -> ApiResult:
        credentials = self._store.snapshot()
        result = self._http_client.send(
            REFRESH_TOKEN_PATH,
            "POST",
            {"userId": credentials.user_id, "refreshToken": credentials.refresh_token},
        )
        if not isinstance(result, Success):
            return result

        tokens = extract_tokens(result.data)
        if tokens is not None:
            access_token, refresh_token = tokens
            self._store.set(ACCESS_TOKEN, access_token)
            if refresh_token:
                self._store.set(REFRESH_TOKEN, refresh_token)
        return result

    def verify_otp(self, phone: str, otp: str) -> ApiResult:
        phone = phone.strip()
        otp = otp.strip()
        if not phone or not otp:
            raise ValueError("Phone and OTP code are required")
        return self._http_client.send("/auth/verify-otp", "POST", {"phone": phone, "otp": otp})

    @staticmethod
    def _extract_user_id(payload: Any) -> str | None:
        for container in (payload, payload.get("data") if isinstance(payload, dict) else None):
            if not isinstance(container, dict):
                continue
            user = container.get("user")
            if isinstance(user, dict) and user.get("id"):
                return str(user["id"])
        return None
