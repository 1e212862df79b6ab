from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from shop_api_tester.config import AppSettings
from shop_api_tester.credentials import ACCESS_TOKEN, REFRESH_TOKEN, CredentialStore
from shop_api_tester.models import (
    BAD_REQUEST_MESSAGE,
    HTTP_METHODS,
    SUCCESS_SENTINEL,
    UNAUTHORIZED_MESSAGE,
    ApiResult,
    Failure,
    Success,
)

logger = logging.getLogger(__name__)

REFRESH_TOKEN_PATH = "/auth/refresh-token"


def _failure_message(status_code: int) -> str:
    if status_code == 400:
        return BAD_REQUEST_MESSAGE
    if status_code == 401:
        return UNAUTHORIZED_MESSAGE
    return f"HTTP error! status: {status_code}"


class RequestClient:
    """Sends one JSON request and folds the outcome into a result envelope.

    A 401 on the first attempt triggers a single silent refresh through
    ``/auth/refresh-token`` using the stored user id and refresh token. When
    the refresh yields a new access token it is persisted and the original
    request is replayed once with it; otherwise the call fails as
    unauthorized. Neither the refresh call nor the replay can refresh again.
    """

    def __init__(
        self,
        settings: AppSettings,
        store: CredentialStore,
        session: requests.Session | None = None,
    ):
        self._settings = settings
        self._store = store
        self._session = session if session is not None else requests.Session()

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    def send(
        self,
        endpoint: str,
        method: str,
        body: Any = None,
        token: str | None = None,
    ) -> ApiResult:
        return self._send(endpoint, method, body, token, allow_refresh=True)

    def _send(
        self,
        endpoint: str,
        method: str,
        body: Any,
        token: str | None,
        allow_refresh: bool,
    ) -> ApiResult:
        method = (method or "").strip().upper()
        if method not in HTTP_METHODS:
            return Failure(f"Unsupported HTTP method: {method or '<empty>'}")
        if not endpoint:
            return Failure("Endpoint path is required")

        url = f"{self._settings.base_url}{endpoint}"
        request_kwargs: dict[str, Any] = {
            "headers": self._build_headers(token),
            "timeout": self._settings.timeout_seconds,
        }
        if body is not None:
            request_kwargs["json"] = body

        try:
            response = self._session.request(method, url, **request_kwargs)
        except requests.RequestException as exc:
            logger.error("API request failed: %s %s: %s", method, url, exc)
            return Failure(str(exc) or type(exc).__name__)

        status_code = response.status_code
        logger.debug("%s %s -> %s", method, url, status_code)

        if status_code == 401 and allow_refresh and endpoint != REFRESH_TOKEN_PATH:
            return self._refresh_and_retry(endpoint, method, body)

        if not 200 <= status_code < 300:
            logger.warning("API request failed with status %s: %s %s", status_code, method, url)
            return Failure(_failure_message(status_code))

        if status_code == 204:
            return Success(SUCCESS_SENTINEL)

        data = self._parse_body(response)
        return Success(SUCCESS_SENTINEL if data is None else data)

    def _refresh_and_retry(self, endpoint: str, method: str, body: Any) -> ApiResult:
        credentials = self._store.snapshot()
        logger.info("Access token rejected for %s %s, refreshing", method, endpoint)

        refresh_payload: dict[str, str] = {}
        if credentials.user_id:
            refresh_payload["userId"] = credentials.user_id
        if credentials.refresh_token:
            refresh_payload["refreshToken"] = credentials.refresh_token

        refreshed = self._send(REFRESH_TOKEN_PATH, "POST", refresh_payload, None, allow_refresh=False)
        tokens = extract_tokens(refreshed.data) if isinstance(refreshed, Success) else None
        if tokens is None:
            reason = refreshed.error if isinstance(refreshed, Failure) else "no access token returned"
            logger.warning("Token refresh failed: %s", reason)
            return Failure(UNAUTHORIZED_MESSAGE)

        access_token, refresh_token = tokens
        self._store.set(ACCESS_TOKEN, access_token)
        if refresh_token:
            self._store.set(REFRESH_TOKEN, refresh_token)
        logger.info("Token refreshed, retrying %s %s", method, endpoint)

        return self._send(endpoint, method, body, access_token, allow_refresh=False)

    @staticmethod
    def _build_headers(token: str | None) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def _parse_body(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None


def extract_tokens(payload: Any) -> tuple[str, str | None] | None:
    """Find ``accessToken``/``refreshToken`` in an auth response body.

    Backends answer either with the tokens at the top level or wrapped in
    ``data`` and/or ``tokens``.
    """
    candidates = [payload]
    if isinstance(payload, dict):
        for key in ("data", "tokens"):
            nested = payload.get(key)
            candidates.append(nested)
            if isinstance(nested, dict):
                candidates.append(nested.get("tokens"))

    for candidate in candidates:
        if not isinstance(candidate, dict):
            continue
        access_token = candidate.get("accessToken")
        if not access_token:
            continue
        refresh_token = candidate.get("refreshToken")
        return str(access_token), str(refresh_token) if refresh_token else None
    return None


def path_segment(value: str) -> str:
    segment = str(value or "").strip()
    if not segment:
        raise ValueError("An id is required")
    return quote(segment, safe="")
