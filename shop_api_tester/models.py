from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


SUCCESS_SENTINEL = "request completed successfully"
BAD_REQUEST_MESSAGE = "Bad request. Please check your request parameters."
UNAUTHORIZED_MESSAGE = "Unauthorized. Please authenticate or sign up."

HTTP_METHODS = ("GET", "POST", "PATCH", "PUT", "DELETE")


@dataclass(frozen=True)
class Success:
    data: Any

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "data": self.data}


@dataclass(frozen=True)
class Failure:
    error: str

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.error}


ApiResult = Union[Success, Failure]


@dataclass(frozen=True)
class Credentials:
    access_token: str | None = None
    refresh_token: str | None = None
    user_id: str | None = None

    @property
    def is_signed_in(self) -> bool:
        return bool(self.access_token)


def unwrap_body(data: Any) -> Any:
    """Strip a ``{"success": ..., "data": ...}`` wrapper from a response body."""
    if isinstance(data, dict) and "data" in data and set(data) <= {"success", "data", "message"}:
        return data["data"]
    return data
