from __future__ import annotations

import json
import logging
import os

from msal_extensions import FilePersistence, FilePersistenceWithDataProtection

from shop_api_tester.config import AppSettings
from shop_api_tester.models import Credentials

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "accessToken"
REFRESH_TOKEN = "refreshToken"
USER_ID = "userId"

CREDENTIAL_KEYS = (ACCESS_TOKEN, REFRESH_TOKEN, USER_ID)


def _check_key(key: str) -> None:
    if key not in CREDENTIAL_KEYS:
        raise KeyError(f"Unknown credential key: {key!r}")


class CredentialStore:
    """Holds the session's access token, refresh token and user id.

    Subclasses implement ``_read_all`` and ``_write_all``. There is no
    locking: concurrent writers race and the last write wins.
    """

    def get(self, key: str) -> str | None:
        _check_key(key)
        return self._read_all().get(key)

    def set(self, key: str, value: str | None) -> None:
        _check_key(key)
        values = self._read_all()
        if value is None or value == "":
            values.pop(key, None)
        else:
            values[key] = str(value)
        self._write_all(values)

    def clear(self, key: str) -> None:
        self.set(key, None)

    def clear_all(self) -> None:
        self._write_all({})

    def snapshot(self) -> Credentials:
        values = self._read_all()
        return Credentials(
            access_token=values.get(ACCESS_TOKEN),
            refresh_token=values.get(REFRESH_TOKEN),
            user_id=values.get(USER_ID),
        )

    def _read_all(self) -> dict[str, str]:
        raise NotImplementedError

    def _write_all(self, values: dict[str, str]) -> None:
        raise NotImplementedError


class MemoryCredentialStore(CredentialStore):
    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def _read_all(self) -> dict[str, str]:
        return dict(self._values)

    def _write_all(self, values: dict[str, str]) -> None:
        self._values = dict(values)


class FileCredentialStore(CredentialStore):
    def __init__(self, path: str):
        self._path = path
        self._persistence = self._build_persistence(path)

    @property
    def path(self) -> str:
        return self._path

    @staticmethod
    def _build_persistence(path: str):
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        try:
            return FilePersistenceWithDataProtection(path)
        except Exception:
            return FilePersistence(path)

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self._persistence.load()
        except OSError:
            return {}
        if not raw:
            return {}

        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring unreadable credential file at %s", self._path)
            return {}
        if not isinstance(parsed, dict):
            return {}
        return {
            key: str(value)
            for key, value in parsed.items()
            if key in CREDENTIAL_KEYS and value
        }

    def _write_all(self, values: dict[str, str]) -> None:
        self._persistence.save(json.dumps(values) if values else "")


def build_credential_store(settings: AppSettings) -> CredentialStore:
    if settings.credential_store == "memory":
        return MemoryCredentialStore()
    return FileCredentialStore(settings.credential_store_path)
