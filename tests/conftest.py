import json
from unittest.mock import MagicMock

import pytest

from shop_api_tester.config import AppSettings
from shop_api_tester.credentials import MemoryCredentialStore
from shop_api_tester.http import RequestClient

BASE_URL = "http://api.test/v1"


def make_response(status_code, body=None, raw=None):
    """Build a stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    if raw is not None:
        response.content = raw.encode("utf-8")
        response.json.side_effect = ValueError("Expecting value")
    elif body is not None:
        response.content = json.dumps(body).encode("utf-8")
        response.json.return_value = body
    else:
        response.content = b""
        response.json.side_effect = ValueError("Expecting value")
    return response


@pytest.fixture
def settings(tmp_path):
    return AppSettings(
        base_url=BASE_URL,
        timeout_seconds=5,
        credential_store="memory",
        credential_store_path=str(tmp_path / "credentials.json"),
        log_level="DEBUG",
    )


@pytest.fixture
def store():
    return MemoryCredentialStore()


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(settings, store, session):
    return RequestClient(settings, store, session=session)
