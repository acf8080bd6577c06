"""Fixtures for FastAPI application, settings and bearer tokens."""

import base64
import sys
import time
from pathlib import Path
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Set
from unittest.mock import patch

import pytest
from authlib.jose import JsonWebToken
from fastapi.testclient import TestClient
from starlette.testclient import TestClient as StarletteTestClient

# Ensure tests can import from parent directory
THIS_DIR = Path(__file__).parent
TESTS_DIR = THIS_DIR.parent
TESTS_DIR_PARENT = (TESTS_DIR / "..").resolve()
sys.path.insert(0, str(TESTS_DIR_PARENT))

TEST_JWT_SECRET = "test-jwt-secret-0123456789abcdef"
TEST_AES_KEY = bytes(range(32))
TEST_AES_IV = bytes(range(16, 32))
TEST_AES_KEY_B64 = base64.b64encode(TEST_AES_KEY).decode("ascii")
TEST_AES_IV_B64 = base64.b64encode(TEST_AES_IV).decode("ascii")

DEFAULT_USER_ID = "test-user"


def make_token(
    user_id: str,
    role: str = "USER",
    email: Optional[str] = None,
    name: Optional[str] = None,
    secret: str = TEST_JWT_SECRET,
    expires_in: int = 3600,
) -> str:
    """Sign an HS256 bearer token the way the identity provider does."""
    payload: Dict[str, Any] = {
        "sub": user_id,
        "role": role,
        "exp": int(time.time()) + expires_in,
    }
    if email is not None:
        payload["email"] = email
    if name is not None:
        payload["name"] = name
    return JsonWebToken(["HS256"]).encode({"alg": "HS256"}, payload, secret).decode("ascii")


def auth_headers(user_id: str, role: str = "USER", email: Optional[str] = None) -> Dict[str, str]:
    """Authorization header for ``user_id``; email defaults to ``<user_id>@example.com``."""
    return {"Authorization": f"Bearer {make_token(user_id, role, email or f'{user_id}@example.com')}"}


DEFAULT_TEST_HEADERS = auth_headers(DEFAULT_USER_ID)


class RecordingNotifier:
    """Notification sender that records deliveries and can fail for chosen addresses."""

    def __init__(self, fail_for: Optional[Set[str]] = None):
        self.sent: List[Dict[str, str]] = []
        self.fail_for = fail_for or set()

    async def send_santa_email(self, to: str, wish: str, address: str) -> None:
        if to in self.fail_for:
            raise ConnectionRefusedError(f"SMTP relay refused {to}")
        self.sent.append({"to": to, "wish": wish, "address": address})


class AuthenticatedTestClient(StarletteTestClient):
    """Test client that automatically includes a bearer token for the default user."""

    def __init__(self, *args: Any, default_headers: Optional[Dict[str, str]] = None, **kwargs: Any) -> None:
        """Initialize with default headers."""
        super().__init__(*args, **kwargs)
        self._default_headers = default_headers or DEFAULT_TEST_HEADERS

    def _merge_headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Merge default headers with provided headers."""
        merged = dict(self._default_headers)
        if headers:
            merged.update(headers)
        return merged

    def get(self, url: str, **kwargs: Any) -> Any:
        """GET request with default headers."""
        kwargs["headers"] = self._merge_headers(kwargs.get("headers"))
        return super().get(url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Any:
        """POST request with default headers."""
        kwargs["headers"] = self._merge_headers(kwargs.get("headers"))
        return super().post(url, **kwargs)


@pytest.fixture
def test_env() -> Dict[str, str]:
    """Environment variables for a valid configuration."""
    return {
        "JWT_SECRET": TEST_JWT_SECRET,
        "AES_KEY_BASE64": TEST_AES_KEY_B64,
        "AES_IV_BASE64": TEST_AES_IV_B64,
        "DOMAIN_DB_CONNECTION_STRING": "",
        "SMTP_HOST": "",
        "LOG_LEVEL": "WARNING",
    }


@pytest.fixture
def mock_settings(test_env):
    """Settings object with test configuration."""
    from santa_api.settings import Settings

    with patch.dict("os.environ", test_env):
        settings = Settings(_env_file=None)
        yield settings


@pytest.fixture
def memory_store():
    """Fresh in-memory workflow store."""
    from santa_api.workflow.db import MemoryStore

    return MemoryStore()


@pytest.fixture
def recording_notifier():
    """Notifier that records santa emails instead of sending them."""
    return RecordingNotifier()


@pytest.fixture
def app(mock_settings, memory_store, recording_notifier):
    """Create FastAPI test application with in-memory store and recording notifier."""
    from santa_api.main import create_app

    app = create_app(settings=mock_settings, store=memory_store, notifier=recording_notifier)
    yield app


@pytest.fixture
def client(app):
    """Test client authenticated as the default user; pass ``headers=`` to act as someone else."""
    with AuthenticatedTestClient(app) as test_client:
        yield test_client


@pytest.fixture
def unauthenticated_client(app):
    """Create FastAPI test client without authentication headers (for testing auth failures)."""
    with TestClient(app) as test_client:
        yield test_client
