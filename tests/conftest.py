"""
Shared pytest fixtures for all test modules.

Firebase and Redis `initialize()` are patched to no-ops for the app lifespan
so the in-memory mocks below stay in place and nothing touches the network.
"""

import io
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from deepverify.config import settings
from tests.mocks.firebase_mock import MockFirebaseAuth
from tests.mocks.redis_mock import MockRedis

from deepverify.main import app  # noqa: E402

ALICE_TOKEN = "tok-alice"
BOB_TOKEN = "tok-bob"
ALICE = {"Authorization": f"Bearer {ALICE_TOKEN}"}
BOB = {"Authorization": f"Bearer {BOB_TOKEN}"}


# ---------------------------------------------------------------------------
# Core infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_auth(monkeypatch):
    """Replace firebase.client with an in-memory MockFirebaseAuth holding two users."""
    from deepverify.integrations import firebase as fb

    mock = MockFirebaseAuth()
    mock.seed_token(ALICE_TOKEN, uid="alice", email="alice@example.com")
    mock.seed_token(BOB_TOKEN, uid="bob", email="bob@example.com")
    monkeypatch.setattr(fb, "client", mock)
    return mock


@pytest.fixture
def mock_redis(monkeypatch):
    """Replace redis_client.client with an in-memory MockRedis."""
    from deepverify.integrations import redis_client as rc

    mock_rc = MockRedis()
    monkeypatch.setattr(rc, "client", mock_rc)
    return mock_rc


@pytest.fixture
def no_redis(monkeypatch):
    from deepverify.integrations import redis_client as rc

    monkeypatch.setattr(rc, "client", None)


@pytest.fixture(autouse=True)
def reset_throttle():
    from deepverify.core.rate_limiter import _recent_calls

    _recent_calls.clear()
    yield
    _recent_calls.clear()


@pytest.fixture
def instant_analysis(monkeypatch):
    """No simulated latency."""
    monkeypatch.setattr(settings, "text_analysis_delay_sec", 0.0)
    monkeypatch.setattr(settings, "image_analysis_delay_sec", 0.0)


@pytest.fixture
def slow_analysis(monkeypatch):
    """Latency long enough that an analysis is still pending between requests."""
    monkeypatch.setattr(settings, "text_analysis_delay_sec", 30.0)
    monkeypatch.setattr(settings, "image_analysis_delay_sec", 30.0)


@pytest.fixture
def client(mock_auth, mock_redis):
    """FastAPI TestClient with mocked Firebase Auth and Redis."""
    with (
        patch("deepverify.integrations.firebase.initialize"),
        patch("deepverify.integrations.redis_client.initialize"),
    ):
        with TestClient(app, raise_server_exceptions=False) as c:
            yield c


# ---------------------------------------------------------------------------
# Shared test-data helpers
# ---------------------------------------------------------------------------


def make_tiny_jpeg() -> bytes:
    """Create a minimal 10×10 JPEG in memory. Fast and valid."""
    buf = io.BytesIO()
    Image.new("RGB", (10, 10), color=(128, 128, 128)).save(buf, format="JPEG")
    return buf.getvalue()


def make_tiny_png() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color=(10, 200, 30)).save(buf, format="PNG")
    return buf.getvalue()


class FixedRandom:
    """Stand-in for `random` that returns a scripted sequence from random()."""

    def __init__(self, *values: float):
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)
