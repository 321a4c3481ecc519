"""
- Provide a fresh in-memory GameStore per test with a known secret.
- Override FastAPI's get_store so routes use that store.
- Provide a client fixture (TestClient(app)) that already has the override applied.
"""
import pytest

from fastapi.testclient import TestClient

from codebreaker.config import build_rules
from codebreaker.main import app, get_store
from codebreaker.store import GameStore

FIXED_SECRET = "1234"


@pytest.fixture
def rules():
    return build_rules("123456", 4, 10)


@pytest.fixture
def store(rules) -> GameStore:
    # Ignore randomness so every game's secret is FIXED_SECRET
    return GameStore(rules=rules, secret_factory=lambda _rules: FIXED_SECRET)


@pytest.fixture(autouse=True)
def override_dep(store):
    """Force the app to use the test store for every request."""
    app.dependency_overrides[get_store] = lambda: store
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)
