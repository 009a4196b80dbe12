"""
tests/conftest.py -- Shared test fixtures for the car catalog.

This module provides:
  - user_store / car_store: fresh in-memory stores per test (unit tests)
  - sessions / catalog: services wired to those stores
  - api_client: TestClient over the real app with a patched lifespan

Design: the API fixture uses a named shared-memory SQLite URI (not plain
:memory:) because TestClient runs sync route handlers in a thread pool. Plain
:memory: DBs are per-connection and would present a blank schema to each
worker thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

The DEBUG env var must be set before any auth/core import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError. The auth
rate limit is raised for the same reason: it is read once at import time.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set before any auth/core import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("AUTH_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import User
from auth.service import SessionService
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password
from catalog.service import CatalogService
from catalog.store import CarStore
from tests.factories import TEST_EMAIL, TEST_PASSWORD

# ---------------------------------------------------------------------------
# Unit-test fixtures -- one fresh in-memory DB per test
# ---------------------------------------------------------------------------


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def car_store() -> Generator[CarStore, None, None]:
    store = CarStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def sessions(user_store: UserStore) -> SessionService:
    return SessionService(user_store)


@pytest.fixture
def catalog(car_store: CarStore) -> CatalogService:
    return CatalogService(car_store)


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(user_store: UserStore, car_store: CarStore):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test stores into app.state so TestClient routes see
    isolated test DBs rather than the configured database.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.car_store = car_store
        app.state.sessions = SessionService(user_store)
        app.state.catalog = CatalogService(car_store)
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    One TestClient per test module. A user is created before the client
    starts and a JWT is generated for Authorization headers.
    """
    db_url = f"sqlite:///file:test_catalog_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"
    user_store = UserStore(db_url)
    car_store = CarStore(db_url)

    uid = user_store.create_user(User(email=TEST_EMAIL, hashed_password=hash_password(TEST_PASSWORD), name="Tester"))
    token = create_access_token(user_id=uid, email=TEST_EMAIL)

    app.router.lifespan_context = _patch_lifespan(user_store, car_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, uid

    car_store.close()
    user_store.close()


@pytest.fixture
def auth_headers(api_client: tuple[TestClient, str, int]) -> dict[str, str]:
    _client, token, _uid = api_client
    return {"Authorization": f"Bearer {token}"}
