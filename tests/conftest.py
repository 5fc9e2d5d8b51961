"""
tests/conftest.py -- Shared test fixtures for the pet store test suite.

This module provides:
  - make_engine(): an isolated named shared-memory SQLite engine
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - stores: (UserStore, PetStore) on a fresh database, no HTTP
  - api_client: TestClient + bearer token + stores for route tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.
Each fixture instance gets a unique name, so tests never see each other's rows.

DEBUG and BCRYPT_ROUNDS must be set before any auth/core import: get_settings()
is cached at first use and auth.tokens hashes a dummy password at import time.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass

# CRITICAL: set before any auth/core import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from api.main import app
from auth.models import User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password
from core.db import create_db_engine
from petstore.store import PetStore

TEST_EMAIL = "tester@petstore.com"
TEST_PASSWORD = "testpass123"


def make_engine() -> Engine:
    name = f"test_petstore_{uuid.uuid4().hex}"
    return create_db_engine(f"sqlite:///file:{name}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(engine: Engine, user_store: UserStore, pet_store: PetStore):
    """Return an async context manager that replaces the real lifespan.

    The real lifespan would open the configured DATABASE_URL; tests must only
    ever touch their own in-memory database.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.engine = engine
        app.state.user_store = user_store
        app.state.pet_store = pet_store
        yield

    return test_lifespan


@dataclass
class ApiContext:
    client: TestClient
    token: str
    user_id: int
    user_store: UserStore
    pet_store: PetStore

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture
def stores() -> Generator[tuple[UserStore, PetStore], None, None]:
    """Yield (user_store, pet_store) sharing one fresh in-memory engine."""
    engine = make_engine()
    yield UserStore(engine), PetStore(engine)
    engine.dispose()


@pytest.fixture
def api_client() -> Generator[ApiContext, None, None]:
    """Yield an ApiContext for route integration tests.

    A user is created before the client starts and a one-hour token is
    issued for it, so tests can hit protected routes immediately.
    """
    engine = make_engine()
    user_store = UserStore(engine)
    pet_store = PetStore(engine)

    uid = user_store.create_user(User(email=TEST_EMAIL, hashed_password=hash_password(TEST_PASSWORD)))
    token = create_access_token(user_id=uid, email=TEST_EMAIL, expire_seconds=3600)

    app.router.lifespan_context = _patch_lifespan(engine, user_store, pet_store)

    with TestClient(app, raise_server_exceptions=False) as client:
        yield ApiContext(client=client, token=token, user_id=uid, user_store=user_store, pet_store=pet_store)

    engine.dispose()
