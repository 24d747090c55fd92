import os
from unittest.mock import MagicMock

import pytest
from fakeredis import aioredis as fakeredis_aioredis

TEST_ENV = {
    "ENVIRONMENT": "test",
    "MONGO_URI": "mongodb://localhost:27017/propertysnap_test",
    "REDIS_URL": "redis://localhost:6379/0",
    "JWT_SECRET": "test-jwt-secret-0123456789abcdef0123456789",
    "PUBLIC_BASE_URL": "http://testserver",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value

from fastapi.testclient import TestClient

from propertysnap.auth.jwt import create_access_token
from propertysnap.repos import users as users_repo
from propertysnap.services.cache_registry import CacheRegistry


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


USERS = {
    "owner@example.com": "64b000000000000000000001",
    "admin@example.com": "64b000000000000000000002",
    "other@example.com": "64b000000000000000000003",
}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    return CacheRegistry(clock=clock)


@pytest.fixture
def fake_redis():
    return fakeredis_aioredis.FakeRedis(decode_responses=True)


@pytest.fixture
def db():
    # repo functions are monkeypatched per test; nothing should reach this mock
    return MagicMock(name="mongo_db")


@pytest.fixture
def user_lookups(monkeypatch):
    calls = []

    def fake_get_user_id_by_email(db, email):
        calls.append(email)
        return USERS.get(email)

    monkeypatch.setattr(users_repo, "get_user_id_by_email", fake_get_user_id_by_email)
    return calls


@pytest.fixture
def client(db, registry, fake_redis, user_lookups):
    from propertysnap.main import app

    app.state.db = db
    app.state.redis = fake_redis
    app.state.cache = registry
    # startup hooks are not run: no real MongoDB/Redis/scheduler in tests
    return TestClient(app)


def auth_headers(email: str, role: str = "user") -> dict:
    token = create_access_token({"sub": email, "role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner_headers():
    return auth_headers("owner@example.com")


@pytest.fixture
def admin_headers():
    return auth_headers("admin@example.com", role="admin")


@pytest.fixture
def other_headers():
    return auth_headers("other@example.com")
