"""Pytest configuration and shared fixtures for all tests.

This module provides:
- Test configuration and markers
- An in-memory database installed in place of the Motor handle
- Token service and bearer header factories
- A FastAPI TestClient (lifespan not started, so no MongoDB is needed)
"""

from collections.abc import Callable, Generator
from datetime import timedelta
from typing import Any

import pytest
from _pytest.config import Config
from bson import ObjectId
from fastapi.testclient import TestClient
from fixtures.mongo import FakeDatabase

from bistro import database
from bistro.auth.tokens import TokenService, get_token_service
from bistro.database import CARTS_COLLECTION, USERS_COLLECTION
from bistro.main import app

TEST_SECRET = "test-secret"  # pragma: allowlist secret

# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config: Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")
    config.addinivalue_line("markers", "auth: Authentication/authorization tests")
    config.addinivalue_line("markers", "api: Endpoint tests through the FastAPI TestClient")


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeDatabase:
    """Install an in-memory database behind bistro.database.get_database()."""
    db = FakeDatabase()
    db[USERS_COLLECTION].unique_fields.add("email")
    monkeypatch.setattr(database, "_db", db)
    return db


@pytest.fixture
def add_user(fake_db: FakeDatabase) -> Callable[..., ObjectId]:
    """Insert a user record directly and return its id."""

    def _add_user(email: str, role: str | None = None, **profile: Any) -> ObjectId:
        document: dict[str, Any] = {"_id": ObjectId(), "email": email, **profile}
        if role is not None:
            document["role"] = role
        fake_db[USERS_COLLECTION].documents.append(document)
        return document["_id"]

    return _add_user


@pytest.fixture
def add_cart_item(fake_db: FakeDatabase) -> Callable[..., ObjectId]:
    """Insert a cart line item directly and return its id."""

    def _add_cart_item(email: str, name: str = "Caesar Salad", price: float = 10.99, **fields: Any) -> ObjectId:
        document: dict[str, Any] = {"_id": ObjectId(), "email": email, "name": name, "price": price, **fields}
        fake_db[CARTS_COLLECTION].documents.append(document)
        return document["_id"]

    return _add_cart_item


# ============================================================================
# AUTH FIXTURES
# ============================================================================


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret=TEST_SECRET, expires_in=timedelta(hours=1))


@pytest.fixture
def auth_headers(token_service: TokenService) -> Callable[[str], dict[str, str]]:
    """Build an Authorization header for a token carrying email."""

    def _auth_headers(email: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_service.issue({'email': email})}"}

    return _auth_headers


# ============================================================================
# CLIENT FIXTURES
# ============================================================================


@pytest.fixture
def client(fake_db: FakeDatabase, token_service: TokenService) -> Generator[TestClient, None, None]:
    """TestClient wired to the fake database and the test token service."""
    app.dependency_overrides[get_token_service] = lambda: token_service
    yield TestClient(app)
    app.dependency_overrides.clear()
