"""
Test configuration and fixtures for the URL shortener.
Every test gets its own SQLite file, so tests are isolated.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortener_app.config import Settings
from shortener_app.services.repository import LinkRepository
from shortener_app.services.token_service import TokenService
from shortener_app.storage.factory import StoreBackend, StoreFactory

JWT_SECRET = "test-jwt-secret"
ADMIN_TOKEN = "test-admin-token"


@pytest.fixture(scope="function")
def settings(tmp_path):
    """Settings pointing at a fresh SQLite file"""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        store_backend="sqlalchemy",
        jwt_secret=JWT_SECRET,
        admin_token=ADMIN_TOKEN,
        cache_backend="null",
        allow_anonymous_links=False,
        short_code_strategy="hex",
        short_url_length=8,
    )


@pytest.fixture(scope="function", params=["sqlalchemy", "memory"])
def store(request, settings):
    """A key-value store for each backend, closed after the test"""
    kv_store = StoreFactory.create(StoreBackend(request.param), settings)
    try:
        yield kv_store
    finally:
        kv_store.close()


@pytest.fixture(scope="function")
def sqlite_store(settings):
    kv_store = StoreFactory.create(StoreBackend.SQLALCHEMY, settings)
    try:
        yield kv_store
    finally:
        kv_store.close()


@pytest.fixture(scope="function")
def repository(store):
    return LinkRepository(store)


@pytest.fixture(scope="function")
def token_service():
    return TokenService(JWT_SECRET.encode("utf-8"))


@pytest.fixture(scope="function")
def client(settings):
    """
    Test client for an app built with the test settings.
    Entering the client runs the lifespan, which opens and closes the store.
    """
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture(scope="function")
def register(client):
    """Register an email and return Authorization headers for it"""
    def _register(email: str) -> dict:
        response = client.post("/register", json={"email": email})
        assert response.status_code == 200
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _register
