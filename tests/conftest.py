import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.database import ProductStore
from app.main import create_app

API_KEY = "test-key"
AUTH = {"x-api-key": API_KEY}


def make_settings(**overrides) -> Settings:
    values = {"api_key": API_KEY, "environment": "development"}
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def store():
    return ProductStore()


@pytest.fixture
def app(store):
    return create_app(make_settings(), store)


@pytest.fixture
def client(app):
    return TestClient(app)
