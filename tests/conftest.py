import pytest
from fastapi.testclient import TestClient

from todo_api.main import create_app
from todo_api.store import InMemoryUserStore


@pytest.fixture
def store():
    return InMemoryUserStore()


@pytest.fixture
def client(store):
    # Fresh app per test so users and quotas never leak between tests
    return TestClient(create_app(store))
