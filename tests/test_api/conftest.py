"""
Shared fixtures for API tests: real services over an in-memory snapshot,
wired into the app container without running the lifespan.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from api.dependencies import deps
from api.main import app
from application.services import AuthService, DatasetBuilder, ExchangeRateService
from infrastructure.cache.snapshot_store import SnapshotStore

TEST_USERNAME = 'admin'
TEST_PASSWORD = 'test-password'
TEST_SECRET = 'test-secret-key-that-is-long-enough-for-hs512'


@pytest.fixture
def auth_service():
    return AuthService(username=TEST_USERNAME, password=TEST_PASSWORD, secret=TEST_SECRET)


@pytest.fixture
def store(sample_dataset):
    store = SnapshotStore()
    store.publish(sample_dataset)
    return store


@pytest.fixture
def mock_builder(sample_dataset):
    builder = Mock(spec=DatasetBuilder)
    builder.build_all = AsyncMock(return_value=sample_dataset)
    return builder


@pytest.fixture
def exchange_rate_service(store, mock_builder, today):
    return ExchangeRateService(
        store=store, builder=mock_builder, currencies=['USD', 'INR'], today=lambda: today
    )


@pytest.fixture
def client(exchange_rate_service, auth_service, monkeypatch):
    monkeypatch.setattr(deps, 'exchange_rate_service', exchange_rate_service)
    monkeypatch.setattr(deps, 'auth_service', auth_service)
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(auth_service):
    token = auth_service.issue_token(TEST_USERNAME, TEST_PASSWORD)
    return {'Authorization': f'Bearer {token.token}'}


@pytest.fixture
def credentials():
    return {'username': TEST_USERNAME, 'password': TEST_PASSWORD}


@pytest.fixture
def jwt_secret():
    return TEST_SECRET


@pytest.fixture
def empty_client(client, mock_builder, today, monkeypatch):
    """Client whose service has never published a snapshot."""
    service = ExchangeRateService(
        store=SnapshotStore(), builder=mock_builder, currencies=['USD', 'INR'], today=lambda: today
    )
    monkeypatch.setattr(deps, 'exchange_rate_service', service)
    return client
