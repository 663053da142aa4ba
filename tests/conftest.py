import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from fastapi.testclient import TestClient

from config import Settings, get_settings
from main import app
from service_modules.api_client import ApiClient, FixtureTransport
from service_modules.session_service import SessionStore
from service_modules.token_storage import MemoryTokenStorage

TEST_SETTINGS = Settings(mock_delay_min=0, mock_delay_max=0)

OWNER_CONTACT = "owner+919999999999"
MEMBER_CONTACT = "9999999999"
DEMO_CODE = "123456"


@pytest.fixture
def transport():
    return FixtureTransport(delay_range=(0, 0))


@pytest.fixture
def storage():
    return MemoryTokenStorage()


@pytest.fixture
def api(transport, storage):
    return ApiClient(transport, storage)


@pytest.fixture
def store(api, storage):
    return SessionStore(api, storage)


@pytest.fixture
def owner_store(store):
    assert store.verify_code(OWNER_CONTACT, DEMO_CODE).success
    return store


@pytest.fixture
def member_store(store):
    assert store.verify_code(MEMBER_CONTACT, DEMO_CODE).success
    return store


@pytest.fixture
def client():
    app.dependency_overrides[get_settings] = lambda: TEST_SETTINGS
    with TestClient(app, follow_redirects=False) as c:
        yield c
    app.dependency_overrides.clear()
