from unittest.mock import MagicMock

import pytest
from fastapi.responses import Response
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from config import Settings
from database import init_db
from models import Role
from service_modules.route_guard import AuthStatus
from service_modules.session_service import open_local_session
from service_modules.token_storage import CookieTokenStorage, MemoryTokenStorage, SqlTokenStorage

from conftest import DEMO_CODE, OWNER_CONTACT


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'client.db'}", connect_args={"check_same_thread": False})
    init_db(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def test_memory_storage():
    storage = MemoryTokenStorage()
    assert storage.get() is None
    storage.set("abc")
    assert storage.get() == "abc"
    storage.clear()
    assert storage.get() is None
    storage.clear()


def test_sql_storage_persists_across_instances(session_factory):
    SqlTokenStorage(session_factory).set("first")
    SqlTokenStorage(session_factory).set("second")

    assert SqlTokenStorage(session_factory).get() == "second"
    assert SqlTokenStorage(session_factory, key="other").get() is None

    SqlTokenStorage(session_factory).clear()
    assert SqlTokenStorage(session_factory).get() is None


def test_headless_session_survives_restart(session_factory):
    settings = Settings(mock_delay_min=0, mock_delay_max=0)

    first = open_local_session(session_factory, settings)
    assert first.state.status == AuthStatus.ANONYMOUS
    assert first.verify_code(OWNER_CONTACT, DEMO_CODE).success

    second = open_local_session(session_factory, settings)
    assert second.state.status == AuthStatus.AUTHENTICATED
    assert second.state.role == Role.OWNER

    second.end_session()
    assert open_local_session(session_factory, settings).state.status == AuthStatus.ANONYMOUS


def request_with_cookies(cookies):
    request = MagicMock()
    request.cookies = cookies
    return request


def test_cookie_storage_untouched_response():
    storage = CookieTokenStorage(request_with_cookies({"access_token": "abc"}))
    assert storage.get() == "abc"

    response = storage.apply(Response())
    assert "set-cookie" not in response.headers


def test_cookie_storage_writes_and_deletes():
    storage = CookieTokenStorage(request_with_cookies({}), max_age=60)
    storage.set("tok")
    header = storage.apply(Response()).headers["set-cookie"]
    assert header.startswith("access_token=tok")
    assert "HttpOnly" in header
    assert "Max-Age=60" in header

    storage.clear()
    header = storage.apply(Response()).headers["set-cookie"]
    assert "Max-Age=0" in header
