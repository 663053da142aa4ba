import pytest

from config import load_settings
from service_modules.api_client import FixtureTransport, HttpTransport, build_transport


def test_defaults(monkeypatch):
    for name in ("BACKEND_MODE", "MOCK_DELAY_MIN", "MOCK_DELAY_MAX", "API_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.backend_mode == "fixture"
    assert settings.mock_delay_range == (0.5, 1.5)
    assert isinstance(build_transport(settings), FixtureTransport)


def test_http_mode(monkeypatch):
    monkeypatch.setenv("BACKEND_MODE", "HTTP")
    monkeypatch.setenv("API_BASE_URL", "https://api.example.com/api/v1/")
    monkeypatch.setenv("REQUEST_TIMEOUT", "5")
    settings = load_settings()

    transport = build_transport(settings)
    assert isinstance(transport, HttpTransport)
    assert transport.base_url == "https://api.example.com/api/v1"
    assert transport.timeout == 5.0


def test_invalid_backend_mode(monkeypatch):
    monkeypatch.setenv("BACKEND_MODE", "carrier-pigeon")
    with pytest.raises(ValueError):
        load_settings()


def test_inverted_delay_range_is_clamped(monkeypatch):
    monkeypatch.setenv("MOCK_DELAY_MIN", "2")
    monkeypatch.setenv("MOCK_DELAY_MAX", "1")
    assert load_settings().mock_delay_range == (2.0, 2.0)
