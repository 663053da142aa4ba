"""Runtime configuration, read from the environment (and `.env` when present)."""
import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()

BACKEND_MODES = ("fixture", "http")


@dataclass(frozen=True)
class Settings:
    backend_mode: str = "fixture"
    api_base_url: str = "http://localhost:9007/api/v1"
    request_timeout: float = 15.0
    mock_delay_min: float = 0.5
    mock_delay_max: float = 1.5
    secret_key: str = "dev_secret_key_123"
    access_token_expire_minutes: int = 60 * 24
    token_storage_key: str = "authToken"
    database_url: str = "sqlite:///./gymkhana.db"
    port: int = 9007

    @property
    def mock_delay_range(self) -> Tuple[float, float]:
        return (self.mock_delay_min, self.mock_delay_max)


def load_settings() -> Settings:
    mode = os.getenv("BACKEND_MODE", "fixture").lower()
    if mode not in BACKEND_MODES:
        raise ValueError(f"BACKEND_MODE must be one of {', '.join(BACKEND_MODES)}, got {mode!r}")

    delay_min = float(os.getenv("MOCK_DELAY_MIN", "0.5"))
    delay_max = float(os.getenv("MOCK_DELAY_MAX", "1.5"))
    if delay_max < delay_min:
        delay_max = delay_min

    return Settings(
        backend_mode=mode,
        api_base_url=os.getenv("API_BASE_URL", "http://localhost:9007/api/v1").rstrip("/"),
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", "15")),
        mock_delay_min=delay_min,
        mock_delay_max=delay_max,
        secret_key=os.getenv("SECRET_KEY", "dev_secret_key_123"),
        access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24))),
        token_storage_key=os.getenv("TOKEN_STORAGE_KEY", "authToken"),
        database_url=os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(os.path.dirname(os.path.abspath(__file__)), 'db', 'gymkhana.db')}"),
        port=int(os.getenv("PORT", "9007")),
    )


_settings = None


def get_settings() -> Settings:
    """FastAPI dependency. Tests override it through app.dependency_overrides."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
