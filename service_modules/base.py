"""
Base service utilities and shared imports.
Domain services import from here for input validation and the shared logger.
"""
import logging
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from models import ApiErr, ApiResult, validation_error
from .api_client import ApiClient

logger = logging.getLogger("gymkhana")

M = TypeVar("M", bound=BaseModel)


def validate_input(model: Type[M], data: Any) -> Tuple[Optional[M], Optional[ApiErr]]:
    """Validate user input locally. Errors come back as VALIDATION_ERROR and are never dispatched."""
    try:
        if isinstance(data, model):
            return data, None
        return model.model_validate(data), None
    except ValidationError as e:
        return None, validation_error(e)


def payload(model: BaseModel, partial: bool = False) -> Dict[str, Any]:
    return model.model_dump(mode="json", exclude_unset=partial, exclude_none=not partial)


class ApiService:
    """Common base: every domain service talks to the backend through one ApiClient."""

    def __init__(self, api_client: ApiClient):
        self.api = api_client

    def _call(self, endpoint: str, method: str = "GET", **kwargs) -> ApiResult:
        return self.api.request(endpoint, method, **kwargs)

__all__ = ['logger', 'validate_input', 'payload', 'ApiService']
