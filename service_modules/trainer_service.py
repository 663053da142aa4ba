"""
Trainer Service - the owner's trainer roster.
"""
from typing import Optional

from models import ApiErr, ApiResult, ErrorKind, TrainerInput, TrainerStatus, TrainerUpdate
from .base import ApiService, payload, validate_input, logger


class TrainerService(ApiService):
    """Service for managing trainers of the signed-in owner's gyms."""

    def list(self, status: Optional[str] = None, search: Optional[str] = None) -> ApiResult:
        result = self._call("/trainers", params={"status": status, "search": search})
        if result.success and not isinstance(result.data, list):
            # empty-success fallback from the fixture backend
            logger.warning(f"Unexpected trainer list payload: {type(result.data).__name__}")
            result = result.model_copy(update={"data": []})
        return result

    def get(self, trainer_id: str) -> ApiResult:
        return self._call(f"/trainers/{trainer_id}")

    def create(self, data) -> ApiResult:
        trainer, err = validate_input(TrainerInput, data)
        if err:
            return err
        return self._call("/trainers", "POST", body=payload(trainer))

    def update(self, trainer_id: str, data) -> ApiResult:
        changes, err = validate_input(TrainerUpdate, data)
        if err:
            return err
        return self._call(f"/trainers/{trainer_id}", "PUT", body=payload(changes, partial=True))

    def delete(self, trainer_id: str) -> ApiResult:
        return self._call(f"/trainers/{trainer_id}", "DELETE")

    def set_status(self, trainer_id: str, status) -> ApiResult:
        try:
            status = TrainerStatus(status)
        except ValueError:
            return ApiErr(error=ErrorKind.VALIDATION_ERROR, message=f"status: unknown trainer status {status!r}")
        return self._call(f"/trainers/{trainer_id}/status", "PATCH", body={"status": status.value})
