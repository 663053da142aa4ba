"""
Gym Service - gym listings, profile edits and the owner dashboard figures.
"""
from typing import Optional

from models import ApiResult, GymInput, GymUpdate
from .base import ApiService, payload, validate_input


class GymService(ApiService):
    """Service for gym browsing (members) and gym management (owners)."""

    def list_gyms(self, page: int = 0, size: int = 10, sort: str = "name,asc") -> ApiResult:
        return self._call("/gyms", params={"page": page, "size": size, "sort": sort})

    def available_gyms(self) -> ApiResult:
        """Gyms a member can pick when creating a membership."""
        return self._call("/gyms/available", auth=False)

    def get_gym(self, gym_id: int) -> ApiResult:
        return self._call(f"/gyms/{gym_id}")

    def create_gym(self, data) -> ApiResult:
        gym, err = validate_input(GymInput, data)
        if err:
            return err
        return self._call("/gyms", "POST", body=payload(gym))

    def update_gym(self, gym_id: int, data) -> ApiResult:
        changes, err = validate_input(GymUpdate, data)
        if err:
            return err
        return self._call(f"/gyms/{gym_id}", "PUT", body=payload(changes, partial=True))

    def dashboard(self, gym_id: int) -> ApiResult:
        return self._call(f"/gyms/{gym_id}/dashboard")

    def members(self, gym_id: int, page: int = 0, size: int = 10, sort: str = "name,asc",
                status: Optional[str] = "ACTIVE") -> ApiResult:
        return self._call(f"/gyms/{gym_id}/members",
                          params={"page": page, "size": size, "sort": sort, "status": status})

    def attendance_stats(self, gym_id: int, start_date: str, end_date: str) -> ApiResult:
        return self._call(f"/gyms/{gym_id}/attendance-stats",
                          params={"startDate": start_date, "endDate": end_date})
