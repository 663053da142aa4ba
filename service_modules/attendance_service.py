"""
Attendance Service - member check-in/check-out and visit history.
"""
from models import ApiErr, ApiResult, ErrorKind
from .base import ApiService


def _gym_id_error(gym_id) -> ApiErr:
    return ApiErr(error=ErrorKind.VALIDATION_ERROR, message=f"gymId: invalid gym id {gym_id!r}")


class AttendanceService(ApiService):

    def check_in(self, gym_id: int) -> ApiResult:
        if not isinstance(gym_id, int) or gym_id <= 0:
            return _gym_id_error(gym_id)
        return self._call("/attendance/checkin", "POST", body={"gymId": gym_id})

    def check_out(self, gym_id: int) -> ApiResult:
        if not isinstance(gym_id, int) or gym_id <= 0:
            return _gym_id_error(gym_id)
        return self._call("/attendance/checkout", "POST", body={"gymId": gym_id})

    def my_attendance(self, page: int = 0, size: int = 10, sort: str = "checkInTime,desc") -> ApiResult:
        return self._call("/attendance/my", params={"page": page, "size": size, "sort": sort})
