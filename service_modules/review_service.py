"""
Review Service - member reviews of the owner's gyms and owner replies.
"""
from typing import Optional

from models import ApiErr, ApiResult, ErrorKind, ReviewReply
from .base import ApiService, payload, validate_input


class ReviewService(ApiService):

    def list(self, rating: Optional[int] = None, sort: str = "date,desc") -> ApiResult:
        if rating is not None and rating not in range(1, 6):
            return ApiErr(error=ErrorKind.VALIDATION_ERROR, message="rating: must be between 1 and 5")
        return self._call("/reviews", params={"rating": rating, "sort": sort})

    def reply(self, review_id: str, text: str) -> ApiResult:
        reply, err = validate_input(ReviewReply, {"response": (text or "").strip()})
        if err:
            return err
        return self._call(f"/reviews/{review_id}/reply", "POST", body=payload(reply))
