"""
Membership Service - member sign-ups across gyms and the owner approval queue.
"""
from models import ApiResult, MembershipCreate, MembershipRejection
from .base import ApiService, payload, validate_input


class MembershipService(ApiService):

    def create(self, gym_ids, duration_months: int, start_date: str) -> ApiResult:
        request, err = validate_input(MembershipCreate, {
            "selectedGymIds": gym_ids,
            "durationMonths": duration_months,
            "startDate": start_date,
        })
        if err:
            return err
        return self._call("/memberships/create", "POST", body=payload(request))

    def my_memberships(self) -> ApiResult:
        return self._call("/memberships/my")

    def pending_approvals(self) -> ApiResult:
        return self._call("/memberships/pending-approvals")

    def approve(self, membership_id: int, gym_id: int) -> ApiResult:
        return self._call(f"/memberships/approve-gym/{membership_id}/{gym_id}", "POST")

    def reject(self, membership_id: int, gym_id: int, reason: str, details: str = "") -> ApiResult:
        rejection, err = validate_input(MembershipRejection, {"reason": reason, "details": details})
        if err:
            return err
        return self._call(f"/memberships/reject-gym/{membership_id}/{gym_id}", "POST",
                          body=payload(rejection))
