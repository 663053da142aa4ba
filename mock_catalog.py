"""
Mock Response Catalog - fixture backend keyed by (endpoint, method).

Every entry is a handler registered with @fixture(path, method). The same table
is consulted in-process by FixtureTransport and mounted over HTTP by
route_modules.backend_routes, so both paths answer identically.
"""
import copy
import hashlib
import json
import logging
import math
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit

from jose import JWTError

from auth import create_access_token, decode_access_token, profile_from_claims
from data import (
    DEMO_USERS, EXPENSES, FIXTURE_NOW, GYM_ATTENDANCE, GYM_MEMBERS, GYMS,
    MY_ATTENDANCE, MY_MEMBERSHIPS, PENDING_APPROVALS, REVIEWS, TRAINERS,
)
from models import ErrorKind, Role, UserProfile

logger = logging.getLogger("gymkhana")

DEMO_OTP_CODE = "123456"
OWNER_SENTINEL = "owner"
OTP_TTL_SECONDS = 300


class FixtureError(Exception):
    """A scripted failure. Carries the wire status and the machine error code."""

    def __init__(self, kind: ErrorKind, message: str, status_code: int = 400):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class FixtureRequest:
    path_params: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, Any] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)
    files: Dict[str, Any] = field(default_factory=dict)
    token: Optional[str] = None


@dataclass(frozen=True)
class Fixture:
    path: str
    method: str
    handler: Callable[[FixtureRequest], Any]
    message: Optional[str] = None

    def match(self, path: str) -> Optional[Dict[str, str]]:
        m = _compile(self.path).match(path)
        return m.groupdict() if m else None


@lru_cache(maxsize=None)
def _compile(template: str):
    pattern = re.sub(r"\{(\w+)\}", r"(?P<\1>[^/]+)", template)
    return re.compile(f"^{pattern}/?$")


_FIXTURES: List[Fixture] = []


def fixture(path: str, method: str = "GET", message: Optional[str] = None):
    def register(handler):
        _FIXTURES.append(Fixture(path=path, method=method.upper(), handler=handler, message=message))
        return handler
    return register


def all_fixtures() -> Tuple[Fixture, ...]:
    return tuple(_FIXTURES)


def lookup(endpoint: str, method: str) -> Optional[Tuple[Fixture, Dict[str, str]]]:
    """Find the first fixture matching the path part of `endpoint` and `method`."""
    path = urlsplit(endpoint).path
    method = method.upper()
    for entry in _FIXTURES:
        if entry.method != method:
            continue
        params = entry.match(path)
        if params is not None:
            return entry, params
    return None


def resolve(endpoint: str, method: str, body: Optional[dict] = None, params: Optional[dict] = None,
            files: Optional[dict] = None, token: Optional[str] = None):
    """
    Run the fixture for (endpoint, method).

    Returns (matched, data, message). Raises FixtureError for scripted failures.
    Query parameters embedded in `endpoint` are merged under explicit `params`.
    """
    found = lookup(endpoint, method)
    if found is None:
        return False, {}, None

    entry, path_params = found
    query = dict(parse_qsl(urlsplit(endpoint).query))
    query.update({k: v for k, v in (params or {}).items() if v is not None})
    request = FixtureRequest(
        path_params=path_params,
        query=query,
        body=dict(body or {}),
        files=dict(files or {}),
        token=token,
    )
    return True, invoke(entry, request), entry.message


def invoke(entry: Fixture, request: FixtureRequest):
    """Run one fixture handler; malformed input becomes a 422 VALIDATION_ERROR."""
    try:
        return entry.handler(request)
    except FixtureError:
        raise
    except (KeyError, ValueError, TypeError) as e:
        logger.debug(f"Fixture {entry.method} {entry.path} rejected request: {e}")
        raise FixtureError(ErrorKind.VALIDATION_ERROR, f"Invalid request: {e}", 422)


# --- HELPERS ---

def _derive_id(prefix: str, payload: Any) -> str:
    digest = hashlib.sha1(json.dumps(payload, sort_keys=True, default=str).encode("utf-8")).hexdigest()
    return f"{prefix}{digest[:8]}"


def _derive_int_id(payload: Any) -> int:
    return 1000 + int(_derive_id("", payload), 16) % 900000


def infer_role(contact: str, explicit: Optional[str] = None) -> Role:
    """Explicit role wins; otherwise the 'owner' sentinel in the contact marks an owner."""
    if explicit:
        return Role(str(explicit).upper())
    return Role.OWNER if OWNER_SENTINEL in contact.lower() else Role.MEMBER


def _require_profile(req: FixtureRequest) -> UserProfile:
    if not req.token:
        raise FixtureError(ErrorKind.UNAUTHORIZED, "Unauthorized", 401)
    try:
        return profile_from_claims(decode_access_token(req.token))
    except JWTError:
        raise FixtureError(ErrorKind.UNAUTHORIZED, "Invalid or expired token", 401)


def _require_owner(req: FixtureRequest) -> UserProfile:
    profile = _require_profile(req)
    if profile.role != Role.OWNER:
        raise FixtureError(ErrorKind.UNAUTHORIZED, "Owner access required", 403)
    return profile


def _not_found(what: str, key: Any):
    return FixtureError(ErrorKind.NETWORK_ERROR, f"{what} {key} not found", 404)


def _find(items: List[dict], key: str, value: Any) -> Optional[dict]:
    for item in items:
        if str(item.get(key)) == str(value):
            return copy.deepcopy(item)
    return None


def _gym(gym_id: Any) -> dict:
    gym = _find(GYMS, "id", gym_id)
    if gym is None:
        raise _not_found("Gym", gym_id)
    return gym


def sort_items(items: List[dict], sort: Optional[str]) -> List[dict]:
    """Sort by a 'field,asc|desc' string. Missing values sort last."""
    if not sort:
        return list(items)
    field_name, _, direction = sort.partition(",")
    reverse = direction.strip().lower() == "desc"
    present = [i for i in items if i.get(field_name) is not None]
    missing = [i for i in items if i.get(field_name) is None]
    present.sort(key=lambda i: i[field_name], reverse=reverse)
    return present + missing


def paginate(items: List[dict], page: Any = 0, size: Any = 10, sort: Optional[str] = None) -> dict:
    page, size = int(page), int(size)
    if page < 0 or size < 1:
        raise ValueError("page must be >= 0 and size >= 1")
    ordered = sort_items(items, sort)
    start = page * size
    return {
        "content": [copy.deepcopy(i) for i in ordered[start:start + size]],
        "totalElements": len(ordered),
        "totalPages": math.ceil(len(ordered) / size) if ordered else 0,
        "size": size,
        "number": page,
    }


def _form_value(body: dict, key: str, default=None):
    value = body.get(key, default)
    # multipart fields arrive as strings; nested values as JSON text
    if isinstance(value, str) and value[:1] in ("[", "{"):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def _receipt_url(files: dict) -> Optional[str]:
    upload = files.get("receipt")
    if not upload:
        return None
    filename = upload[0] if isinstance(upload, (tuple, list)) else getattr(upload, "filename", "receipt")
    return f"/uploads/receipts/{filename}"


# --- AUTH ---

@fixture("/auth/send-otp", "POST", message="OTP sent successfully")
def send_otp(req: FixtureRequest):
    phone = (req.body.get("phone") or "").strip()
    if not phone:
        raise FixtureError(ErrorKind.VALIDATION_ERROR, "Phone is required", 422)
    return {"phone": phone, "expiresIn": OTP_TTL_SECONDS, "type": req.body.get("type", "LOGIN")}


@fixture("/auth/verify-otp", "POST", message="Login successful")
def verify_otp(req: FixtureRequest):
    phone = (req.body.get("phone") or "").strip()
    if not phone:
        raise FixtureError(ErrorKind.VALIDATION_ERROR, "Phone is required", 422)
    if req.body.get("otp") != DEMO_OTP_CODE:
        raise FixtureError(ErrorKind.INVALID_CODE, "Invalid OTP", 400)
    role = infer_role(phone, req.body.get("role"))
    user = dict(DEMO_USERS[role.value], phone=phone, role=role.value, isVerified=True)
    token = create_access_token({
        "sub": phone,
        "uid": user["id"],
        "role": role.value,
        "name": user["name"],
        "phone": phone,
        "email": user["email"],
        "created_at": user["createdAt"],
    })
    return {"token": token, "user": user}


@fixture("/auth/profile", "GET")
def get_profile(req: FixtureRequest):
    return _require_profile(req).model_dump(mode="json", by_alias=True)


@fixture("/auth/logout", "POST", message="Logged out")
def logout(req: FixtureRequest):
    return {}


# --- GYMS ---

@fixture("/gyms", "GET")
def list_gyms(req: FixtureRequest):
    return paginate(GYMS, req.query.get("page", 0), req.query.get("size", 10), req.query.get("sort", "name,asc"))


@fixture("/gyms/available", "GET")
def available_gyms(req: FixtureRequest):
    keys = ("id", "name", "address", "phone", "email", "description", "amenities", "rating", "reviewCount", "fees")
    return [{k: copy.deepcopy(g.get(k)) for k in keys} for g in GYMS if g["status"] == "ACTIVE"]


@fixture("/gyms", "POST", message="Gym created")
def create_gym(req: FixtureRequest):
    owner = _require_owner(req)
    gym = dict(req.body, id=_derive_int_id(req.body), ownerId=owner.id, status="ACTIVE",
               createdAt=FIXTURE_NOW, rating=0, reviewCount=0)
    return gym


@fixture("/gyms/{gym_id}", "GET")
def get_gym(req: FixtureRequest):
    return _gym(req.path_params["gym_id"])


@fixture("/gyms/{gym_id}", "PUT", message="Gym updated")
def update_gym(req: FixtureRequest):
    _require_owner(req)
    gym = _gym(req.path_params["gym_id"])
    gym.update({k: v for k, v in req.body.items() if k not in ("id", "ownerId", "createdAt")})
    return gym


@fixture("/gyms/{gym_id}/dashboard", "GET")
def gym_dashboard(req: FixtureRequest):
    _require_owner(req)
    gym = _gym(req.path_params["gym_id"])
    gym_id = gym["id"]
    members = [m for m in GYM_MEMBERS if m["gymId"] == gym_id]
    visits = [a for a in GYM_ATTENDANCE if a["gymId"] == gym_id]
    reviews = [r for r in REVIEWS if r["gymId"] == gym_id]
    active = [m for m in members if m["status"] == "ACTIVE"]
    latest_day = max((a["date"] for a in visits), default=None)
    return {
        "gymId": gym_id,
        "gymName": gym["name"],
        "totalMembers": len(members),
        "activeMembers": len(active),
        "pendingRequests": len([p for p in PENDING_APPROVALS if p["gymId"] == gym_id and p["status"] == "PENDING"]),
        "todayCheckIns": len([a for a in visits if a["date"] == latest_day]),
        "monthlyRevenue": round(len(active) * gym["fees"]["monthlyFee"], 2),
        "averageRating": round(sum(r["rating"] for r in reviews) / len(reviews), 2) if reviews else None,
    }


@fixture("/gyms/{gym_id}/members", "GET")
def gym_members(req: FixtureRequest):
    _require_owner(req)
    gym_id = _gym(req.path_params["gym_id"])["id"]
    status = req.query.get("status")
    members = [m for m in GYM_MEMBERS if m["gymId"] == gym_id and (not status or m["status"] == status)]
    return paginate(members, req.query.get("page", 0), req.query.get("size", 10), req.query.get("sort", "name,asc"))


@fixture("/gyms/{gym_id}/attendance-stats", "GET")
def attendance_stats(req: FixtureRequest):
    _require_owner(req)
    gym_id = _gym(req.path_params["gym_id"])["id"]
    start, end = req.query.get("startDate"), req.query.get("endDate")
    visits = [
        a for a in GYM_ATTENDANCE
        if a["gymId"] == gym_id and (not start or a["date"] >= start) and (not end or a["date"] <= end)
    ]
    by_date: Dict[str, int] = {}
    for visit in visits:
        by_date[visit["date"]] = by_date.get(visit["date"], 0) + 1
    durations = [a["duration"] for a in visits if a.get("duration")]
    return {
        "gymId": gym_id,
        "startDate": start,
        "endDate": end,
        "totalCheckIns": len(visits),
        "uniqueMembers": len({a["memberId"] for a in visits}),
        "averageDurationMinutes": round(sum(durations) / len(durations), 1) if durations else 0,
        "checkInsByDate": dict(sorted(by_date.items())),
    }


# --- MEMBERSHIPS ---

@fixture("/memberships/create", "POST", message="Membership request submitted")
def create_membership(req: FixtureRequest):
    profile = _require_profile(req)
    gym_ids = req.body["selectedGymIds"]
    months = int(req.body["durationMonths"])
    gyms = [_gym(gid) for gid in gym_ids]
    lines = [
        {"gymId": g["id"], "gymName": g["name"], "individualFee": g["fees"]["monthlyFee"], "status": "PENDING"}
        for g in gyms
    ]
    return {
        "id": _derive_int_id([profile.id, req.body]),
        "memberId": profile.id,
        "totalAmount": round(sum(line["individualFee"] for line in lines) * months, 2),
        "durationMonths": months,
        "startDate": req.body["startDate"],
        "status": "PENDING",
        "createdAt": FIXTURE_NOW,
        "approvalStatus": {"totalGyms": len(lines), "approvedGyms": 0, "pendingGyms": len(lines), "rejectedGyms": 0},
        "gyms": lines,
    }


@fixture("/memberships/my", "GET")
def my_memberships(req: FixtureRequest):
    _require_profile(req)
    return copy.deepcopy(MY_MEMBERSHIPS)


@fixture("/memberships/pending-approvals", "GET")
def pending_approvals(req: FixtureRequest):
    _require_owner(req)
    return [copy.deepcopy(p) for p in PENDING_APPROVALS if p["status"] == "PENDING"]


def _pending(req: FixtureRequest) -> dict:
    membership_id, gym_id = req.path_params["membership_id"], req.path_params["gym_id"]
    for item in PENDING_APPROVALS:
        if str(item["membershipId"]) == membership_id and str(item["gymId"]) == gym_id:
            return copy.deepcopy(item)
    raise _not_found("Membership request", f"{membership_id}/{gym_id}")


@fixture("/memberships/approve-gym/{membership_id}/{gym_id}", "POST", message="Membership approved")
def approve_membership(req: FixtureRequest):
    _require_owner(req)
    return dict(_pending(req), status="APPROVED", decidedAt=FIXTURE_NOW)


@fixture("/memberships/reject-gym/{membership_id}/{gym_id}", "POST", message="Membership rejected")
def reject_membership(req: FixtureRequest):
    _require_owner(req)
    return dict(_pending(req), status="REJECTED", decidedAt=FIXTURE_NOW,
                rejectionReason=req.body.get("reason"), rejectionDetails=req.body.get("details", ""))


# --- ATTENDANCE ---

@fixture("/attendance/checkin", "POST", message="Checked in")
def check_in(req: FixtureRequest):
    profile = _require_profile(req)
    gym = _gym(req.body["gymId"])
    return {
        "id": _derive_int_id([profile.id, gym["id"], "in"]),
        "gymId": gym["id"],
        "gymName": gym["name"],
        "checkInTime": FIXTURE_NOW,
        "checkOutTime": None,
        "status": "CHECKED_IN",
    }


@fixture("/attendance/checkout", "POST", message="Checked out")
def check_out(req: FixtureRequest):
    profile = _require_profile(req)
    gym = _gym(req.body["gymId"])
    return {
        "id": _derive_int_id([profile.id, gym["id"], "in"]),
        "gymId": gym["id"],
        "gymName": gym["name"],
        "checkInTime": FIXTURE_NOW,
        "checkOutTime": FIXTURE_NOW,
        "duration": "PT0S",
        "status": "CHECKED_OUT",
    }


@fixture("/attendance/my", "GET")
def my_attendance(req: FixtureRequest):
    _require_profile(req)
    return paginate(MY_ATTENDANCE, req.query.get("page", 0), req.query.get("size", 10),
                    req.query.get("sort", "checkInTime,desc"))


# --- TRAINERS ---

def _trainer(trainer_id: str) -> dict:
    trainer = _find(TRAINERS, "id", trainer_id)
    if trainer is None:
        raise _not_found("Trainer", trainer_id)
    return trainer


@fixture("/trainers", "GET")
def list_trainers(req: FixtureRequest):
    _require_owner(req)
    status = req.query.get("status")
    search = (req.query.get("search") or "").strip().lower()
    result = []
    for t in TRAINERS:
        if status and t["status"] != status:
            continue
        haystack = " ".join(str(t.get(k) or "") for k in ("firstName", "lastName", "phone", "email")).lower()
        if search and search not in haystack:
            continue
        result.append(copy.deepcopy(t))
    return result


@fixture("/trainers", "POST", message="Trainer created")
def create_trainer(req: FixtureRequest):
    _require_owner(req)
    fields = {k: v for k, v in req.body.items() if k not in ("password", "confirmPassword")}
    return dict(fields, id=_derive_id("t_", fields), certifications=[], availability=fields.get("availability", []),
                createdAt=FIXTURE_NOW, updatedAt=FIXTURE_NOW)


@fixture("/trainers/{trainer_id}", "GET")
def get_trainer(req: FixtureRequest):
    _require_owner(req)
    return _trainer(req.path_params["trainer_id"])


@fixture("/trainers/{trainer_id}", "PUT", message="Trainer updated")
def update_trainer(req: FixtureRequest):
    _require_owner(req)
    trainer = _trainer(req.path_params["trainer_id"])
    trainer.update({k: v for k, v in req.body.items() if k not in ("id", "createdAt")})
    trainer["updatedAt"] = FIXTURE_NOW
    return trainer


@fixture("/trainers/{trainer_id}", "DELETE", message="Trainer deleted")
def delete_trainer(req: FixtureRequest):
    _require_owner(req)
    _trainer(req.path_params["trainer_id"])
    return {}


@fixture("/trainers/{trainer_id}/status", "PATCH", message="Trainer status updated")
def set_trainer_status(req: FixtureRequest):
    _require_owner(req)
    trainer = _trainer(req.path_params["trainer_id"])
    status = req.body["status"]
    if status not in ("active", "inactive"):
        raise ValueError(f"unknown trainer status {status!r}")
    trainer.update(status=status, updatedAt=FIXTURE_NOW)
    return trainer


# --- EXPENSES ---

def _expense(expense_id: str) -> dict:
    expense = _find(EXPENSES, "id", expense_id)
    if expense is None:
        raise _not_found("Expense", expense_id)
    return expense


def _expense_fields(body: dict) -> dict:
    fields = {k: _form_value(body, k) for k in body}
    if "amount" in fields:
        fields["amount"] = float(fields["amount"])
    return fields


@fixture("/expenses", "GET")
def list_expenses(req: FixtureRequest):
    _require_owner(req)
    q = req.query
    category = q.get("category")
    search = (q.get("search") or "").strip().lower()
    result = []
    for e in EXPENSES:
        if q.get("startDate") and e["date"] < q["startDate"]:
            continue
        if q.get("endDate") and e["date"] > q["endDate"]:
            continue
        if category and category != "all" and e["category"] != category:
            continue
        if search and search not in f"{e.get('description') or ''} {e['paidByName']}".lower():
            continue
        result.append(copy.deepcopy(e))
    return sort_items(result, q.get("sort", "date,desc"))


@fixture("/expenses", "POST", message="Expense created")
def create_expense(req: FixtureRequest):
    owner = _require_owner(req)
    fields = _expense_fields(req.body)
    expense = dict(fields, id=_derive_id("e_", fields), paidByName=owner.name,
                   receiptUrl=_receipt_url(req.files) or "", createdAt=FIXTURE_NOW, updatedAt=FIXTURE_NOW)
    return expense


@fixture("/expenses/{expense_id}", "GET")
def get_expense(req: FixtureRequest):
    _require_owner(req)
    return _expense(req.path_params["expense_id"])


@fixture("/expenses/{expense_id}", "PUT", message="Expense updated")
def update_expense(req: FixtureRequest):
    _require_owner(req)
    expense = _expense(req.path_params["expense_id"])
    expense.update({k: v for k, v in _expense_fields(req.body).items() if k not in ("id", "createdAt")})
    receipt = _receipt_url(req.files)
    if receipt:
        expense["receiptUrl"] = receipt
    expense["updatedAt"] = FIXTURE_NOW
    return expense


@fixture("/expenses/{expense_id}", "DELETE", message="Expense deleted")
def delete_expense(req: FixtureRequest):
    _require_owner(req)
    _expense(req.path_params["expense_id"])
    return {}


# --- REVIEWS ---

@fixture("/reviews", "GET")
def list_reviews(req: FixtureRequest):
    _require_owner(req)
    rating = req.query.get("rating")
    reviews = [copy.deepcopy(r) for r in REVIEWS if not rating or str(r["rating"]) == str(rating)]
    return sort_items(reviews, req.query.get("sort", "date,desc"))


@fixture("/reviews/{review_id}/reply", "POST", message="Response posted")
def reply_review(req: FixtureRequest):
    _require_owner(req)
    review = _find(REVIEWS, "id", req.path_params["review_id"])
    if review is None:
        raise _not_found("Review", req.path_params["review_id"])
    review.update(response=req.body["response"], responded=True)
    return review
