"""
View Routes - server-rendered pages, every protected one gated by the RouteGuard.

Each request gets its own SessionStore over the access_token cookie, restored
before the guard decides. An outstanding code request rides along in a signed
short-lived cookie so the next request still knows its purpose and cooldown. Redirects to the login page carry the requested
location as ?next=...
"""
import os
import logging
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from jose import JWTError
from pydantic import ValidationError

from auth import COOKIE_NAME, create_access_token, decode_access_token
from config import Settings, get_settings
from models import ErrorKind, OtpPurpose, PendingVerification
from service_modules.api_client import ApiClient, Transport, build_transport
from service_modules.attendance_service import AttendanceService
from service_modules.expense_service import CATEGORIES, ExpenseService
from service_modules.gym_service import GymService
from service_modules.membership_service import MembershipService
from service_modules.review_service import ReviewService
from service_modules.route_guard import RouteGuard, build_default_guard
from service_modules.session_service import SessionStore
from service_modules.token_storage import CookieTokenStorage
from service_modules.trainer_service import TrainerService

logger = logging.getLogger("gymkhana")

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
templates = Jinja2Templates(directory=os.path.join(BASE_DIR, "templates"))

router = APIRouter(tags=["Views"])

PENDING_COOKIE = "otp_pending"
PENDING_TOKEN_TYPE = "otp_pending"

OWNER_SECTIONS = {
    "gym-profile": "Gym Profile",
    "member-requests": "Member Requests",
    "attendance": "Attendance",
    "reviews": "Reviews",
    "settings": "Settings",
    "expenses": "Expenses",
    "trainers": "Trainers",
}

ERROR_STATUS = {
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.INVALID_CODE: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NETWORK_ERROR: 502,
    ErrorKind.TIMEOUT: 504,
}

_guard = build_default_guard()


# --- DEPENDENCIES ---
def get_route_guard() -> RouteGuard:
    return _guard


def get_transport(settings: Settings = Depends(get_settings)) -> Transport:
    return build_transport(settings)


def get_session_store(
    request: Request,
    transport: Transport = Depends(get_transport),
    settings: Settings = Depends(get_settings),
) -> SessionStore:
    storage = CookieTokenStorage(request, cookie_name=COOKIE_NAME,
                                 max_age=settings.access_token_expire_minutes * 60)
    store = SessionStore(ApiClient(transport, storage), storage)
    store.restore_session()
    _load_pending(request, store)
    return store


# --- HELPERS ---
def _load_pending(request: Request, store: SessionStore):
    raw = request.cookies.get(PENDING_COOKIE)
    if not raw:
        return
    try:
        claims = decode_access_token(raw)
        if claims.get("typ") != PENDING_TOKEN_TYPE:
            raise JWTError("not a pending-code token")
        pending = PendingVerification(
            contact=claims["sub"], purpose=claims["purpose"],
            requested_at=claims["sent_at"], expires_at=claims["expires_at"],
        )
    except (JWTError, KeyError, ValidationError) as e:
        logger.info(f"Ignoring unreadable pending-code cookie: {e}")
        return
    store.resume_pending(pending)


def _remember_pending(response, pending: PendingVerification):
    lifetime = max(1, int(pending.expires_at - pending.requested_at))
    token = create_access_token({
        "typ": PENDING_TOKEN_TYPE,
        "sub": pending.contact,
        "purpose": pending.purpose.value,
        "sent_at": pending.requested_at,
        "expires_at": pending.expires_at,
    }, expires_delta=timedelta(seconds=lifetime))
    response.set_cookie(key=PENDING_COOKIE, value=token, httponly=True, samesite="lax", max_age=lifetime)
    return response


def _finish(store: SessionStore, response):
    return store.storage.apply(response)


def _requested_path(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def _guard_redirect(request: Request, store: SessionStore, guard: RouteGuard):
    decision = guard.check(store.state, _requested_path(request))
    if decision.allowed:
        return None
    return _finish(store, RedirectResponse(url=decision.redirect_to, status_code=302))


def _render_login(request: Request, settings: Settings, step: str = "contact", contact: str = "",
                  purpose: str = OtpPurpose.LOGIN.value, next_path: str = "", error: Optional[str] = None,
                  notice: Optional[str] = None, status_code: int = 200):
    return templates.TemplateResponse(request, "login.html", {
        "step": step,
        "contact": contact,
        "purpose": purpose,
        "purposes": [p.value for p in OtpPurpose],
        "next": next_path or "",
        "error": error,
        "notice": notice,
        "demo_mode": settings.backend_mode == "fixture",
    }, status_code=status_code)


# --- LOGIN ---
@router.get("/")
def root():
    return RedirectResponse(url="/login", status_code=302)


@router.get("/login", response_class=HTMLResponse)
def show_login(
    request: Request,
    next: Optional[str] = None,
    store: SessionStore = Depends(get_session_store),
    guard: RouteGuard = Depends(get_route_guard),
    settings: Settings = Depends(get_settings),
):
    if store.is_authenticated:
        target = guard.return_target(store.session.role, next)
        return _finish(store, RedirectResponse(url=target, status_code=302))
    return _finish(store, _render_login(request, settings, next_path=next))


@router.post("/login/send-code", response_class=HTMLResponse)
def send_code(
    request: Request,
    contact: str = Form(""),
    purpose: str = Form(OtpPurpose.LOGIN.value),
    next: str = Form(""),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
):
    result = store.request_code(contact, purpose)
    if not result.success:
        # a refused resend keeps the visitor on the code step
        pending = store.pending
        step = "code" if pending is not None and pending.contact == contact.strip() else "contact"
        return _finish(store, _render_login(
            request, settings, step=step, contact=contact, purpose=purpose, next_path=next,
            error=result.message, status_code=ERROR_STATUS[result.error],
        ))

    notice = "Please check your phone for the verification code."
    if settings.backend_mode == "fixture":
        notice += " Use 123456 for demo."
    response = _render_login(
        request, settings, step="code", contact=store.pending.contact, purpose=store.pending.purpose.value,
        next_path=next, notice=notice,
    )
    return _finish(store, _remember_pending(response, store.pending))


@router.post("/login/verify", response_class=HTMLResponse)
def verify_code(
    request: Request,
    contact: str = Form(""),
    code: str = Form(""),
    next: str = Form(""),
    role: Optional[str] = Form(None),
    purpose: Optional[str] = Form(None),
    store: SessionStore = Depends(get_session_store),
    guard: RouteGuard = Depends(get_route_guard),
    settings: Settings = Depends(get_settings),
):
    result = store.verify_code(contact, code, role=role.upper() if role else None,
                               purpose=purpose.upper() if purpose else None)
    if not result.success:
        return _finish(store, _render_login(
            request, settings, step="code", contact=contact, next_path=next,
            purpose=purpose or (store.pending.purpose.value if store.pending else OtpPurpose.LOGIN.value),
            error=result.message, status_code=ERROR_STATUS[result.error],
        ))

    target = guard.return_target(result.data.role, next)
    response = RedirectResponse(url=target, status_code=302)
    response.delete_cookie(PENDING_COOKIE)
    return _finish(store, response)


@router.post("/logout")
def logout(store: SessionStore = Depends(get_session_store)):
    store.end_session()
    response = RedirectResponse(url="/login", status_code=302)
    response.delete_cookie(PENDING_COOKIE)
    return _finish(store, response)


# --- OWNER ---
@router.get("/dashboard", response_class=HTMLResponse)
def owner_dashboard(
    request: Request,
    gym_id: int = 1,
    store: SessionStore = Depends(get_session_store),
    guard: RouteGuard = Depends(get_route_guard),
):
    redirect = _guard_redirect(request, store, guard)
    if redirect:
        return redirect

    gyms = GymService(store.api)
    return _finish(store, templates.TemplateResponse(request, "dashboard.html", {
        "session": store.session,
        "sections": OWNER_SECTIONS,
        "gyms": gyms.list_gyms(),
        "stats": gyms.dashboard(gym_id),
        "pending": MembershipService(store.api).pending_approvals(),
    }))


def _load_section(section: str, store: SessionStore, request: Request):
    q = request.query_params
    gym_id = int(q.get("gym_id", 1))
    if section == "gym-profile":
        return GymService(store.api).get_gym(gym_id)
    if section == "member-requests":
        return MembershipService(store.api).pending_approvals()
    if section == "attendance":
        return GymService(store.api).attendance_stats(gym_id, q.get("startDate", ""), q.get("endDate", ""))
    if section == "reviews":
        rating = q.get("rating")
        return ReviewService(store.api).list(rating=int(rating) if rating else None)
    if section == "expenses":
        return ExpenseService(store.api).list({
            "startDate": q.get("startDate"),
            "endDate": q.get("endDate"),
            "category": q.get("category"),
            "search": q.get("search"),
        })
    if section == "trainers":
        return TrainerService(store.api).list(status=q.get("status"), search=q.get("search"))
    return None


@router.get("/dashboard/{section}", response_class=HTMLResponse)
def owner_section(
    request: Request,
    section: str,
    store: SessionStore = Depends(get_session_store),
    guard: RouteGuard = Depends(get_route_guard),
):
    redirect = _guard_redirect(request, store, guard)
    if redirect:
        return redirect
    if section not in OWNER_SECTIONS:
        raise HTTPException(status_code=404, detail="Page not found")

    try:
        result = _load_section(section, store, request)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid query parameter")

    return _finish(store, templates.TemplateResponse(request, "section.html", {
        "session": store.session,
        "sections": OWNER_SECTIONS,
        "section": section,
        "title": OWNER_SECTIONS[section],
        "result": result,
        "categories": CATEGORIES,
    }))


# --- MEMBER ---
@router.get("/member-dashboard", response_class=HTMLResponse)
def member_dashboard(
    request: Request,
    store: SessionStore = Depends(get_session_store),
    guard: RouteGuard = Depends(get_route_guard),
):
    redirect = _guard_redirect(request, store, guard)
    if redirect:
        return redirect

    return _finish(store, templates.TemplateResponse(request, "member_dashboard.html", {
        "session": store.session,
        "memberships": MembershipService(store.api).my_memberships(),
        "attendance": AttendanceService(store.api).my_attendance(),
        "gyms": GymService(store.api).available_gyms(),
    }))
