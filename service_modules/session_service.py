"""
Session Service - single source of truth for who is logged in.

A SessionStore owns the current Session and keeps it in step with the token
in durable storage: the token is written before a Session is installed and
both are dropped together. Nothing here is a module-level singleton; callers
build a store per client (or per web request) and pass it where it is needed.
"""
import logging
import time
from typing import Callable, Dict, Optional

from pydantic import ValidationError

from models import (
    ApiErr, ApiOk, ApiResult, ErrorKind, OtpPurpose, PendingVerification,
    SendCodeRequest, Session, UserProfile, VerifyCodeRequest, validation_error,
)
from .api_client import ApiClient
from .route_guard import AuthState, AuthStatus
from .token_storage import TokenStorage

logger = logging.getLogger("gymkhana")

RESEND_COOLDOWN_SECONDS = 30
DEFAULT_CODE_TTL_SECONDS = 300


class SessionStore:
    def __init__(self, api_client: ApiClient, storage: TokenStorage,
                 clock: Callable[[], float] = time.time,
                 resend_cooldown: int = RESEND_COOLDOWN_SECONDS):
        self.api = api_client
        self.storage = storage
        self._clock = clock
        self._resend_cooldown = resend_cooldown
        self._session: Optional[Session] = None
        self._pending: Optional[PendingVerification] = None
        self._last_sent: Dict[str, float] = {}
        self._restored = False

    # --- STATE ---

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def pending(self) -> Optional[PendingVerification]:
        return self._pending

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def state(self) -> AuthState:
        if self._session is not None:
            return AuthState(AuthStatus.AUTHENTICATED, self._session.role)
        if not self._restored:
            return AuthState(AuthStatus.UNKNOWN)
        return AuthState(AuthStatus.ANONYMOUS)

    def resend_available_in(self, contact: str) -> int:
        """Seconds until another code may be requested for this contact."""
        sent_at = self._last_sent.get(contact.strip())
        if sent_at is None:
            return 0
        remaining = self._resend_cooldown - (self._clock() - sent_at)
        return max(0, int(remaining + 0.999))

    def resume_pending(self, pending: PendingVerification) -> None:
        """Reinstate a code request made by an earlier store, cooldown included."""
        if self._pending is None:
            self._pending = pending
        self._last_sent[pending.contact] = max(self._last_sent.get(pending.contact, 0), pending.requested_at)

    # --- OPERATIONS ---

    def restore_session(self) -> AuthState:
        """Load the profile behind a stored token. Any failure clears the token."""
        if self._restored:
            return self.state

        token = self.storage.get()
        if not token:
            self._restored = True
            return self.state

        result = self.api.request("/auth/profile")
        profile = None
        if result.success:
            try:
                profile = UserProfile.model_validate(result.data)
            except ValidationError as e:
                logger.warning(f"Profile payload rejected during restore: {e}")

        if profile is None:
            logger.info("Stored token could not be restored, clearing it")
            self.storage.clear()
            self._session = None
        else:
            contact = profile.phone or profile.email or ""
            self._session = Session.from_profile(profile, contact=contact, token=token)
            logger.info(f"Session restored for user {profile.id} ({profile.role.value})")

        self._restored = True
        return self.state

    def request_code(self, contact: str, purpose=OtpPurpose.LOGIN) -> ApiResult:
        try:
            req = SendCodeRequest(contact=contact, purpose=purpose)
        except ValidationError as e:
            return validation_error(e)

        wait = self.resend_available_in(req.contact)
        if wait > 0:
            return ApiErr(error=ErrorKind.VALIDATION_ERROR,
                          message=f"Please wait {wait}s before requesting a new code")

        result = self.api.request(
            "/auth/send-otp", "POST",
            body={"phone": req.contact, "type": req.purpose.value},
            auth=False,
        )
        if not result.success:
            return result

        now = self._clock()
        expires_in = DEFAULT_CODE_TTL_SECONDS
        if isinstance(result.data, dict) and result.data.get("expiresIn"):
            expires_in = int(result.data["expiresIn"])
        self._pending = PendingVerification(
            contact=req.contact, purpose=req.purpose, requested_at=now, expires_at=now + expires_in,
        )
        self._last_sent[req.contact] = now
        logger.info(f"Verification code requested ({req.purpose.value})")
        return result

    def verify_code(self, contact: str, code: str, role=None, purpose=None) -> ApiResult:
        """On success the ApiOk carries the new Session; on failure nothing changes."""
        try:
            req = VerifyCodeRequest(contact=contact, code=code, role=role, purpose=purpose)
        except ValidationError as e:
            return validation_error(e)

        body = {"phone": req.contact, "otp": req.code, "type": OtpPurpose.LOGIN.value}
        if req.purpose is not None:
            body["type"] = req.purpose.value
        elif self._pending is not None and self._pending.contact == req.contact:
            body["type"] = self._pending.purpose.value
        if req.role is not None:
            body["role"] = req.role.value

        result = self.api.request("/auth/verify-otp", "POST", body=body, auth=False)
        if not result.success:
            return result

        try:
            token = result.data["token"]
            profile = UserProfile.model_validate(result.data["user"])
        except (KeyError, TypeError, ValidationError) as e:
            logger.warning(f"Verify response rejected: {e}")
            return ApiErr(error=ErrorKind.NETWORK_ERROR, message="Malformed response from server")
        if not token:
            return ApiErr(error=ErrorKind.NETWORK_ERROR, message="Server did not issue a token")

        session = Session.from_profile(profile, contact=req.contact, token=token)
        try:
            self.storage.set(token)
        except Exception as e:
            logger.warning(f"Token could not be stored: {e}")
            return ApiErr(error=ErrorKind.NETWORK_ERROR, message="Could not save your session. Please try again.")
        self._session = session
        self._pending = None
        self._restored = True
        logger.info(f"User {session.user_id} signed in as {session.role.value}")
        return ApiOk(data=session, message=result.message)

    def end_session(self) -> AuthState:
        """Fail-open logout: local state is cleared whatever the server says."""
        try:
            if self.storage.get():
                result = self.api.request("/auth/logout", "POST")
                if not result.success:
                    logger.warning(f"Remote logout failed ({result.error.value}): {result.message}")
            self.storage.clear()
        except Exception as e:
            logger.warning(f"Token storage could not be cleared: {e}")
        finally:
            self._session = None
            self._pending = None
            self._restored = True
        return self.state


def open_local_session(session_factory=None, settings=None) -> SessionStore:
    """SessionStore for scripts and headless clients; the token lives in the client_storage table."""
    from config import get_settings
    from database import SessionLocal, init_db
    from .api_client import get_api_client
    from .token_storage import SqlTokenStorage

    settings = settings or get_settings()
    if session_factory is None:
        init_db()
        session_factory = SessionLocal
    storage = SqlTokenStorage(session_factory, key=settings.token_storage_key)
    store = SessionStore(get_api_client(storage, settings), storage)
    store.restore_session()
    return store
