"""
Route Guard - decides whether a requested view renders or redirects.

States: UNKNOWN (session not restored yet), ANONYMOUS, AUTHENTICATED(role).
A protected view renders only for AUTHENTICATED with the matching role.
Anonymous and unknown visitors go to the login page with the requested
location carried in the redirect URL as ?next=..., never in shared state.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote, urlsplit

from models import Role


class AuthStatus(str, Enum):
    UNKNOWN = "UNKNOWN"
    ANONYMOUS = "ANONYMOUS"
    AUTHENTICATED = "AUTHENTICATED"


@dataclass(frozen=True)
class AuthState:
    status: AuthStatus
    role: Optional[Role] = None


@dataclass(frozen=True)
class GuardDecision:
    allowed: bool
    redirect_to: Optional[str] = None


DEFAULT_HOME_PATHS = {
    Role.OWNER: "/dashboard",
    Role.MEMBER: "/member-dashboard",
}


class RouteGuard:
    def __init__(self, login_path: str = "/login", home_paths: Optional[Dict[Role, str]] = None):
        self.login_path = login_path
        self.home_paths = dict(home_paths or DEFAULT_HOME_PATHS)
        self._protected: List[Tuple[str, Role]] = []

    def protect(self, prefix: str, role: Role) -> "RouteGuard":
        self._protected.append((prefix.rstrip("/") or "/", role))
        # longest prefix first so nested views can override their parent
        self._protected.sort(key=lambda item: len(item[0]), reverse=True)
        return self

    def required_role(self, path: str) -> Optional[Role]:
        path = urlsplit(path).path.rstrip("/") or "/"
        for prefix, role in self._protected:
            if path == prefix or path.startswith(prefix + "/"):
                return role
        return None

    def home_for(self, role: Role) -> str:
        return self.home_paths[role]

    def login_redirect(self, requested: str) -> str:
        return f"{self.login_path}?next={quote(requested, safe='/')}"

    def check(self, state: AuthState, requested: str) -> GuardDecision:
        role = self.required_role(requested)
        if role is None:
            return GuardDecision(allowed=True)
        if state.status != AuthStatus.AUTHENTICATED:
            return GuardDecision(allowed=False, redirect_to=self.login_redirect(requested))
        if state.role != role:
            return GuardDecision(allowed=False, redirect_to=self.home_for(state.role))
        return GuardDecision(allowed=True)

    def return_target(self, role: Role, next_path: Optional[str]) -> str:
        """Where to land after sign-in: the remembered target if this role may see it."""
        if not next_path or not is_local_path(next_path):
            return self.home_for(role)
        if urlsplit(next_path).path.rstrip("/") == self.login_path:
            return self.home_for(role)
        required = self.required_role(next_path)
        if required is not None and required != role:
            return self.home_for(role)
        return next_path


def is_local_path(target: str) -> bool:
    parts = urlsplit(target)
    return (
        target.startswith("/")
        and not target.startswith("//")
        and "\\" not in target
        and not parts.scheme
        and not parts.netloc
    )


def build_default_guard() -> RouteGuard:
    return (
        RouteGuard()
        .protect("/dashboard", Role.OWNER)
        .protect("/member-dashboard", Role.MEMBER)
    )
