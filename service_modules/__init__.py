"""
Services package - the client core and the domain services built on it.

ApiClient dispatches requests, SessionStore tracks who is logged in and
RouteGuard gates views; the domain services wrap backend endpoints.
"""
from .token_storage import TokenStorage, MemoryTokenStorage, SqlTokenStorage, CookieTokenStorage
from .api_client import ApiClient, FixtureTransport, HttpTransport, get_api_client
from .route_guard import AuthState, AuthStatus, GuardDecision, RouteGuard, build_default_guard
from .session_service import SessionStore
from .gym_service import GymService
from .membership_service import MembershipService
from .attendance_service import AttendanceService
from .trainer_service import TrainerService
from .expense_service import ExpenseService
from .review_service import ReviewService

__all__ = [
    'TokenStorage',
    'MemoryTokenStorage',
    'SqlTokenStorage',
    'CookieTokenStorage',
    'ApiClient',
    'FixtureTransport',
    'HttpTransport',
    'get_api_client',
    'AuthState',
    'AuthStatus',
    'GuardDecision',
    'RouteGuard',
    'build_default_guard',
    'SessionStore',
    'GymService',
    'MembershipService',
    'AttendanceService',
    'TrainerService',
    'ExpenseService',
    'ReviewService',
]
