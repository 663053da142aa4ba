from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt

from fastapi import Request

from config import get_settings
from models import Role, UserProfile

ALGORITHM = "HS256"
COOKIE_NAME = "access_token"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    settings = get_settings()
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> dict:
    """Decode and verify a token. Raises JWTError when it is corrupt, forged or expired."""
    return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])


def profile_from_claims(claims: dict) -> UserProfile:
    try:
        return UserProfile(
            id=int(claims["uid"]),
            name=claims["name"],
            phone=claims.get("phone"),
            email=claims.get("email"),
            role=Role(claims["role"]),
            is_verified=True,
            created_at=claims.get("created_at"),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise JWTError(f"Malformed claims: {e}")


def extract_token(request: Request) -> Optional[str]:
    # Authorization header first (API clients), cookie second (browser)
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):].strip() or None
    return request.cookies.get(COOKIE_NAME)

