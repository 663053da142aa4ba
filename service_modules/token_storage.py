"""
Token Storage - the single durable slot that holds the bearer token.

Absence of a token means logged out. Three backends share one interface:
in-memory (tests), SQL table (headless clients) and the browser cookie (web views).
"""
import logging
from typing import Optional

from sqlalchemy.orm import sessionmaker

from models_orm import StoredValueORM

logger = logging.getLogger("gymkhana")

DEFAULT_KEY = "authToken"


class TokenStorage:
    """Interface: one string key, get/set/clear."""

    key = DEFAULT_KEY

    def get(self) -> Optional[str]:
        raise NotImplementedError

    def set(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryTokenStorage(TokenStorage):
    def __init__(self, token: Optional[str] = None, key: str = DEFAULT_KEY):
        self.key = key
        self._values = {}
        if token:
            self._values[key] = token

    def get(self) -> Optional[str]:
        return self._values.get(self.key)

    def set(self, token: str) -> None:
        self._values[self.key] = token

    def clear(self) -> None:
        self._values.pop(self.key, None)


class SqlTokenStorage(TokenStorage):
    """Keeps the token in the client_storage table. Every write commits on its own."""

    def __init__(self, session_factory: sessionmaker, key: str = DEFAULT_KEY):
        self.key = key
        self._session_factory = session_factory

    def get(self) -> Optional[str]:
        db = self._session_factory()
        try:
            row = db.query(StoredValueORM).filter(StoredValueORM.key == self.key).first()
            return row.value if row else None
        finally:
            db.close()

    def set(self, token: str) -> None:
        db = self._session_factory()
        try:
            row = db.query(StoredValueORM).filter(StoredValueORM.key == self.key).first()
            if row:
                row.value = token
            else:
                db.add(StoredValueORM(key=self.key, value=token))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def clear(self) -> None:
        db = self._session_factory()
        try:
            db.query(StoredValueORM).filter(StoredValueORM.key == self.key).delete()
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


class CookieTokenStorage(TokenStorage):
    """
    Browser-side slot. Reads the request cookie; writes are buffered and
    copied onto the outgoing response by apply().
    """

    def __init__(self, request, cookie_name: str = "access_token", max_age: Optional[int] = None,
                 secure: bool = False):
        self.key = cookie_name
        self._value = request.cookies.get(cookie_name)
        self._dirty = False
        self._max_age = max_age
        self._secure = secure

    def get(self) -> Optional[str]:
        return self._value

    def set(self, token: str) -> None:
        self._value = token
        self._dirty = True

    def clear(self) -> None:
        self._value = None
        self._dirty = True

    def apply(self, response):
        if not self._dirty:
            return response
        if self._value:
            response.set_cookie(
                key=self.key,
                value=self._value,
                httponly=True,
                samesite="lax",
                secure=self._secure,
                max_age=self._max_age,
            )
        else:
            response.delete_cookie(self.key)
        return response
