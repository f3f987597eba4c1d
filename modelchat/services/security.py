"""Password hashing (bcrypt) and bearer token issue/verify (PyJWT)."""

from __future__ import annotations

import base64
import datetime as _dt
import hashlib
from dataclasses import dataclass
from typing import Optional

import bcrypt
import jwt

from ..config import Settings


def _prehash(password: str) -> bytes:
    """Fixed-length digest so passwords past bcrypt's 72-byte input limit still count in full."""
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of checking a bearer token: the user id, or why it was rejected."""

    user_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.user_id is not None


def create_access_token(user_id: str, settings: Settings, now: Optional[_dt.datetime] = None) -> str:
    issued_at = now or _dt.datetime.now(_dt.timezone.utc)
    expires_at = issued_at + _dt.timedelta(minutes=settings.access_token_expire_minutes)
    claims = {"sub": user_id, "iat": issued_at, "exp": expires_at}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str, settings: Settings) -> TokenVerification:
    try:
        claims = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        return TokenVerification(error="Token expired")
    except jwt.InvalidTokenError as exc:
        return TokenVerification(error=f"Invalid token: {exc}")

    return TokenVerification(user_id=str(claims["sub"]))
