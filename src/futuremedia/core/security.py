"""Password hashing and access-token helpers."""
from __future__ import annotations

from datetime import timedelta

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from jose import JWTError, jwt

from futuremedia.core.settings import settings
from futuremedia.db.time import utcnow

_ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Return an argon2 hash of the provided password."""
    return _ph.hash(password)


def verify_password(hashed_password: str | None, password: str) -> bool:
    """Check a password against a stored hash."""
    if not hashed_password:
        return False
    try:
        return _ph.verify(hashed_password, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Issue a signed JWT whose subject is the user id."""
    expire = utcnow() + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {"sub": user_id, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str | None:
    """Return the subject of a valid token, or None."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) else None
