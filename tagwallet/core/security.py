"""Security helpers (password hashing and bearer tokens)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from argon2 import PasswordHasher, exceptions as argon_exc
from jose import JWTError, jwt

_ph = PasswordHasher()
_PREFIX = "argon2$"
JWT_ALGORITHM = "HS256"


class TokenError(Exception):
    """Raised when a bearer token cannot be trusted."""


def hash_password(password: str) -> str:
    """Create an Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored.startswith(_PREFIX):
        return False
    hashed = stored[len(_PREFIX) :]
    try:
        return _ph.verify(hashed, password or "")
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def create_access_token(user_id: str, secret: str, ttl_seconds: int, now: datetime | None = None) -> str:
    issued = now or datetime.now(timezone.utc)
    claims = {
        "user_id": user_id,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(seconds=ttl_seconds)).timestamp()),
    }
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret: str) -> str:
    """Return the `user_id` claim of a valid, unexpired token."""
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except JWTError as exc:
        raise TokenError(str(exc)) from exc
    user_id = payload.get("user_id")
    if not user_id or not isinstance(user_id, str):
        raise TokenError("token without user_id")
    return user_id
