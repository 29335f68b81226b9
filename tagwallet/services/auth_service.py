"""
Authentication and identity related use cases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from tagwallet.core.config import Settings, get_settings
from tagwallet.core.errors import AuthError, ConflictError, ValidationError
from tagwallet.core.logging import get_logger
from tagwallet.core.security import (
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from tagwallet.repositories.sql_repository import SQLRepository

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass
class RegisterResult:
    user_id: str
    email: str


@dataclass
class LoginSuccess:
    user_id: str
    token: str


@dataclass
class AuthService:
    """Handles registration, login and bearer token verification."""

    settings: Settings = field(default_factory=get_settings)
    repository: SQLRepository = field(default_factory=SQLRepository)

    def _credentials(self, email: Optional[str], password: Optional[str]) -> tuple[str, str]:
        raw_email = (email or "").strip()
        if not raw_email or not password:
            raise ValidationError("Email and password are required")
        return raw_email, password

    # -------------------------------------- registration --------------------------------------
    def register(self, email: Optional[str], password: Optional[str]) -> RegisterResult:
        raw_email, raw_password = self._credentials(email, password)
        try:
            user = self.repository.create_user(raw_email, hash_password(raw_password))
        except IntegrityError as exc:
            logger.info("Registration rejected for %s: email exists", raw_email)
            raise ConflictError("Email already exists") from exc
        logger.info("Registered user %s (%s)", user.id, raw_email)
        return RegisterResult(user_id=user.id, email=user.email)

    # -------------------------------------- login --------------------------------------
    def login(self, email: Optional[str], password: Optional[str], now: datetime | None = None) -> LoginSuccess:
        raw_email, raw_password = self._credentials(email, password)
        user = self.repository.get_user_by_email(raw_email)
        if not user or not verify_password(raw_password, user.password_hash):
            raise AuthError(INVALID_CREDENTIALS)
        token = create_access_token(user.id, self.settings.jwt_secret, self.settings.jwt_ttl_seconds, now=now)
        return LoginSuccess(user_id=user.id, token=token)

    # -------------------------------------- tokens --------------------------------------
    def authenticate(self, token: Optional[str]) -> str:
        """Return the account id carried by a valid bearer token."""
        value = (token or "").strip()
        if not value:
            raise AuthError("Please log in")
        try:
            return decode_access_token(value, self.settings.jwt_secret)
        except TokenError as exc:
            logger.info("Rejected bearer token: %s", exc)
            raise AuthError("Invalid token") from exc
