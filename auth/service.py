"""
auth/service.py -- Session issuer: registration, login and token verification.

SessionService owns the account rules; UserStore owns the SQL and
auth/tokens.py owns the cryptography. The store is injected so tests can run
against an in-memory database.

Error contract (see core/errors.py):
  register -- ValidationError (missing fields, short password), ConflictError (email taken)
  login    -- ValidationError (missing fields), AuthError (bad credentials)
  verify   -- AuthError (bad signature, expired, missing claims)
  current_user -- NotFoundError (account removed after the token was issued)

Login failures deliberately share one message so a caller cannot tell an
unknown email from a wrong password.
"""

from __future__ import annotations

import dataclasses
import logging

from sqlalchemy.exc import IntegrityError

from auth.models import SessionClaims, User
from auth.store import UserStore
from auth.tokens import authenticate_user, create_access_token, decode_access_token, hash_password
from core.errors import AuthError, ConflictError, NotFoundError, ValidationError

logger = logging.getLogger("carcatalog.auth")

MIN_PASSWORD_LENGTH = 6

_MSG_CREDENTIALS_REQUIRED = "Email and password are required"
_MSG_BAD_CREDENTIALS = "Invalid email or password"
_MSG_BAD_TOKEN = "Invalid or expired token"


class SessionService:
    def __init__(self, store: UserStore, expire_seconds: int = 0) -> None:
        self.store = store
        self.expire_seconds = expire_seconds

    def register(self, email: str | None, password: str | None, name: str | None = None) -> tuple[User, str]:
        """Create an account and return (user, token) for it."""
        if not email or not password:
            raise ValidationError(_MSG_CREDENTIALS_REQUIRED)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if self.store.get_by_email(email) is not None:
            raise ConflictError("A user with this email already exists")

        new_user = User(email=email, hashed_password=hash_password(password), name=name or None)
        try:
            user_id = self.store.create_user(new_user)
        except IntegrityError as exc:
            # Concurrent registration won the race past the pre-check
            raise ConflictError("A user with this email already exists") from exc

        user = self.store.get_by_id(user_id)
        logger.info("Registered user id=%s", user_id)
        return _public(user), self._issue(user)

    def login(self, email: str | None, password: str | None) -> tuple[User, str]:
        if not email or not password:
            raise ValidationError(_MSG_CREDENTIALS_REQUIRED)
        user = authenticate_user(self.store, email, password)
        if user is None:
            logger.info("Rejected login attempt")
            raise AuthError(_MSG_BAD_CREDENTIALS)
        return _public(user), self._issue(user)

    def verify(self, token: str) -> SessionClaims:
        payload = decode_access_token(token)
        if payload is None:
            raise AuthError(_MSG_BAD_TOKEN)
        return SessionClaims(user_id=payload["user_id"], email=payload["email"])

    def current_user(self, claims: SessionClaims) -> User:
        """Re-resolve the live account behind a verified token.

        A valid signature only proves the account existed at issue time.
        """
        user = self.store.get_by_id(claims.user_id)
        if user is None:
            raise NotFoundError("User not found")
        return _public(user)

    def _issue(self, user: User) -> str:
        return create_access_token(user.id, user.email, expire_seconds=self.expire_seconds)


def _public(user: User) -> User:
    return dataclasses.replace(user, hashed_password=None)
