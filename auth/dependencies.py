"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Only one auth method exists: an `Authorization: Bearer <token>` header
carrying a session JWT issued by POST /api/auth/login or /register.

get_current_claims() raises AuthError (rendered as a 401 envelope by the
handler in api/main.py) when the header is missing or the token does not
verify. It does NOT touch the database -- routes that need the live account
call SessionService.current_user() with the returned claims.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import SessionClaims
from auth.service import SessionService
from core.errors import AuthError


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_claims(request: Request) -> SessionClaims:
    """Require a valid session token.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(claims: SessionClaims = Depends(get_current_claims)): ...
    """
    token = _bearer_token(request)
    if token is None:
        raise AuthError("Authentication required")
    sessions: SessionService = request.app.state.sessions
    return sessions.verify(token)
