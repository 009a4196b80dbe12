"""
api/routes/auth.py -- Authentication REST endpoints.

Routes:
  POST /api/auth/register  -- create an account; returns {user, token}
  POST /api/auth/login     -- password login; returns {user, token}
  GET  /api/auth/me        -- current user profile (requires auth)

Security:
  register and login are rate-limited per client IP (Settings.auth_rate_limit).
  Cache-Control: no-store on every response that carries a token.
  Login returns one generic message for unknown email and wrong password;
  the timing equalization lives in auth/tokens.authenticate_user().
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import AuthData, Envelope, LoginRequest, MeData, RegisterRequest, UserOut
from api.responses import ok
from auth.dependencies import get_current_claims
from auth.models import SessionClaims
from auth.service import SessionService
from core.config import get_settings

_settings = get_settings()

# Auth policy:
# - POST /api/auth/register: public
# - POST /api/auth/login:    public
# - GET  /api/auth/me:       requires a valid Bearer token (get_current_claims)
router = APIRouter()


def _token_response(data: AuthData, status_code: int) -> JSONResponse:
    resp = ok(data, status_code=status_code)
    resp.headers["Cache-Control"] = "no-store"
    return resp


@limiter.limit(_settings.auth_rate_limit)
@router.post("/auth/register", response_model=Envelope, status_code=201)
def register(request: Request, body: RegisterRequest) -> JSONResponse:
    """Create an account and sign the new user in.

    Fails with 400 when email or password is missing, the password is
    shorter than 6 characters, or the email is already registered.
    """
    sessions: SessionService = request.app.state.sessions
    user, token = sessions.register(body.email, body.password, body.name)
    return _token_response(AuthData(user=UserOut.from_user(user), token=token), 201)


@limiter.limit(_settings.auth_rate_limit)
@router.post("/auth/login", response_model=Envelope)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password and return a session token."""
    sessions: SessionService = request.app.state.sessions
    user, token = sessions.login(body.email, body.password)
    return _token_response(AuthData(user=UserOut.from_user(user), token=token), 200)


@router.get("/auth/me", response_model=Envelope)
def me(request: Request, claims: SessionClaims = Depends(get_current_claims)) -> JSONResponse:
    """Return the live account behind the token; 404 if it no longer exists."""
    sessions: SessionService = request.app.state.sessions
    user = sessions.current_user(claims)
    return ok(MeData(user=UserOut.from_user(user)))
