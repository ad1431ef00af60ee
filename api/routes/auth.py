"""
api/routes/auth.py -- Registration and login REST endpoints.

Routes:
  POST /api/auth/register  -- create account; 201 with token + user
  POST /api/auth/login     -- password login; 200 with token + user
  GET  /api/auth/me        -- current user (Bearer token required)

Failures are raised as auth.errors.AuthError subclasses by AuthService and
turned into {"error": ...} responses by the handler in api/main.py.

Security:
  POST /login is rate-limited per IP (LOGIN_RATE_LIMIT, default 10/minute).
  Login timing equalization lives in AuthService.login() -- use it, never inline.
  Cache-Control: no-store on every response that carries a token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from auth.dependencies import get_current_user
from auth.models import AuthResult, PublicUser
from auth.service import AuthService
from core.config import get_settings

# Auth policy:
# - POST /api/auth/register: public
# - POST /api/auth/login:    public, rate-limited
# - GET  /api/auth/me:       requires a verified Bearer token (get_current_user)
router = APIRouter()


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> JSONResponse:
    """Create an account and log it in immediately."""
    service: AuthService = request.app.state.auth_service
    result = service.register(body.name, body.email, body.password)
    return _auth_response(result, "User registered successfully", status_code=201)


@limiter.limit(get_settings().login_rate_limit)  # must be ABOVE @router to preserve FastAPI introspection
@router.post("/auth/login", response_model=AuthResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password.

    Wrong email and wrong password produce the same 401 body.
    """
    service: AuthService = request.app.state.auth_service
    result = service.login(body.email, body.password)
    return _auth_response(result, "Login successful", status_code=200)


@router.get("/auth/me", response_model=UserResponse)
def me(current_user: PublicUser = Depends(get_current_user)) -> UserResponse:
    """Return the account behind the Bearer token."""
    return UserResponse(id=current_user.id, name=current_user.name, email=current_user.email)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _auth_response(result: AuthResult, message: str, status_code: int) -> JSONResponse:
    body = AuthResponse(
        message=message,
        token=result.token,
        user=UserResponse(id=result.user.id, name=result.user.name, email=result.user.email),
    )
    resp = JSONResponse(status_code=status_code, content=body.model_dump())
    resp.headers["Cache-Control"] = "no-store"
    return resp
