"""
API request and response models for TaskFlow REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py, which own the
internal domain representation. Route handlers map between the two.

Request fields are plain strings on purpose: the field rules (lengths,
email syntax, password strength) live in auth/validators.py and run inside
AuthService, so the HTTP layer and any other caller get the same messages.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/auth/register."""

    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    email: str
    password: str


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str


class AuthResponse(BaseModel):
    """Response for a successful register (201) or login (200)."""

    model_config = ConfigDict(frozen=True)

    message: str
    token: str
    user: UserResponse


class ErrorResponse(BaseModel):
    """Error body returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: str
    field: Optional[str] = None


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    message: str = "TaskFlow API is running"
