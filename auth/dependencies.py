"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Protected routes read the token from the Authorization: Bearer header and run
it through decode_access_token(), which verifies the signature and expiry.
Never authorize on claims read without verification.

try_get_current_user() is the soft variant (returns None on failure).
get_current_user() wraps it and raises HTTP 401 if unauthenticated.

Layer rule: no imports from api/ or client/.
  auth/dependencies.py may import from fastapi (for HTTPException/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.models import PublicUser
from auth.store import UserStore
from auth.tokens import decode_access_token


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def try_get_current_user(request: Request) -> PublicUser | None:
    """Authenticate the request via its Bearer token.

    Returns the PublicUser on success, None on any failure. Never raises.
    """
    token = _bearer_token(request)
    if not token:
        return None

    claims = decode_access_token(token)
    if claims is None:
        return None

    # The account must still exist; the token alone is not enough.
    user_store: UserStore = request.app.state.user_store
    record = user_store.get_by_id(claims.user_id)
    if record is None or record.email != claims.email:
        return None
    return record.public()


def get_current_user(request: Request) -> PublicUser:
    """Require authentication. Raises HTTP 401 if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: PublicUser = Depends(get_current_user)): ...
    """
    user = try_get_current_user(request)
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user
