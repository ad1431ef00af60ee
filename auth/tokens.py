"""
auth/tokens.py -- JWT issuance/verification and password hashing.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       userId, email, iat and exp. The lifetime is fixed at one hour
       (TOKEN_TTL_SECONDS). Verification returns None on any failure --
       route layer turns that into a 401.

       decode_access_token() is the ONLY way the server may trust a token.
       The client's decode-only expiry check (client/session.py) is a UX
       shortcut and must never be used for an authorization decision.

  Expiry boundary: a token is rejected when exp <= now. jose on its own only
       rejects exp < now, so the boundary is checked again here.

  Passwords: bcrypt directly (no passlib wrapper). The _DUMMY_HASH constant
       enables timing equalization in AuthService.login() so response time
       does not reveal whether an email is registered.

  SECRET_KEY: sourced from core.config.get_settings(). Every function takes
       an optional secret_key override so tests can sign with a different key.

Layer rule: no imports from api/ or client/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
import time

import bcrypt
from jose import JWTError, jwt

from auth.models import TokenClaims
from core.config import get_settings

logger = logging.getLogger("taskflow.auth")

_settings = get_settings()

_ALGORITHM = "HS256"

TOKEN_TTL_SECONDS = 60 * 60

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    bcrypt only looks at the first 72 bytes. The validators cap passwords at
    100 characters; callers must not rely on anything past byte 72.
    """
    salt = bcrypt.gensalt(rounds=_settings.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8")[:72], salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8")[:72], hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash in the DB.
        return False


# Computed once at module load so the first failed login is not measurably
# slower than later ones.
_DUMMY_HASH: str = hash_password("taskflow_timing_dummy")


def burn_password_check(plain: str) -> None:
    """Run one bcrypt comparison against a throwaway hash and discard the result."""
    verify_password(plain, _DUMMY_HASH)


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(
    user_id: int,
    email: str,
    *,
    secret_key: str | None = None,
    issued_at: int | None = None,
) -> str:
    """Encode a signed JWT for the given identity.

    Args:
        user_id:    Numeric user ID stored in the DB.
        email:      Normalized email of the user.
        secret_key: Signing key. Defaults to Settings.secret_key.
        issued_at:  UNIX seconds to stamp as iat. Defaults to now. exp is
                    always issued_at + TOKEN_TTL_SECONDS, so the same inputs
                    always produce the same token.
    """
    iat = int(time.time()) if issued_at is None else int(issued_at)
    payload = {
        "userId": user_id,
        "email": email,
        "iat": iat,
        "exp": iat + TOKEN_TTL_SECONDS,
    }
    return jwt.encode(payload, secret_key or _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(
    token: str,
    *,
    secret_key: str | None = None,
    now: float | None = None,
) -> TokenClaims | None:
    """Verify a JWT and return its claims, or None on any failure.

    Rejects a bad signature, any claim mutation, missing or mistyped claims,
    and tokens whose exp is at or before now.
    """
    try:
        payload = jwt.decode(token, secret_key or _settings.secret_key, algorithms=[_ALGORITHM])
    except JWTError as exc:
        logger.debug("Rejected access token: %s", exc)
        return None

    user_id = payload.get("userId")
    email = payload.get("email")
    iat = payload.get("iat")
    exp = payload.get("exp")
    if not isinstance(user_id, int) or not isinstance(email, str):
        return None
    if not isinstance(iat, int) or not isinstance(exp, int):
        return None

    current = time.time() if now is None else now
    if exp <= current:
        return None
    return TokenClaims(user_id=user_id, email=email, issued_at=iat, expires_at=exp)
