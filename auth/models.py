"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, almost no logic). Dataclasses own
domain shape; the store, service and routes do the work.

Layer rule: no imports from api/ or client/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class UserRecord:
    """A persisted user row.

    email is always stored trimmed and lowercased; the UNIQUE constraint on
    users.email is what keeps it unique.

    password_hash is a bcrypt string. It never leaves auth/ -- anything sent
    to a caller goes through public() first.
    """

    name: str
    email: str
    password_hash: str
    id: int | None = None
    created_at: str | None = None

    def public(self) -> PublicUser:
        return PublicUser(id=self.id, name=self.name, email=self.email)


@dataclass(frozen=True)
class PublicUser:
    """UserRecord projection that is safe to return to clients."""

    id: int
    name: str
    email: str


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims recovered from an access token.

    issued_at / expires_at are integer UNIX seconds. expires_at is always
    issued_at + TOKEN_TTL_SECONDS for tokens issued by this service.
    """

    user_id: int
    email: str
    issued_at: int
    expires_at: int


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful register or login."""

    token: str
    user: PublicUser
