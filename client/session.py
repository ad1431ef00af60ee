"""
client/session.py -- Client session state machine.

States: loading -> (authenticated | unauthenticated), then login/register
move to authenticated and logout moves to unauthenticated.

SessionManager is used as a scope:

    with SessionManager(api, storage, navigate) as session:
        session.login("jo@ex.com", "Abcdef1")
        session.is_authenticated   # True

Entering the scope restores any persisted session; reading state or calling a
transition outside the scope raises SessionScopeError. Components that need
the session get it passed in explicitly (see client/views.py).

Expiry pre-check:
  token_expiry() reads the exp claim WITHOUT verifying the signature. It only
  decides whether a stored session is worth restoring. It must never be used
  to authorize anything -- the server verifies every token itself.

Concurrency: last write wins. Each transition builds a new immutable
SessionState and swaps it in with a single assignment; overlapping
login/logout calls are not ordered beyond that.
"""

import json
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from jose import JWTError, jwt

from client.api import AuthPayload, SessionUser
from client.storage import TOKEN_KEY, USER_KEY

logger = logging.getLogger("taskflow.client")

DASHBOARD_PATH = "/dashboard"
LOGIN_PATH = "/auth/login"


class SessionScopeError(RuntimeError):
    """Session accessed outside an open SessionManager scope."""


class SessionStatus(str, Enum):
    loading = "loading"
    unauthenticated = "unauthenticated"
    authenticated = "authenticated"


@dataclass(frozen=True)
class SessionState:
    user: Optional[SessionUser] = None
    loading: bool = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def status(self) -> SessionStatus:
        if self.loading:
            return SessionStatus.loading
        if self.user is not None:
            return SessionStatus.authenticated
        return SessionStatus.unauthenticated


def token_expiry(token: str) -> Optional[int]:
    """Return the token's exp claim without verifying it, or None if unreadable."""
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    return int(exp)


def _noop_navigate(path: str) -> None:
    pass


class SessionManager:
    def __init__(
        self,
        api,
        storage,
        navigate: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._api = api
        self._storage = storage
        self._navigate = navigate or _noop_navigate
        self._clock = clock
        self._state = SessionState()
        self._depth = 0

    # ------------------------------------------------------------------
    # Scope
    # ------------------------------------------------------------------

    def __enter__(self) -> "SessionManager":
        # Only the outermost block restores; the scope opens once that succeeded.
        if self._depth == 0:
            self._load()
        self._depth += 1
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._depth -= 1

    def _require_scope(self) -> None:
        if self._depth == 0:
            raise SessionScopeError("SessionManager must be used inside its 'with' block")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        self._require_scope()
        return self._state

    @property
    def user(self) -> Optional[SessionUser]:
        return self.state.user

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def is_authenticated(self) -> bool:
        return self.state.is_authenticated

    @property
    def token(self) -> Optional[str]:
        self._require_scope()
        return self._storage.get_item(TOKEN_KEY) if self._state.is_authenticated else None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def initialize(self) -> SessionState:
        """Restore the persisted session if it is complete and not expired.

        Anything else (missing entry, corrupt JSON, unreadable or expired
        token) clears both entries. loading is False afterwards in every case.
        """
        self._require_scope()
        return self._load()

    def _load(self) -> SessionState:
        self._state = SessionState(user=None, loading=True)

        user = self._restore()
        if user is None:
            self._clear_storage()
        self._state = SessionState(user=user, loading=False)
        return self._state

    def login(self, email: str, password: str) -> SessionUser:
        """Log in and navigate to the dashboard.

        Raises AuthRequestError with the server's message on failure; the
        current state is left as it was.
        """
        self._require_scope()
        payload = self._api.login(email, password)
        return self._establish(payload)

    def register(self, name: str, email: str, password: str) -> SessionUser:
        """Create an account, log it in and navigate to the dashboard."""
        self._require_scope()
        payload = self._api.register(name, email, password)
        return self._establish(payload)

    def logout(self) -> None:
        self._require_scope()
        self._clear_storage()
        self._state = SessionState(user=None, loading=False)
        self._navigate(LOGIN_PATH)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _establish(self, payload: AuthPayload) -> SessionUser:
        self._storage.set_item(TOKEN_KEY, payload.token)
        self._storage.set_item(USER_KEY, json.dumps(payload.user.to_dict()))
        self._state = SessionState(user=payload.user, loading=False)
        self._navigate(DASHBOARD_PATH)
        return payload.user

    def _restore(self) -> Optional[SessionUser]:
        token = self._storage.get_item(TOKEN_KEY)
        raw_user = self._storage.get_item(USER_KEY)
        if not token or not raw_user:
            return None

        exp = token_expiry(token)
        if exp is None or exp <= self._clock():
            logger.info("Discarding stored session: token expired or unreadable")
            return None

        try:
            return SessionUser.from_dict(json.loads(raw_user))
        except ValueError:
            # json.JSONDecodeError is a ValueError too.
            logger.info("Discarding stored session: user entry is corrupt")
            return None

    def _clear_storage(self) -> None:
        self._storage.remove_item(TOKEN_KEY)
        self._storage.remove_item(USER_KEY)
