"""
client/api.py -- HTTP transport for the register and login endpoints.

Any non-2xx response becomes AuthRequestError carrying the server's "error"
string verbatim, so the UI can show it as-is. When the server sends no usable
message (network failure, non-JSON body) the error carries a generic fallback
that names the action that failed.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional

import requests

logger = logging.getLogger("taskflow.client")

LOGIN_FALLBACK = "Login failed. Please try again."
REGISTER_FALLBACK = "Registration failed. Please try again."


class AuthRequestError(Exception):
    """A register/login call failed. str(exc) is safe to display."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass(frozen=True)
class SessionUser:
    """The public user the server returns alongside a token."""

    id: int
    name: str
    email: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionUser":
        """Build from a decoded JSON object. Raises ValueError on a bad shape."""
        try:
            user_id, name, email = data["id"], data["name"], data["email"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"malformed user object: {e}") from e
        if not isinstance(user_id, int) or not isinstance(name, str) or not isinstance(email, str):
            raise ValueError("malformed user object: wrong field types")
        return cls(id=user_id, name=name, email=email)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AuthPayload:
    token: str
    user: SessionUser
    message: str = ""


class AuthApiClient:
    """Thin wrapper over POST /api/auth/register and POST /api/auth/login.

    http_session defaults to a requests.Session. Anything with a compatible
    post(url, json=..., timeout=...) works, e.g. a FastAPI TestClient.
    """

    def __init__(self, base_url: str, http_session: Any = None, timeout: float = 10) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        if http_session is None:
            http_session = requests.Session()
            # Known endpoint; a long redirect chain is never legitimate here.
            http_session.max_redirects = 3
        self._http = http_session

    def register(self, name: str, email: str, password: str) -> AuthPayload:
        body = {"name": name, "email": email, "password": password}
        return self._post("/api/auth/register", body, REGISTER_FALLBACK)

    def login(self, email: str, password: str) -> AuthPayload:
        body = {"email": email, "password": password}
        return self._post("/api/auth/login", body, LOGIN_FALLBACK)

    def _post(self, path: str, body: dict[str, str], fallback: str) -> AuthPayload:
        try:
            resp = self._http.post(f"{self.base_url}{path}", json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("POST %s failed: %s", path, e)
            raise AuthRequestError(fallback) from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.status_code >= 400:
            message = data.get("error") if isinstance(data, dict) else None
            raise AuthRequestError(message if isinstance(message, str) and message else fallback, resp.status_code)

        if not isinstance(data, dict) or not isinstance(data.get("token"), str):
            logger.warning("POST %s returned an unexpected body", path)
            raise AuthRequestError(fallback, resp.status_code)
        try:
            user = SessionUser.from_dict(data.get("user"))
        except ValueError as e:
            logger.warning("POST %s returned an unexpected user object: %s", path, e)
            raise AuthRequestError(fallback, resp.status_code) from e
        return AuthPayload(token=data["token"], user=user, message=data.get("message", ""))
