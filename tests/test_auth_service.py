"""Unit tests for auth/service.py -- register/login rules.

Store failures are injected with MagicMock so the ServerError path and the
"no store access on invalid input" rule can be checked directly.
"""

from unittest.mock import MagicMock

import pytest
from jose import jwt
from sqlalchemy.exc import OperationalError

from auth.errors import DuplicateIdentity, InvalidCredentials, ServerError, ValidationError
from auth.models import UserRecord
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TOKEN_TTL_SECONDS, decode_access_token, verify_password

VALID_NAME = "Jo Lee"
VALID_EMAIL = "jo@ex.com"
VALID_PASSWORD = "Abcdef1"


class TestRegister:
    def test_returns_token_and_public_user(self, auth_service: AuthService):
        result = auth_service.register(VALID_NAME, VALID_EMAIL, VALID_PASSWORD)
        assert result.user.name == VALID_NAME
        assert result.user.email == VALID_EMAIL
        claims = decode_access_token(result.token)
        assert claims.user_id == result.user.id
        assert claims.email == VALID_EMAIL
        assert claims.expires_at - claims.issued_at == TOKEN_TTL_SECONDS

    def test_stores_normalized_email_and_hash(self, auth_service: AuthService, user_store: UserStore):
        auth_service.register("Jo Lee", "Jo@Ex.com ", "Abcdef1")
        stored = user_store.get_by_email("jo@ex.com")
        assert stored is not None
        assert stored.password_hash != "Abcdef1"
        assert verify_password("Abcdef1", stored.password_hash)

    def test_duplicate_is_case_insensitive(self, auth_service: AuthService):
        auth_service.register(VALID_NAME, "jo@ex.com", VALID_PASSWORD)
        with pytest.raises(DuplicateIdentity) as exc_info:
            auth_service.register("Other", "JO@EX.COM", "Xyzabc9")
        assert exc_info.value.message == "User already exists"
        assert exc_info.value.status_code == 400

    def test_duplicate_creates_no_record(self, auth_service: AuthService, user_store: UserStore):
        auth_service.register(VALID_NAME, VALID_EMAIL, VALID_PASSWORD)
        with pytest.raises(DuplicateIdentity):
            auth_service.register(VALID_NAME, VALID_EMAIL, VALID_PASSWORD)
        assert user_store.count_users() == 1

    def test_invalid_input_never_touches_store(self):
        store = MagicMock()
        service = AuthService(store)
        with pytest.raises(ValidationError) as exc_info:
            service.register(VALID_NAME, VALID_EMAIL, "abcdef1")
        assert exc_info.value.field == "password"
        assert store.method_calls == []

    def test_lost_race_surfaces_as_duplicate(self, user_store: UserStore):
        """The pre-check misses a concurrent insert; the UNIQUE constraint catches it."""
        user_store.create_user(UserRecord(name="First", email=VALID_EMAIL, password_hash="x"))
        racing = MagicMock(wraps=user_store)
        racing.get_by_email.return_value = None
        with pytest.raises(DuplicateIdentity):
            AuthService(racing).register(VALID_NAME, VALID_EMAIL, VALID_PASSWORD)
        assert user_store.count_users() == 1

    def test_store_failure_becomes_server_error(self):
        store = MagicMock()
        store.get_by_email.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        with pytest.raises(ServerError) as exc_info:
            AuthService(store).register(VALID_NAME, VALID_EMAIL, VALID_PASSWORD)
        assert exc_info.value.message == "Server error"
        assert "db down" not in str(exc_info.value)


class TestLogin:
    def test_register_then_login_same_user(self, auth_service: AuthService):
        registered = auth_service.register(VALID_NAME, VALID_EMAIL, VALID_PASSWORD)
        logged_in = auth_service.login(VALID_EMAIL, VALID_PASSWORD)
        assert logged_in.user.id == registered.user.id
        assert decode_access_token(logged_in.token).user_id == registered.user.id

    def test_login_email_case_insensitive(self, auth_service: AuthService):
        auth_service.register("Jo Lee", "Jo@Ex.com ", "Abcdef1")
        result = auth_service.login("JO@EX.COM", "Abcdef1")
        assert result.user.email == "jo@ex.com"

    def test_wrong_password_and_unknown_email_identical(self, auth_service: AuthService):
        auth_service.register(VALID_NAME, VALID_EMAIL, VALID_PASSWORD)
        with pytest.raises(InvalidCredentials) as wrong_pw:
            auth_service.login(VALID_EMAIL, "Wrong123")
        with pytest.raises(InvalidCredentials) as unknown:
            auth_service.login("nobody@ex.com", VALID_PASSWORD)
        assert wrong_pw.value.message == unknown.value.message == "Invalid credentials"
        assert wrong_pw.value.status_code == unknown.value.status_code == 401

    def test_login_issues_fresh_token_shape(self, auth_service: AuthService):
        auth_service.register(VALID_NAME, VALID_EMAIL, VALID_PASSWORD)
        token = auth_service.login(VALID_EMAIL, VALID_PASSWORD).token
        claims = jwt.get_unverified_claims(token)
        assert set(claims) == {"userId", "email", "iat", "exp"}
        assert claims["exp"] - claims["iat"] == TOKEN_TTL_SECONDS

    def test_login_does_not_write(self, auth_service: AuthService, user_store: UserStore):
        auth_service.register(VALID_NAME, VALID_EMAIL, VALID_PASSWORD)
        before = user_store.get_by_email(VALID_EMAIL)
        auth_service.login(VALID_EMAIL, VALID_PASSWORD)
        assert user_store.get_by_email(VALID_EMAIL) == before
        assert user_store.count_users() == 1

    def test_bad_email_format_is_validation_error(self):
        store = MagicMock()
        with pytest.raises(ValidationError):
            AuthService(store).login("not-an-email", VALID_PASSWORD)
        assert store.method_calls == []

    def test_store_failure_becomes_server_error(self):
        store = MagicMock()
        store.get_by_email.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        with pytest.raises(ServerError):
            AuthService(store).login(VALID_EMAIL, VALID_PASSWORD)
