"""
auth/service.py -- Register and login rules.

AuthService composes the credential store and the token issuer. It is the only
place that decides whether a token is issued.

Order of operations is part of the contract:
  register: validate -> lookup -> hash -> insert -> issue
  login:    validate -> lookup -> bcrypt compare -> issue

Validation failures never touch the store. The lookup in register() is not
authoritative: two concurrent registrations can both pass it, and the store's
UNIQUE constraint rejects the second insert as DuplicateIdentity.

Unexpected store or signing failures are logged here with their traceback and
re-raised as ServerError so nothing internal reaches the caller.
"""

from __future__ import annotations

import logging

from jose import JWTError
from sqlalchemy.exc import SQLAlchemyError

from auth.errors import DuplicateIdentity, InvalidCredentials, ServerError
from auth.models import AuthResult, UserRecord
from auth.store import UserStore
from auth.tokens import burn_password_check, create_access_token, hash_password, verify_password
from auth.validators import validate_login, validate_register

logger = logging.getLogger("taskflow.auth")


class AuthService:
    def __init__(self, store: UserStore, secret_key: str | None = None) -> None:
        self.store = store
        self._secret_key = secret_key

    def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an account and return a fresh token for it.

        Raises ValidationError, DuplicateIdentity or ServerError.
        """
        data = validate_register(name, email, password)

        try:
            if self.store.get_by_email(data.email) is not None:
                raise DuplicateIdentity()

            record = UserRecord(
                name=data.name,
                email=data.email,
                password_hash=hash_password(data.password),
            )
            record.id = self.store.create_user(record)
            token = self._issue(record)
        except (SQLAlchemyError, JWTError) as exc:
            logger.exception("Registration failed for a new account")
            raise ServerError() from exc

        logger.info("Registered user id=%s", record.id)
        return AuthResult(token=token, user=record.public())

    def login(self, email: str, password: str) -> AuthResult:
        """Check credentials and return a fresh token.

        Unknown email and wrong password both raise InvalidCredentials with
        the same message. bcrypt runs in both cases so timing does not tell
        them apart either.
        """
        data = validate_login(email, password)

        try:
            record = self.store.get_by_email(data.email)
            if record is None:
                burn_password_check(data.password)
                raise InvalidCredentials()
            if not verify_password(data.password, record.password_hash):
                raise InvalidCredentials()
            token = self._issue(record)
        except (SQLAlchemyError, JWTError) as exc:
            logger.exception("Login failed with an internal error")
            raise ServerError() from exc

        logger.info("Login succeeded for user id=%s", record.id)
        return AuthResult(token=token, user=record.public())

    def _issue(self, record: UserRecord) -> str:
        return create_access_token(record.id, record.email, secret_key=self._secret_key)
