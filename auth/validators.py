"""
auth/validators.py -- Field rules for register and login input.

Pydantic v2 models. Normalization (trim, lowercase) runs in mode="before"
validators so the EmailStr syntax check (email-validator) sees the
normalized value: " Jo@Ex.com " validates and comes out as "jo@ex.com".

AuthService calls validate_register() / validate_login(), which convert a
pydantic ValidationError into auth.errors.ValidationError carrying the first
failing field and its message.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from auth.errors import ValidationError

NAME_MIN, NAME_MAX = 2, 50
PASSWORD_MIN, PASSWORD_MAX = 6, 100

_INVALID_EMAIL_MESSAGE = "Invalid email format"
_PASSWORD_RULE_MESSAGE = "Password must contain at least one uppercase letter, one lowercase letter, and one number"

REQUIRED_MESSAGES = {
    "name": "Name is required",
    "email": "Email is required",
    "password": "Password is required",
}


def _normalize_email(value: object) -> object:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class RegisterInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    email: EmailStr
    password: str

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if len(v) < NAME_MIN:
            raise ValueError(f"Name must be at least {NAME_MIN} characters")
        if len(v) > NAME_MAX:
            raise ValueError(f"Name must be less than {NAME_MAX} characters")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if len(v) < PASSWORD_MIN:
            raise ValueError(f"Password must be at least {PASSWORD_MIN} characters")
        if len(v) > PASSWORD_MAX:
            raise ValueError(f"Password must be less than {PASSWORD_MAX} characters")
        if not (re.search(r"[a-z]", v) and re.search(r"[A-Z]", v) and re.search(r"\d", v)):
            raise ValueError(_PASSWORD_RULE_MESSAGE)
        return v


class LoginInput(BaseModel):
    """Login only checks shape; password strength was enforced at registration."""

    model_config = ConfigDict(frozen=True)

    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not v:
            raise ValueError(REQUIRED_MESSAGES["password"])
        return v


def validate_register(name: object, email: object, password: object) -> RegisterInput:
    try:
        return RegisterInput(name=name, email=email, password=password)
    except PydanticValidationError as exc:
        raise _first_error(exc) from exc


def validate_login(email: object, password: object) -> LoginInput:
    try:
        return LoginInput(email=email, password=password)
    except PydanticValidationError as exc:
        raise _first_error(exc) from exc


def _first_error(exc: PydanticValidationError) -> ValidationError:
    """Map the first pydantic error to a field-level ValidationError.

    Custom rules raise ValueError, which pydantic reports with a
    "Value error, " prefix -- stripped so the message reads as written above.
    EmailStr rejections carry email-validator's reason in ctx and are
    reported as "Invalid email format". Missing or non-string values get the
    "<Field> is required" message.
    """
    err = exc.errors()[0]
    field = str(err["loc"][0]) if err.get("loc") else "input"
    if field == "email" and err["type"] == "value_error":
        message = _INVALID_EMAIL_MESSAGE
    elif err["type"] == "value_error":
        message = str(err["ctx"]["error"]) if "ctx" in err else err["msg"].removeprefix("Value error, ")
    else:
        message = REQUIRED_MESSAGES.get(field, err["msg"])
    return ValidationError(field, message)
