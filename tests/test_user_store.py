"""Unit tests for auth/store.py -- UserStore persistence."""

import pytest

from auth.errors import DuplicateIdentity
from auth.models import UserRecord
from auth.store import UserStore


def _record(email="jo@ex.com", name="Jo Lee"):
    return UserRecord(name=name, email=email, password_hash="$2b$04$placeholder")


def test_create_assigns_id_and_created_at(user_store: UserStore):
    uid = user_store.create_user(_record())
    assert isinstance(uid, int)
    stored = user_store.get_by_id(uid)
    assert stored is not None
    assert stored.email == "jo@ex.com"
    assert stored.name == "Jo Lee"
    assert stored.created_at


def test_get_by_email(user_store: UserStore):
    uid = user_store.create_user(_record())
    assert user_store.get_by_email("jo@ex.com").id == uid
    assert user_store.get_by_email("nobody@ex.com") is None


def test_get_by_id_missing(user_store: UserStore):
    assert user_store.get_by_id(9999) is None


def test_ids_are_unique(user_store: UserStore):
    a = user_store.create_user(_record("a@ex.com"))
    b = user_store.create_user(_record("b@ex.com"))
    assert a != b
    assert user_store.count_users() == 2


def test_duplicate_email_raises_duplicate_identity(user_store: UserStore):
    user_store.create_user(_record())
    with pytest.raises(DuplicateIdentity) as exc_info:
        user_store.create_user(_record(name="Someone Else"))
    assert exc_info.value.message == "User already exists"
    assert user_store.count_users() == 1


def test_public_projection_drops_hash(user_store: UserStore):
    uid = user_store.create_user(_record())
    public = user_store.get_by_id(uid).public()
    assert public.id == uid
    assert not hasattr(public, "password_hash")
