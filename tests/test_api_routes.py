"""
tests/test_api_routes.py -- Integration tests for the /api/auth routes.

These tests exercise the full stack: FastAPI routing -> exception handlers ->
AuthService -> UserStore -> response serialization.

Fixtures used (from conftest.py):
  - api_client: (client, store) -- TestClient over an empty users table.
"""

from __future__ import annotations

import time
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TOKEN_TTL_SECONDS, create_access_token, decode_access_token

_REGISTER = {"name": "Jo Lee", "email": "Jo@Ex.com ", "password": "Abcdef1"}


def _register(client: TestClient, **overrides):
    return client.post("/api/auth/register", json={**_REGISTER, **overrides})


class TestRegisterRoute:
    def test_register_201(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, store = api_client
        resp = _register(client)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["message"] == "User registered successfully"
        assert data["user"]["email"] == "jo@ex.com"
        assert data["user"]["name"] == "Jo Lee"
        assert set(data["user"]) == {"id", "name", "email"}
        assert decode_access_token(data["token"]).user_id == data["user"]["id"]
        assert resp.headers["Cache-Control"] == "no-store"
        assert store.get_by_email("jo@ex.com") is not None

    def test_duplicate_400(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, _store = api_client
        assert _register(client).status_code == 201
        resp = _register(client, email="JO@EX.COM")
        assert resp.status_code == 400
        assert resp.json() == {"error": "User already exists"}

    def test_weak_password_400_without_insert(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, store = api_client
        resp = _register(client, password="abcdef1")
        assert resp.status_code == 400
        body = resp.json()
        assert body["field"] == "password"
        assert "uppercase" in body["error"]
        assert store.count_users() == 0

    def test_missing_field_400(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, _store = api_client
        resp = client.post("/api/auth/register", json={"email": "jo@ex.com", "password": "Abcdef1"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Name is required", "field": "name"}

    def test_store_failure_500_generic(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, _store = api_client
        broken = MagicMock()
        broken.get_by_email.side_effect = OperationalError("SELECT", {}, Exception("disk I/O error"))
        original = client.app.state.auth_service
        client.app.state.auth_service = AuthService(broken)
        try:
            resp = _register(client)
        finally:
            client.app.state.auth_service = original
        assert resp.status_code == 500
        assert resp.json() == {"error": "Server error"}
        assert "disk" not in resp.text


class TestLoginRoute:
    def test_login_200(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, _store = api_client
        uid = _register(client).json()["user"]["id"]
        resp = client.post("/api/auth/login", json={"email": "JO@EX.COM", "password": "Abcdef1"})
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["message"] == "Login successful"
        assert data["user"] == {"id": uid, "name": "Jo Lee", "email": "jo@ex.com"}
        claims = decode_access_token(data["token"])
        assert claims.expires_at - claims.issued_at == TOKEN_TTL_SECONDS

    def test_wrong_password_and_unknown_email_identical(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, _store = api_client
        _register(client)
        wrong_pw = client.post("/api/auth/login", json={"email": "jo@ex.com", "password": "Wrong123"})
        unknown = client.post("/api/auth/login", json={"email": "nobody@ex.com", "password": "Abcdef1"})
        assert wrong_pw.status_code == unknown.status_code == 401
        assert wrong_pw.json() == unknown.json() == {"error": "Invalid credentials"}

    def test_bad_email_400(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, _store = api_client
        resp = client.post("/api/auth/login", json={"email": "jo", "password": "Abcdef1"})
        assert resp.status_code == 400
        assert resp.json()["field"] == "email"


class TestMeRoute:
    def test_me_with_valid_token(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, _store = api_client
        data = _register(client).json()
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert resp.status_code == 200
        assert resp.json() == data["user"]

    def test_me_without_token(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, _store = api_client
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert "error" in resp.json()

    def test_me_with_expired_token(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, _store = api_client
        user = _register(client).json()["user"]
        expired = create_access_token(user["id"], user["email"], issued_at=int(time.time()) - 2 * TOKEN_TTL_SECONDS)
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
        assert resp.status_code == 401

    def test_me_with_foreign_signature(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, _store = api_client
        user = _register(client).json()["user"]
        forged = create_access_token(user["id"], user["email"], secret_key="f" * 64)
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {forged}"})
        assert resp.status_code == 401

    def test_me_for_deleted_account(self, api_client: tuple[TestClient, UserStore]) -> None:
        client, _store = api_client
        orphan = create_access_token(9999, "ghost@ex.com")
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {orphan}"})
        assert resp.status_code == 401
