"""
tests/test_auth.py -- Integration tests for /auth/register, /auth/login and /auth/me.

Coverage:
  - Login happy path: token, expiry, identity, Cache-Control: no-store
  - Login failures: unknown email and wrong password share one 401 response
  - Missing credentials: 400 MISSING_FIELDS
  - Registration: 201, duplicate email 409, malformed email 400
  - /auth/me echoes the token identity
  - authenticate_user() and password hashing edge cases
"""

from __future__ import annotations

import pytest

from auth.models import User
from auth.tokens import authenticate_user, decode_access_token, hash_password, verify_password
from conftest import TEST_EMAIL, TEST_PASSWORD, ApiContext
from core.config import get_settings


class TestLogin:
    def test_login_success(self, api_client: ApiContext) -> None:
        resp = api_client.client.post("/auth/login", json={"email": TEST_EMAIL, "password": TEST_PASSWORD})
        assert resp.status_code == 200, resp.text
        assert resp.headers["cache-control"] == "no-store"

        data = resp.json()["data"]
        assert data["tokenType"] == "bearer"
        assert data["expiresIn"] == get_settings().token_expire_seconds
        assert data["user"] == {"id": api_client.user_id, "email": TEST_EMAIL}

        claims = decode_access_token(data["token"])
        assert claims["id"] == api_client.user_id
        assert claims["email"] == TEST_EMAIL
        assert claims["sub"] == TEST_EMAIL

    def test_issued_token_opens_protected_routes(self, api_client: ApiContext) -> None:
        token = api_client.client.post(
            "/auth/login", json={"email": TEST_EMAIL, "password": TEST_PASSWORD}
        ).json()["data"]["token"]
        resp = api_client.client.get("/pets", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200

    @pytest.mark.parametrize(
        "email,password",
        [
            (TEST_EMAIL, "wrong-password"),
            ("nobody@petstore.com", TEST_PASSWORD),
        ],
    )
    def test_bad_credentials_are_indistinguishable(self, api_client: ApiContext, email: str, password: str) -> None:
        """Unknown email and wrong password must produce the same response."""
        resp = api_client.client.post("/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 401
        assert resp.json() == {
            "success": False,
            "error": {"message": "Invalid email or password", "code": "INVALID_CREDENTIALS"},
        }

    @pytest.mark.parametrize(
        "body",
        [{}, {"email": TEST_EMAIL}, {"password": TEST_PASSWORD}, {"email": "", "password": ""}],
    )
    def test_missing_fields(self, api_client: ApiContext, body: dict) -> None:
        resp = api_client.client.post("/auth/login", json=body)
        assert resp.status_code == 400
        assert resp.json()["error"] == {"message": "Email and password are required", "code": "MISSING_FIELDS"}

    @pytest.mark.parametrize("path", ["/auth/login", "/auth/register"])
    def test_no_body(self, api_client: ApiContext, path: str) -> None:
        resp = api_client.client.post(path)
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "MISSING_FIELDS"


class TestRegister:
    def test_register_then_login(self, api_client: ApiContext) -> None:
        resp = api_client.client.post("/auth/register", json={"email": "new@petstore.com", "password": "s3cret-pw"})
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        assert data["email"] == "new@petstore.com"
        assert data["createdAt"]
        assert "password" not in data

        stored = api_client.user_store.get_by_id(data["id"])
        assert stored.hashed_password != "s3cret-pw"

        resp = api_client.client.post("/auth/login", json={"email": "new@petstore.com", "password": "s3cret-pw"})
        assert resp.status_code == 200

    def test_duplicate_email(self, api_client: ApiContext) -> None:
        resp = api_client.client.post("/auth/register", json={"email": TEST_EMAIL, "password": "another"})
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "EMAIL_IN_USE"
        assert api_client.user_store.count_users() == 1

    def test_missing_password(self, api_client: ApiContext) -> None:
        resp = api_client.client.post("/auth/register", json={"email": "x@petstore.com"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "MISSING_FIELDS"

    def test_blank_email(self, api_client: ApiContext) -> None:
        resp = api_client.client.post("/auth/register", json={"email": "  ", "password": "pw"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "MISSING_FIELDS"

    def test_malformed_email(self, api_client: ApiContext) -> None:
        resp = api_client.client.post("/auth/register", json={"email": "not-an-email", "password": "pw"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


class TestMe:
    def test_me_returns_identity(self, api_client: ApiContext) -> None:
        resp = api_client.client.get("/auth/me", headers=api_client.headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "data": {"id": api_client.user_id, "email": TEST_EMAIL}}

    def test_me_requires_token(self, api_client: ApiContext) -> None:
        resp = api_client.client.get("/auth/me")
        assert resp.status_code == 401


class TestPasswordHelpers:
    def test_authenticate_user(self, stores) -> None:
        user_store, _ = stores
        user_store.create_user(User(email="a@petstore.com", hashed_password=hash_password("pw-a")))

        assert authenticate_user(user_store, "a@petstore.com", "pw-a").email == "a@petstore.com"
        assert authenticate_user(user_store, "a@petstore.com", "pw-b") is None
        assert authenticate_user(user_store, "b@petstore.com", "pw-a") is None

    def test_hash_is_salted(self) -> None:
        assert hash_password("same") != hash_password("same")

    def test_malformed_stored_hash_fails_closed(self) -> None:
        assert verify_password("anything", "not-a-bcrypt-hash") is False
