"""Integration tests for the authentication endpoints."""

from __future__ import annotations

import pytest

from repositories.indexes import ACCOUNTS_COLLECTION, SESSIONS_COLLECTION


def _register(client, email="a@x.com", password="secret1", name="A", prefix=""):
    return client.post(
        f"{prefix}/register", json={"name": name, "email": email, "password": password}
    )


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _assert_no_password(user: dict) -> None:
    assert "password" not in user
    assert "password_hash" not in user


class TestRegister:
    def test_register_returns_token_and_user(self, client):
        resp = _register(client)
        assert resp.status_code == 201
        body = resp.json()
        assert body["token"]
        assert body["user"]["email"] == "a@x.com"
        assert body["user"]["name"] == "A"
        assert body["user"]["email_verified"] is False
        _assert_no_password(body["user"])

    def test_password_stored_hashed(self, client, mock_db):
        _register(client)
        raw = mock_db[ACCOUNTS_COLLECTION].sync.find_one({"email": "a@x.com"})
        assert raw["password_hash"] != "secret1"
        assert raw["password_hash"].startswith("$argon2")

    def test_duplicate_email_conflict(self, client):
        _register(client)
        resp = _register(client, email="A@X.com", name="Other")
        assert resp.status_code == 409
        assert resp.json()["code"] == "duplicate_email"

    @pytest.mark.parametrize(
        "payload, field",
        [
            ({"email": "a@x.com", "password": "secret1"}, "name"),
            ({"name": "A", "password": "secret1"}, "email"),
            ({"name": "A", "email": "a@x.com"}, "password"),
            ({"name": "A", "email": "nope", "password": "secret1"}, "email"),
            ({"name": "A", "email": "a@x.com", "password": "abc"}, "password"),
        ],
    )
    def test_invalid_input(self, client, payload, field):
        resp = client.post("/register", json=payload)
        assert resp.status_code == 400
        assert resp.json()["code"] == "validation_error"
        assert resp.json()["field"] == field

    def test_malformed_json(self, client):
        resp = client.post(
            "/register", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400


class TestLogin:
    def test_login_and_profile(self, client):
        _register(client)
        resp = client.post("/login", json={"email": "a@x.com", "password": "secret1"})
        assert resp.status_code == 200
        token = resp.json()["token"]
        _assert_no_password(resp.json()["user"])

        profile = client.get("/profile", headers=_bearer(token))
        assert profile.status_code == 200
        assert profile.json()["user"]["email"] == "a@x.com"
        _assert_no_password(profile.json()["user"])

    def test_wrong_password_and_unknown_email_identical(self, client):
        _register(client)
        wrong = client.post("/login", json={"email": "a@x.com", "password": "wrong1"})
        unknown = client.post("/login", json={"email": "b@x.com", "password": "secret1"})
        assert wrong.status_code == unknown.status_code == 400
        assert wrong.json() == unknown.json()
        assert wrong.json()["code"] == "invalid_credentials"

    def test_login_creates_session(self, client, mock_db):
        _register(client)
        client.post("/login", json={"email": "a@x.com", "password": "secret1"})
        assert mock_db[SESSIONS_COLLECTION].sync.count_documents({}) == 2


class TestProtectedAccess:
    def test_missing_token(self, client):
        resp = client.get("/profile")
        assert resp.status_code == 401
        assert resp.json()["code"] == "authentication_error"

    def test_non_bearer_scheme(self, client):
        resp = client.get("/profile", headers={"Authorization": "Basic abc"})
        assert resp.status_code == 401

    def test_tampered_token(self, client):
        token = _register(client).json()["token"]
        header, payload, signature = token.split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
        resp = client.get("/profile", headers=_bearer(f"{header}.{payload}.{flipped}"))
        assert resp.status_code == 401

    def test_garbage_token(self, client):
        resp = client.get("/profile", headers=_bearer("garbage"))
        assert resp.status_code == 401


class TestLogout:
    def test_logout_revokes_token(self, client):
        token = _register(client).json()["token"]
        resp = client.post("/logout", headers=_bearer(token))
        assert resp.status_code == 200
        assert resp.json()["success"] is True

        assert client.get("/profile", headers=_bearer(token)).status_code == 401
        assert client.post("/logout", headers=_bearer(token)).status_code == 401

    def test_other_sessions_survive(self, client):
        first = _register(client).json()["token"]
        second = client.post(
            "/login", json={"email": "a@x.com", "password": "secret1"}
        ).json()["token"]
        client.post("/logout", headers=_bearer(first))
        assert client.get("/profile", headers=_bearer(second)).status_code == 200

    def test_logout_requires_token(self, client):
        assert client.post("/logout").status_code == 401

    def test_stateless_token_survives_logout(self, stateless_client, mock_db):
        token = _register(stateless_client).json()["token"]
        assert stateless_client.post("/logout", headers=_bearer(token)).status_code == 200
        assert stateless_client.get("/profile", headers=_bearer(token)).status_code == 200
        assert mock_db[SESSIONS_COLLECTION].sync.count_documents({}) == 0


class TestChangePassword:
    def test_change_password(self, client):
        token = _register(client).json()["token"]
        resp = client.post(
            "/change-password",
            json={"currentPassword": "secret1", "newPassword": "secret2"},
            headers=_bearer(token),
        )
        assert resp.status_code == 200
        assert resp.json()["success"] is True

        old = client.post("/login", json={"email": "a@x.com", "password": "secret1"})
        new = client.post("/login", json={"email": "a@x.com", "password": "secret2"})
        assert old.status_code == 400
        assert new.status_code == 200

    def test_wrong_current_password(self, client):
        token = _register(client).json()["token"]
        resp = client.post(
            "/change-password",
            json={"current_password": "nope", "new_password": "secret2"},
            headers=_bearer(token),
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "invalid_current_password"

    def test_short_new_password(self, client):
        token = _register(client).json()["token"]
        resp = client.post(
            "/change-password",
            json={"current_password": "secret1", "new_password": "abc"},
            headers=_bearer(token),
        )
        assert resp.status_code == 400
        assert resp.json()["field"] == "new_password"

    def test_requires_token(self, client):
        resp = client.post(
            "/change-password",
            json={"current_password": "secret1", "new_password": "secret2"},
        )
        assert resp.status_code == 401


class TestCheckEmail:
    def test_exists(self, client):
        _register(client)
        assert client.post("/check-email", json={"email": "A@x.com"}).json() == {"exists": True}
        assert client.post("/check-email", json={"email": "b@x.com"}).json() == {"exists": False}

    def test_missing_email(self, client):
        assert client.post("/check-email", json={}).status_code == 400


class TestApiPrefix:
    def test_routes_served_under_api(self, client):
        resp = _register(client, prefix="/api")
        assert resp.status_code == 201
        token = resp.json()["token"]
        assert client.get("/api/profile", headers=_bearer(token)).status_code == 200
        assert client.get("/profile", headers=_bearer(token)).status_code == 200
