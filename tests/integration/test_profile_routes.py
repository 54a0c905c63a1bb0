"""Integration tests for the profile endpoints."""

from __future__ import annotations

import pytest
from starlette.datastructures import UploadFile

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def token(client):
    resp = client.post(
        "/register", json={"name": "A", "email": "a@x.com", "password": "secret1"}
    )
    return resp.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


class TestGetProfile:
    def test_profile_fields(self, client, auth_headers):
        resp = client.get("/profile", headers=auth_headers)
        assert resp.status_code == 200
        user = resp.json()["user"]
        assert user["id"]
        assert user["email"] == "a@x.com"
        assert user["phone"] is None
        assert user["profile_picture"] is None
        assert "password_hash" not in user


class TestUpdateProfile:
    @pytest.mark.parametrize("method", ["PUT", "POST"])
    def test_update(self, client, auth_headers, method):
        resp = client.request(
            method,
            "/update-profile",
            json={
                "name": "Alice",
                "phone": "+1 (555) 123-4567",
                "birthday": "1990-05-17",
                "gender": "female",
                "address": "1 Main St",
            },
            headers=auth_headers,
        )
        assert resp.status_code == 200
        user = resp.json()["user"]
        assert user["name"] == "Alice"
        assert user["phone"] == "+1 (555) 123-4567"
        assert user["birthday"].startswith("1990-05-17")
        assert user["gender"] == "female"
        assert user["address"] == "1 Main St"

    def test_partial_update_keeps_other_fields(self, client, auth_headers):
        client.put(
            "/update-profile", json={"name": "A", "phone": "5551234567"}, headers=auth_headers
        )
        resp = client.put("/update-profile", json={"name": "B"}, headers=auth_headers)
        user = resp.json()["user"]
        assert user["name"] == "B"
        assert user["phone"] == "5551234567"

    def test_bad_phone(self, client, auth_headers):
        resp = client.put(
            "/update-profile", json={"name": "A", "phone": "call me"}, headers=auth_headers
        )
        assert resp.status_code == 400
        assert resp.json()["field"] == "phone"

    def test_name_required(self, client, auth_headers):
        resp = client.put("/update-profile", json={"phone": "5551234567"}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["field"] == "name"

    def test_bad_birthday(self, client, auth_headers):
        resp = client.put(
            "/update-profile", json={"name": "A", "birthday": "someday"}, headers=auth_headers
        )
        assert resp.status_code == 400

    def test_cannot_change_email(self, client, auth_headers):
        resp = client.put(
            "/update-profile", json={"name": "A", "email": "b@x.com"}, headers=auth_headers
        )
        assert resp.status_code == 200
        assert resp.json()["user"]["email"] == "a@x.com"

    def test_requires_token(self, client):
        assert client.put("/update-profile", json={"name": "A"}).status_code == 401


class TestUploadProfilePicture:
    def test_upload_image(self, client, auth_headers, settings):
        resp = client.post(
            "/upload-profile-picture",
            files={"file": ("me.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["url"].startswith("/uploads/")
        assert body["user"]["profile_picture"] == body["url"]

        served = client.get(body["url"])
        assert served.status_code == 200
        assert served.content == PNG_BYTES

        profile = client.get("/profile", headers=auth_headers).json()["user"]
        assert profile["profile_picture"] == body["url"]

    def test_non_image_rejected(self, client, auth_headers):
        resp = client.post(
            "/upload-profile-picture",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["field"] == "file"

    def test_too_large_rejected(self, client, auth_headers):
        resp = client.post(
            "/upload-profile-picture",
            files={"file": ("big.png", b"x" * 2048, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["details"] == {"max_bytes": 1024}

    def test_oversized_file_read_is_bounded(self, client, auth_headers, mocker):
        read = mocker.spy(UploadFile, "read")
        resp = client.post(
            "/upload-profile-picture",
            files={"file": ("big.png", b"x" * 8192, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["details"] == {"max_bytes": 1024}
        sizes = [
            call.kwargs.get("size", call.args[1] if len(call.args) > 1 else -1)
            for call in read.call_args_list
        ]
        assert sizes and all(size == 1025 for size in sizes)

    def test_html_filename_not_served_as_html(self, client, auth_headers):
        resp = client.post(
            "/upload-profile-picture",
            files={"file": ("x.html", b"<script>alert(1)</script>", "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        url = resp.json()["url"]
        assert url.endswith(".png")

        served = client.get(url)
        assert served.status_code == 200
        assert not served.headers["content-type"].startswith("text/html")
        assert served.headers["content-type"].startswith("image/png")

    def test_svg_rejected(self, client, auth_headers):
        resp = client.post(
            "/upload-profile-picture",
            files={"file": ("x.svg", b"<svg onload=\"alert(1)\"/>", "image/svg+xml")},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["field"] == "file"

    def test_no_file(self, client, auth_headers):
        resp = client.post("/upload-profile-picture", headers=auth_headers)
        assert resp.status_code == 400

    def test_requires_token(self, client):
        resp = client.post(
            "/upload-profile-picture", files={"file": ("me.png", PNG_BYTES, "image/png")}
        )
        assert resp.status_code == 401
