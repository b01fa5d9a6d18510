import base64
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlmodel import SQLModel

from app.application.ports.notifier import NotificationKind
from app.database import engine
from app.dependencies import get_notifier
from app.main import app
from conftest import FakeNotifier

SIGNUP = {
    "fullName": "Una Tester",
    "email": "U@Test.com",
    "companyName": "Acme",
    "phoneNumber": "+15550001111",
}


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def client(notifier):
    SQLModel.metadata.drop_all(engine)
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def signup(client, notifier, **overrides):
    resp = client.post("/api/auth/signup", json={**SIGNUP, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"], notifier.intents[-1].secret


def test_signup_returns_account_without_password(client, notifier):
    resp = client.post("/api/auth/signup", json=SIGNUP)
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["email"] == "u@test.com"
    assert body["data"]["role"] == "user"
    assert body["data"]["planType"] == "trial"
    assert "password" not in body["data"] and "password_hash" not in body["data"]
    [intent] = notifier.intents
    assert intent.kind is NotificationKind.WELCOME
    assert len(intent.secret) == 6 and intent.secret.isdigit()


def test_signup_duplicate_email(client, notifier):
    signup(client, notifier)
    resp = client.post("/api/auth/signup", json={**SIGNUP, "email": "u@test.com"})
    assert resp.status_code == 409


def test_signup_validation_error_lists_fields(client):
    resp = client.post("/api/auth/signup", json={"email": "not-an-email"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Validation failed"
    assert "email" in body["details"] and "fullName" in body["details"]


def test_signin_sets_http_only_cookie(client, notifier):
    account, temp_password = signup(client, notifier)
    resp = client.post("/api/auth/signin", json={"email": "u@test.com", "password": temp_password})
    assert resp.status_code == 200
    body = resp.json()
    assert body["token"]
    assert body["data"]["id"] == account["id"]
    cookie = resp.headers["set-cookie"]
    assert cookie.startswith("access_token=")
    assert "HttpOnly" in cookie
    assert "Max-Age=3600" in cookie


def test_signin_status_codes(client, notifier):
    signup(client, notifier)
    assert client.post("/api/auth/signin", json={"email": "ghost@test.com", "password": "password1"}).status_code == 404
    assert client.post("/api/auth/signin", json={"email": "u@test.com", "password": "wrongpw"}).status_code == 401
    assert client.post("/api/auth/signin", json={"email": "u@test.com", "password": "short"}).status_code == 400


def test_forgot_verify_reset_flow(client, notifier):
    _, temp_password = signup(client, notifier)

    assert client.post("/api/auth/forgot-password", json={"email": "ghost@test.com"}).status_code == 404
    resp = client.post("/api/auth/forgot-password", json={"email": "u@test.com"})
    assert resp.status_code == 200
    assert resp.json()["message"] == "OTP sent to email"
    code = notifier.intents[-1].secret

    reset = {"email": "u@test.com", "otp": code, "newPassword": "newpass1"}
    # Reset before verification is refused
    assert client.post("/api/auth/reset-password", json=reset).status_code == 400

    assert client.post("/api/auth/verify-otp", json={"email": "u@test.com", "otp": code}).status_code == 200
    again = client.post("/api/auth/verify-otp", json={"email": "u@test.com", "otp": code})
    assert again.status_code == 400
    assert again.json()["message"] == "Invalid or expired OTP"

    assert client.post("/api/auth/reset-password", json=reset).status_code == 200
    assert notifier.intents[-1].kind is NotificationKind.PASSWORD_RESET_CONFIRMATION

    assert client.post("/api/auth/signin", json={"email": "u@test.com", "password": "newpass1"}).status_code == 200
    assert client.post("/api/auth/signin", json={"email": "u@test.com", "password": temp_password}).status_code == 401


def test_verify_otp_validation(client):
    resp = client.post("/api/auth/verify-otp", json={"email": "u@test.com", "otp": "12ab56"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation failed"


def test_profile_routes_require_authentication(client):
    resp = client.get("/api/users/me")
    assert resp.status_code == 401
    assert resp.json()["message"] == "You have no access to this route"
    assert client.get("/api/users/me", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_profile_routes_with_token(client, notifier):
    _, temp_password = signup(client, notifier)
    token = client.post("/api/auth/signin", json={"email": "u@test.com", "password": temp_password}).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    assert client.get("/api/users/me", headers=headers).json()["data"]["email"] == "u@test.com"

    resp = client.patch("/api/users/profile", json={"companyName": "Globex", "timeZone": "UTC"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["companyName"] == "Globex"
    assert resp.json()["data"]["fullName"] == "Una Tester"

    assert client.patch("/api/users/profile", json={}, headers=headers).status_code == 400

    resp = client.patch("/api/users/profile-photo", json={"profilePhoto": "photos/a.png"}, headers=headers)
    assert resp.json()["data"]["profilePhoto"] == "photos/a.png"
    resp = client.patch("/api/users/profile-photo", json={"profilePhoto": None}, headers=headers)
    assert resp.json()["data"]["profilePhoto"] is None


def test_cookie_authentication_and_signout(client, notifier):
    _, temp_password = signup(client, notifier)
    client.post("/api/auth/signin", json={"email": "u@test.com", "password": temp_password})
    assert client.get("/api/users/me").status_code == 200
    client.post("/api/auth/signout")
    assert client.get("/api/users/me").status_code == 401


def test_change_password(client, notifier):
    _, temp_password = signup(client, notifier)
    token = client.post("/api/auth/signin", json={"email": "u@test.com", "password": temp_password}).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}
    bad = {"currentPassword": "wrongpw", "newPassword": "newpass1"}
    assert client.post("/api/auth/change-password", json=bad, headers=headers).status_code == 400
    good = {"currentPassword": temp_password, "newPassword": "newpass1"}
    assert client.post("/api/auth/change-password", json=good, headers=headers).status_code == 200
    assert client.post("/api/auth/signin", json={"email": "u@test.com", "password": "newpass1"}).status_code == 200


def test_upload_photo_multipart(client):
    buf = io.BytesIO()
    Image.new("RGB", (3, 3), (0, 120, 0)).save(buf, format="PNG")
    resp = client.post(
        "/api/upload/photo",
        files={"file": ("tiny.png", buf.getvalue(), "image/png")},
        data={"folder": "avatars"},
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["path"].startswith("avatars/")
    assert data["format"] == "PNG"


def test_upload_photo_requires_file(client):
    resp = client.post("/api/upload/photo", data={"folder": "avatars"})
    assert resp.status_code == 400
    assert resp.json()["details"] == "file is required"


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_upload_photo_oversized_dimensions_is_rejected(client, monkeypatch):
    buf = io.BytesIO()
    Image.new("1", (40, 40)).save(buf, format="PNG")
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    resp = client.post("/api/upload/photo", json={"file": base64.b64encode(buf.getvalue()).decode()})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
