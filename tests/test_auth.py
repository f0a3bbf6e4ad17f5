"""
Auth Tests
==========

Registration, login, bearer token checks, profile updates and admin management.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import jwt
import requests

from conftest import bearer


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

def test_first_user_becomes_admin(register_user):
    first, _ = register_user("first")
    second, _ = register_user("second")

    assert first["isAdmin"] is True
    assert second["isAdmin"] is False


def test_register_never_returns_password(client):
    response = client.post("/api/auth/register", json={
        "email": "Writer@Quillpress.io",
        "username": "writer",
        "password": "secret123",
        "firstName": "Ada",
    })
    assert response.status_code == 201

    user = response.get_json()["data"]["user"]
    assert user["email"] == "writer@quillpress.io"
    assert user["firstName"] == "Ada"
    assert "password" not in user
    assert "passwordHash" not in user


def test_register_duplicate_email_rejected(client, register_user):
    register_user("taken", email="same@quillpress.io")

    response = client.post("/api/auth/register", json={
        "email": "same@quillpress.io", "username": "another", "password": "secret123",
    })
    assert response.status_code == 400
    assert response.get_json()["error"] == "User with this email already exists"


def test_register_duplicate_username_rejected(client, register_user):
    register_user("taken")

    response = client.post("/api/auth/register", json={
        "email": "other@quillpress.io", "username": "taken", "password": "secret123",
    })
    assert response.status_code == 400
    assert response.get_json()["error"] == "User with this username already exists"


def test_register_short_password_rejected(client):
    response = client.post("/api/auth/register", json={
        "email": "a@quillpress.io", "username": "abc", "password": "123",
    })
    assert response.status_code == 400
    assert response.get_json()["details"][0]["field"] == "password"


# ---------------------------------------------------------------------------
# Login and tokens
# ---------------------------------------------------------------------------

def test_login_returns_working_token(client, register_user):
    register_user("login", email="login@quillpress.io", password="hunter22")

    response = client.post("/api/auth/login", json={
        "email": "login@quillpress.io", "password": "hunter22",
    })
    assert response.status_code == 200
    token = response.get_json()["data"]["token"]

    me = client.get("/api/auth/me", headers=bearer(token))
    assert me.status_code == 200
    assert me.get_json()["data"]["user"]["username"] == "login"


def test_login_wrong_password(client, register_user):
    register_user("login", email="login@quillpress.io")

    response = client.post("/api/auth/login", json={
        "email": "login@quillpress.io", "password": "wrong-password",
    })
    assert response.status_code == 401
    assert response.get_json()["error"] == "Invalid credentials"


def test_signup_and_login_are_logged_as_user_actions(client):
    with patch("quillpress.modules.auth.routes.LoggingService.log_user_action") as log_action:
        registered = client.post("/api/auth/register", json={
            "email": "audit@quillpress.io", "username": "audit", "password": "hunter22",
        }).get_json()["data"]["user"]
        client.post("/api/auth/login", json={"email": "audit@quillpress.io", "password": "hunter22"})
        client.post("/api/auth/login", json={"email": "audit@quillpress.io", "password": "nope"})

    actions = [(c.args[1], c.kwargs["user_id"]) for c in log_action.call_args_list]
    assert actions == [("signup", registered["id"]), ("login", registered["id"])]


def test_me_requires_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.get_json()["error"] == "Access token required"


def test_me_rejects_garbage_token(client):
    response = client.get("/api/auth/me", headers=bearer("not.a.jwt"))
    assert response.status_code == 401
    assert response.get_json()["error"] == "Invalid token"


def test_me_rejects_expired_token(app, client, admin):
    user, _ = admin
    expired = jwt.encode(
        {"userId": user["id"], "email": user["email"],
         "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )

    response = client.get("/api/auth/me", headers=bearer(expired))
    assert response.status_code == 401
    assert response.get_json()["error"] == "Invalid token"


def test_me_rejects_token_for_unknown_user(app, client):
    token = jwt.encode(
        {"userId": "ghost", "email": "ghost@quillpress.io",
         "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )

    response = client.get("/api/auth/me", headers=bearer(token))
    assert response.status_code == 401
    assert response.get_json()["error"] == "User not found"


# ---------------------------------------------------------------------------
# reCAPTCHA
# ---------------------------------------------------------------------------

def test_captcha_failure_blocks_registration(app, client):
    app.config["RECAPTCHA_SECRET_KEY"] = "recaptcha-secret"
    fake_response = MagicMock()
    fake_response.json.return_value = {"success": False, "error-codes": ["invalid-input-response"]}

    with patch("quillpress.modules.auth.recaptcha.requests.post", return_value=fake_response) as post:
        response = client.post("/api/auth/register", json={
            "email": "bot@quillpress.io", "username": "robot",
            "password": "secret123", "recaptchaToken": "bad-token",
        })

    assert response.status_code == 400
    assert response.get_json()["code"] == "CAPTCHA_FAILED"
    assert post.call_args.kwargs["data"]["response"] == "bad-token"


def test_captcha_network_error_fails_closed(app, client):
    app.config["RECAPTCHA_SECRET_KEY"] = "recaptcha-secret"

    with patch("quillpress.modules.auth.recaptcha.requests.post",
               side_effect=requests.ConnectionError("offline")):
        response = client.post("/api/auth/login", json={
            "email": "x@quillpress.io", "password": "secret123", "recaptchaToken": "tok",
        })

    assert response.status_code == 400
    assert response.get_json()["code"] == "CAPTCHA_FAILED"


def test_captcha_skipped_without_secret(client):
    with patch("quillpress.modules.auth.recaptcha.requests.post") as post:
        response = client.post("/api/auth/register", json={
            "email": "human@quillpress.io", "username": "human",
            "password": "secret123", "recaptchaToken": "tok",
        })

    assert response.status_code == 201
    post.assert_not_called()


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

def test_update_profile_and_clear_with_empty_string(client, admin_headers):
    response = client.put("/api/auth/profile", json={
        "avatar": "https://cdn.quillpress.io/me.png", "bio": "Writes things",
    }, headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()["data"]["user"]["bio"] == "Writes things"

    response = client.put("/api/auth/profile", json={"avatar": ""}, headers=admin_headers)
    user = response.get_json()["data"]["user"]
    assert user["avatar"] is None
    assert user["bio"] == "Writes things"


def test_update_profile_rejects_bad_avatar(client, admin_headers):
    response = client.put("/api/auth/profile", json={"avatar": "ftp://nope"}, headers=admin_headers)
    assert response.status_code == 400

    response = client.put("/api/auth/profile", json={"avatar": "https://"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.get_json()["details"][0]["field"] == "avatar"


# ---------------------------------------------------------------------------
# Admin management
# ---------------------------------------------------------------------------

def test_users_list_requires_admin(client, reader):
    _, reader_headers = reader
    response = client.get("/api/auth/users", headers=reader_headers)
    assert response.status_code == 403


def test_users_list_newest_first(client, admin_headers, reader):
    response = client.get("/api/auth/users", headers=admin_headers)
    usernames = [u["username"] for u in response.get_json()["data"]["users"]]
    assert usernames == ["reader", "admin"]


def test_grant_admin(client, admin_headers, reader):
    reader_user, reader_headers = reader

    response = client.patch(f"/api/auth/users/{reader_user['id']}/admin",
                            json={"isAdmin": True}, headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()["data"]["user"]["isAdmin"] is True

    assert client.get("/api/auth/users", headers=reader_headers).status_code == 200


def test_cannot_revoke_own_admin(client, admin):
    user, headers = admin
    response = client.patch(f"/api/auth/users/{user['id']}/admin",
                            json={"isAdmin": False}, headers=headers)
    assert response.status_code == 400
    assert response.get_json()["error"] == "Cannot remove admin status from yourself"


def test_admin_flag_must_be_boolean(client, admin_headers, reader):
    reader_user, _ = reader
    response = client.patch(f"/api/auth/users/{reader_user['id']}/admin",
                            json={"isAdmin": "yes"}, headers=admin_headers)
    assert response.status_code == 400


def test_admin_flag_unknown_user(client, admin_headers):
    response = client.patch("/api/auth/users/nobody/admin",
                            json={"isAdmin": True}, headers=admin_headers)
    assert response.status_code == 404
