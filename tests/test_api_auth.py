"""Authentication endpoints: /api/auth/*"""
from datetime import timedelta

from status_tracker.auth import create_access_token
from status_tracker.models.user import Role
from tests.conftest import ADMIN_PASSWORD, ADMIN_USERNAME, auth_headers, login, register_viewer


class TestRegister:
    def test_register_creates_viewer(self, client):
        resp = client.post("/api/auth/register", json={"username": "bob", "password": "secret1"})
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Account created successfully"
        user = body["data"]
        assert user["username"] == "bob"
        assert user["role"] == "viewer"
        assert set(user) == {"id", "username", "role", "createdAt", "lastLogin"}

    def test_register_ignores_requested_role(self, client):
        resp = client.post("/api/auth/register", json={"username": "mallory", "password": "secret1", "role": "admin"})
        assert resp.status_code == 201
        assert resp.json()["data"]["role"] == "viewer"

    def test_duplicate_username(self, client):
        register_viewer(client, "bob", "secret1")
        resp = client.post("/api/auth/register", json={"username": "bob", "password": "secret2"})
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Username already exists", "code": "DUPLICATE_USERNAME"}

    def test_invalid_username(self, client):
        resp = client.post("/api/auth/register", json={"username": "no spaces", "password": "secret1"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"
        assert "username" in resp.json()["error"]

    def test_short_password(self, client):
        resp = client.post("/api/auth/register", json={"username": "bob", "password": "123"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"
        assert "password" in resp.json()["error"]

    def test_missing_body(self, client):
        resp = client.post("/api/auth/register")
        assert resp.status_code == 400
        assert resp.json()["success"] is False


class TestLogin:
    def test_login_returns_token_and_user(self, client, admin_user):
        resp = client.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Login successful"
        assert body["data"]["token"]
        assert body["data"]["user"]["id"] == admin_user["id"]
        assert body["data"]["user"]["role"] == "admin"
        assert body["data"]["user"]["lastLogin"] is not None
        assert "password" not in resp.text
        assert "passwordHash" not in resp.text

    def test_failures_are_byte_identical(self, client, admin_user):
        wrong_password = client.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": "nope-nope"})
        unknown_user = client.post("/api/auth/login", json={"username": "ghost", "password": ADMIN_PASSWORD})

        assert wrong_password.status_code == unknown_user.status_code == 400
        assert wrong_password.content == unknown_user.content
        assert wrong_password.json() == {
            "success": False,
            "error": "Invalid username or password",
            "code": "INVALID_CREDENTIALS",
        }

    def test_missing_fields(self, client):
        resp = client.post("/api/auth/login", json={"username": "bob"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"


class TestMe:
    def test_me(self, client, viewer_headers):
        resp = client.get("/api/auth/me", headers=viewer_headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["username"] == "viewer1"

    def test_me_requires_token(self, client):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json()["code"] == "AUTH_TOKEN_REQUIRED"

    def test_me_for_deleted_user(self, client):
        token = create_access_token(4242, "gone", Role.VIEWER)
        resp = client.get("/api/auth/me", headers=auth_headers(token))
        assert resp.status_code == 404
        assert resp.json()["code"] == "NOT_FOUND"


def test_logout(client):
    resp = client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert "data" not in resp.json()


class TestAdminAccounts:
    def test_admin_creates_admin(self, client, admin_headers):
        resp = client.post(
            "/api/auth/admin/register",
            json={"username": "carol", "password": "secret1", "role": "admin"},
            headers=admin_headers,
        )
        assert resp.status_code == 201
        assert resp.json()["data"]["role"] == "admin"
        login(client, "carol", "secret1")

    def test_admin_create_defaults_to_viewer(self, client, admin_headers):
        resp = client.post(
            "/api/auth/admin/register",
            json={"username": "dave", "password": "secret1"},
            headers=admin_headers,
        )
        assert resp.json()["data"]["role"] == "viewer"

    def test_viewer_cannot_create_accounts(self, client, viewer_headers):
        resp = client.post(
            "/api/auth/admin/register",
            json={"username": "carol", "password": "secret1", "role": "admin"},
            headers=viewer_headers,
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == "AUTH_INSUFFICIENT_PRIVILEGES"

    def test_list_users_admin_only(self, client, admin_headers, viewer_headers):
        resp = client.get("/api/auth/users", headers=admin_headers)
        assert resp.status_code == 200
        assert {u["username"] for u in resp.json()["data"]} == {ADMIN_USERNAME, "viewer1"}

        assert client.get("/api/auth/users", headers=viewer_headers).status_code == 403

    def test_list_admins_for_any_user(self, client, admin_headers, viewer_headers):
        resp = client.get("/api/auth/admins", headers=viewer_headers)
        assert resp.status_code == 200
        assert [u["username"] for u in resp.json()["data"]] == [ADMIN_USERNAME]

    def test_delete_user(self, client, admin_headers):
        user = register_viewer(client, "bob", "secret1")
        resp = client.delete(f"/api/auth/users/{user['id']}", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["message"] == "User deleted successfully"

        again = client.delete(f"/api/auth/users/{user['id']}", headers=admin_headers)
        assert again.status_code == 404

    def test_cannot_delete_self(self, client, admin_user, admin_headers):
        resp = client.delete(f"/api/auth/users/{admin_user['id']}", headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_OPERATION"


def test_token_expiry_is_reported(client, admin_user):
    token = create_access_token(admin_user["id"], ADMIN_USERNAME, Role.ADMIN, expires_delta=timedelta(seconds=-5))
    resp = client.get("/api/auth/me", headers=auth_headers(token))
    assert resp.status_code == 401
    assert resp.json()["code"] == "AUTH_TOKEN_EXPIRED"
