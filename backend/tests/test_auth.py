"""Tests for login, registration and token handling."""

from datetime import timedelta

from fastapi import status

from wms.core.security import create_access_token
from tests.conftest import DEFAULT_PASSWORD, headers_for


class TestLogin:
    """Test POST /api/auth/login."""

    async def test_login_returns_user_and_token(self, client, make_user):
        """Valid credentials return the user with role slugs and a usable token."""
        await make_user("alice", ["warehouse-staff"], email="alice@example.com")

        response = await client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Login successful"
        assert body["data"]["user"]["username"] == "alice"
        assert body["data"]["user"]["role_names"] == ["warehouse-staff"]
        assert "password_hash" not in body["data"]["user"]

        me = await client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {body['data']['token']}"}
        )
        assert me.status_code == status.HTTP_200_OK
        assert me.json()["data"]["email"] == "alice@example.com"
        assert me.json()["data"]["last_login_at"] is not None

    async def test_wrong_password(self, client, make_user):
        await make_user("bob", email="bob@example.com")
        response = await client.post("/api/auth/login", json={"email": "bob@example.com", "password": "nope-nope"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"success": False, "data": None, "message": "Invalid credentials"}

    async def test_unknown_email(self, client):
        response = await client.post(
            "/api/auth/login", json={"email": "ghost@example.com", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_inactive_user_cannot_login(self, client, make_user):
        await make_user("sleepy", email="sleepy@example.com", is_active=False)
        response = await client.post(
            "/api/auth/login", json={"email": "sleepy@example.com", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_malformed_body_is_a_validation_error(self, client):
        """Schema failures are reported as 400 with per-field errors."""
        response = await client.post("/api/auth/login", json={"email": "not-an-email"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        fields = {e["field"] for e in body["error"]}
        assert {"email", "password"} <= fields


class TestRegister:
    """Test POST /api/auth/register."""

    async def test_register_creates_user_without_roles(self, client):
        response = await client.post("/api/auth/register", json={
            "username": "newbie",
            "email": "newbie@example.com",
            "password": "secret1",
            "first_name": "New",
            "last_name": "Bie",
        })
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["user"]["role_names"] == []
        assert data["user"]["email_verified"] is False
        assert data["token"]

        login = await client.post("/api/auth/login", json={"email": "newbie@example.com", "password": "secret1"})
        assert login.status_code == status.HTTP_200_OK

    async def test_duplicate_email(self, client, make_user):
        await make_user("taken", email="taken@example.com")
        response = await client.post("/api/auth/register", json={
            "username": "other",
            "email": "taken@example.com",
            "password": "secret1",
            "first_name": "O",
            "last_name": "T",
        })
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["message"] == "A user with this email already exists"

    async def test_duplicate_username(self, client, make_user):
        await make_user("taken")
        response = await client.post("/api/auth/register", json={
            "username": "taken",
            "email": "fresh@example.com",
            "password": "secret1",
            "first_name": "O",
            "last_name": "T",
        })
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["message"] == "A user with this username already exists"


class TestTokenValidation:
    """Test the bearer-token dependency through GET /api/auth/me."""

    async def test_missing_token(self, client):
        response = await client.get("/api/auth/me")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Authorization token required"

    async def test_garbage_token(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Invalid or expired token"

    async def test_expired_token(self, client, make_user):
        user = await make_user("expired")
        token = create_access_token(
            user_id=user.id, email=user.email, username=user.username, role_names=[],
            expires_delta=timedelta(minutes=-1),
        )
        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_token_of_deactivated_user(self, client, make_user):
        user = await make_user("gone", is_active=False)
        response = await client.get("/api/auth/me", headers=headers_for(user))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "User not found or inactive"

    async def test_roles_come_from_the_database(self, client, make_user):
        """Role claims inside the token do not grant access by themselves."""
        user = await make_user("pretender")
        response = await client.get("/api/system-logs/", headers=headers_for(user, ["super-admin"]))
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "Insufficient permissions"


class TestProfile:
    """Test the /api/profile endpoints."""

    async def test_update_profile(self, client, viewer_headers):
        response = await client.patch("/api/profile/", headers=viewer_headers, json={"first_name": "Vera"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["first_name"] == "Vera"

    async def test_change_password(self, client, make_user):
        user = await make_user("changer", email="changer@example.com")
        headers = headers_for(user)

        wrong = await client.post("/api/profile/password", headers=headers, json={
            "current_password": "wrong-password", "new_password": "BrandNew123",
        })
        assert wrong.status_code == status.HTTP_400_BAD_REQUEST
        assert wrong.json()["message"] == "Current password is incorrect"

        ok = await client.post("/api/profile/password", headers=headers, json={
            "current_password": DEFAULT_PASSWORD, "new_password": "BrandNew123",
        })
        assert ok.status_code == status.HTTP_200_OK

        login = await client.post("/api/auth/login", json={"email": "changer@example.com", "password": "BrandNew123"})
        assert login.status_code == status.HTTP_200_OK
