# tests for auth router — signup, login, me, refresh, profile
# tests for journaling_app/routers/auth.py

import pytest

from tests.conftest import USER_ID, OTHER_USER_ID
from journaling_app.services.auth_service import create_access_token, create_refresh_token, decode_token
from journaling_app.dependencies import get_current_user
from journaling_app.main import app


class TestSignup:
    """user registration endpoint"""

    async def test_signup_success(self, client, mock_db):
        resp = await client.post("/auth/signup", json={
            "email": "New.Writer@Email.com",
            "password": "securepass123",
            "name": "New Writer",
        })
        assert resp.status_code == 201
        data = resp.json()
        assert "accessToken" in data
        assert "refreshToken" in data
        assert data["token_type"] == "bearer"

        created = mock_db.users.inserted[0]
        assert created["email"] == "new.writer@email.com"
        assert created["hashed_password"] != "securepass123"
        assert decode_token(data["accessToken"])["sub"] == created["id"]

    async def test_signup_default_name_from_email(self, client, mock_db):
        resp = await client.post("/auth/signup", json={
            "email": "quiet@email.com",
            "password": "securepass123",
        })
        assert resp.status_code == 201
        assert mock_db.users.inserted[0]["name"] == "quiet"

    async def test_signup_duplicate_email(self, client):
        resp = await client.post("/auth/signup", json={
            "email": "sam.taylor@email.com",
            "password": "securepass123",
        })
        assert resp.status_code == 409

    async def test_signup_invalid_email(self, client):
        resp = await client.post("/auth/signup", json={
            "email": "not-an-email",
            "password": "securepass123",
        })
        assert resp.status_code == 422

    async def test_signup_short_password(self, client):
        resp = await client.post("/auth/signup", json={
            "email": "short@email.com",
            "password": "abc",
        })
        assert resp.status_code == 422


class TestLogin:
    """login endpoint"""

    async def test_login_success(self, client):
        resp = await client.post("/auth/login", json={
            "email": "sam.taylor@email.com",
            "password": "journal123",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert "accessToken" in data
        assert "refreshToken" in data

    async def test_login_email_case_insensitive(self, client):
        resp = await client.post("/auth/login", json={
            "email": "Sam.Taylor@Email.com",
            "password": "journal123",
        })
        assert resp.status_code == 200

    async def test_login_wrong_password(self, client):
        resp = await client.post("/auth/login", json={
            "email": "sam.taylor@email.com",
            "password": "wrong_password",
        })
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid email or password"

    async def test_login_nonexistent_email(self, client):
        resp = await client.post("/auth/login", json={
            "email": "nobody@email.com",
            "password": "journal123",
        })
        assert resp.status_code == 401


class TestMe:
    """get current user profile"""

    async def test_get_me(self, auth_client):
        resp = await auth_client.get("/auth/me")
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == USER_ID
        assert data["name"] == "Sam Taylor"
        assert data["settings"]["theme"] == "dark"
        assert "hashed_password" not in data

    async def test_get_me_with_bearer_token(self, client, user_token):
        resp = await client.get("/auth/me", headers={"Authorization": f"Bearer {user_token}"})
        assert resp.status_code == 200
        assert resp.json()["email"] == "sam.taylor@email.com"

    async def test_get_me_refresh_token_rejected(self, client):
        refresh = create_refresh_token({"sub": USER_ID})
        resp = await client.get("/auth/me", headers={"Authorization": f"Bearer {refresh}"})
        assert resp.status_code == 401

    async def test_get_me_unknown_user(self, client):
        token = create_access_token({"sub": "doesnotexist"})
        resp = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    async def test_get_me_no_auth(self, client):
        # clear any auth overrides
        app.dependency_overrides.pop(get_current_user, None)
        resp = await client.get("/auth/me")
        assert resp.status_code in (401, 403)


class TestRefresh:
    """token refresh endpoint"""

    async def test_refresh_success(self, client):
        refresh = create_refresh_token({"sub": OTHER_USER_ID})
        resp = await client.post("/auth/refresh", json={
            "refreshToken": refresh,
        })
        assert resp.status_code == 200
        data = resp.json()
        assert decode_token(data["accessToken"])["sub"] == OTHER_USER_ID

    async def test_refresh_invalid_token(self, client):
        resp = await client.post("/auth/refresh", json={
            "refreshToken": "invalid.token.here",
        })
        assert resp.status_code == 401

    async def test_refresh_with_access_token_fails(self, client):
        # access tokens should not work for refresh
        access = create_access_token({"sub": USER_ID})
        resp = await client.post("/auth/refresh", json={
            "refreshToken": access,
        })
        assert resp.status_code == 401


class TestUpdateProfile:
    """profile update endpoint"""

    async def test_update_name(self, auth_client, mock_db):
        resp = await auth_client.patch("/auth/profile", json={
            "name": "Samantha Taylor",
        })
        assert resp.status_code == 200
        assert resp.json()["name"] == "Samantha Taylor"
        stored = await mock_db.users.find_one({"id": USER_ID})
        assert stored["name"] == "Samantha Taylor"

    async def test_update_settings(self, auth_client, mock_db):
        resp = await auth_client.patch("/auth/profile", json={
            "settings": {"theme": "light", "notifications": False, "processingType": "transcribe-only"},
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["settings"]["notifications"] is False
        assert data["settings"]["processingType"] == "transcribe-only"

    async def test_update_empty_body(self, auth_client):
        resp = await auth_client.patch("/auth/profile", json={})
        assert resp.status_code == 200
        assert resp.json()["name"] == "Sam Taylor"

    async def test_update_profile_no_auth(self, client):
        resp = await client.patch("/auth/profile", json={"name": "x"})
        assert resp.status_code in (401, 403)
