"""
Snippet Manager Backend — Account Route Tests
===============================================

What:  HTTP-level tests for /api/auth/* with a mocked auth client.
"""

import pytest

from snippet_manager.exceptions import AuthenticationError, ServiceUnavailableError
from snippet_manager.schemas.auth import AuthUser, SessionResponse

from conftest import TOKEN_A, bearer

CREDENTIALS = {"email": "dev@example.com", "password": "secret1"}


def session(**overrides):
    data = {
        "user": AuthUser(id="user-1", email="dev@example.com"),
        "access_token": "jwt-access",
        "refresh_token": "jwt-refresh",
        "expires_in": 3600,
    }
    data.update(overrides)
    return SessionResponse(**data)


class TestSignupAndLogin:

    @pytest.mark.asyncio
    async def test_signup(self, test_client, fake_auth):
        fake_auth.sign_up.return_value = session()

        response = await test_client.post("/api/auth/signup", json=CREDENTIALS)

        assert response.status_code == 200
        assert response.json()["access_token"] == "jwt-access"
        fake_auth.sign_up.assert_awaited_once_with("dev@example.com", "secret1")

    @pytest.mark.asyncio
    async def test_signup_validation(self, test_client, fake_auth):
        response = await test_client.post(
            "/api/auth/signup", json={"email": "not-an-email", "password": "123"}
        )

        assert response.status_code == 400
        messages = {e["field"]: e["message"] for e in response.json()["error"]["details"]["errors"]}
        assert messages == {
            "email": "Invalid email address",
            "password": "Password must be at least 6 characters",
        }
        fake_auth.sign_up.assert_not_called()

    @pytest.mark.asyncio
    async def test_login(self, test_client, fake_auth):
        fake_auth.sign_in.return_value = session()

        response = await test_client.post("/api/auth/login", json=CREDENTIALS)

        assert response.status_code == 200
        assert response.json()["user"] == {"id": "user-1", "email": "dev@example.com"}
        assert response.json()["token_type"] == "bearer"

    @pytest.mark.asyncio
    async def test_login_rejected(self, test_client, fake_auth):
        fake_auth.sign_in.side_effect = AuthenticationError("Invalid login credentials")

        response = await test_client.post("/api/auth/login", json=CREDENTIALS)

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid login credentials"

    @pytest.mark.asyncio
    async def test_provider_unavailable(self, test_client, fake_auth):
        fake_auth.sign_in.side_effect = ServiceUnavailableError()

        response = await test_client.post("/api/auth/login", json=CREDENTIALS)

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "SERVICE_UNAVAILABLE"


class TestLogoutAndReset:

    @pytest.mark.asyncio
    async def test_logout_requires_token(self, test_client, fake_auth):
        response = await test_client.post("/api/auth/logout")
        assert response.status_code == 401
        fake_auth.sign_out.assert_not_called()

    @pytest.mark.asyncio
    async def test_logout(self, test_client, fake_auth):
        response = await test_client.post("/api/auth/logout", headers=bearer(TOKEN_A))

        assert response.status_code == 200
        assert response.json() == {"message": "Signed out"}
        fake_auth.sign_out.assert_awaited_once_with(TOKEN_A)

    @pytest.mark.asyncio
    async def test_reset_password(self, test_client, fake_auth):
        response = await test_client.post(
            "/api/auth/reset-password", json={"email": "dev@example.com"}
        )

        assert response.status_code == 200
        assert "password reset link" in response.json()["message"]
        fake_auth.reset_password.assert_awaited_once_with(
            "dev@example.com", redirect_to="http://localhost:3000/reset-password"
        )

    @pytest.mark.asyncio
    async def test_reset_password_requires_email(self, test_client, fake_auth):
        response = await test_client.post("/api/auth/reset-password", json={})

        assert response.status_code == 400
        assert response.json()["error"]["details"]["errors"][0]["message"] == "Email is required"
