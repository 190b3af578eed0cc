"""
Snippet Manager Backend — Hosted Auth Provider Client
=======================================================

What:  Thin async client for the hosted auth REST API (`/auth/v1`):
       verify a bearer token, sign up, sign in, sign out, password reset.
Why:   Identity and session issuance are delegated to the hosted backend.
       The app never stores passwords or mints tokens itself.
How:   One `httpx.AsyncClient` per process, created from Settings in
       `create_app()` and closed at shutdown. Every request carries the
       public `apikey` header; user-scoped calls add the caller's bearer.

Error translation:
    transport failure / provider 5xx  → ServiceUnavailableError (503)
    rejected credentials (login)      → AuthenticationError (401)
    rejected sign-up / reset input    → ValidationError (400)
    `get_user` never raises for a bad token: it returns None.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from snippet_manager.exceptions import (
    AuthenticationError,
    ServiceUnavailableError,
    ValidationError,
)
from snippet_manager.schemas.auth import AuthUser, SessionResponse

logger = logging.getLogger(__name__)


def _provider_message(response: httpx.Response, default: str) -> str:
    """Pick the human-readable message out of a provider error body."""
    try:
        body = response.json()
    except ValueError:
        return default
    if not isinstance(body, dict):
        return default
    for key in ("error_description", "msg", "message"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return default


def _session_from(body: Dict[str, Any]) -> SessionResponse:
    # With email confirmation enabled, sign-up returns the bare user object
    user = body.get("user") if "access_token" in body else body
    user = user or {}
    return SessionResponse(
        user=AuthUser(id=str(user.get("id", "")), email=user.get("email")),
        access_token=body.get("access_token"),
        refresh_token=body.get("refresh_token"),
        expires_in=body.get("expires_in"),
        token_type=body.get("token_type") or "bearer",
    )


class HostedAuthClient:
    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"apikey": anon_key},
            timeout=httpx.Timeout(timeout, connect=min(3.0, timeout)),
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            logger.warning("Auth provider unreachable (%s %s): %s", method, path, type(exc).__name__)
            raise ServiceUnavailableError(
                "Authentication service unavailable. Please try again later.",
                context={"path": path, "error_type": type(exc).__name__},
            ) from exc

        if response.status_code >= 500:
            logger.warning("Auth provider error %d on %s %s", response.status_code, method, path)
            raise ServiceUnavailableError(
                "Authentication service unavailable. Please try again later.",
                context={"path": path, "status": response.status_code},
            )
        return response

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        """
        Resolve a bearer token to its user.

        Returns None when the provider rejects the token (invalid, expired,
        revoked). Raises ServiceUnavailableError when the provider cannot
        be asked.
        """
        response = await self._request(
            "GET", "/user", headers={"Authorization": f"Bearer {access_token}"}
        )
        if response.status_code != 200:
            return None
        body = response.json()
        user_id = body.get("id") if isinstance(body, dict) else None
        if not user_id:
            return None
        return AuthUser(id=str(user_id), email=body.get("email"))

    async def sign_up(self, email: str, password: str) -> SessionResponse:
        response = await self._request(
            "POST", "/signup", json={"email": email, "password": password}
        )
        if response.status_code >= 400:
            raise ValidationError(_provider_message(response, "Sign up failed"))
        return _session_from(response.json())

    async def sign_in(self, email: str, password: str) -> SessionResponse:
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code >= 400:
            # The provider's reason (unknown user vs wrong password) is not echoed
            raise AuthenticationError("Invalid login credentials")
        return _session_from(response.json())

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind `access_token`. An already-invalid token is not an error."""
        response = await self._request(
            "POST", "/logout", headers={"Authorization": f"Bearer {access_token}"}
        )
        if response.status_code >= 400:
            logger.info("Sign-out rejected by provider with %d", response.status_code)

    async def reset_password(self, email: str, redirect_to: str) -> None:
        response = await self._request(
            "POST",
            "/recover",
            params={"redirect_to": redirect_to},
            json={"email": email},
        )
        if response.status_code >= 400:
            raise ValidationError(_provider_message(response, "Password reset failed"))

    async def aclose(self) -> None:
        await self._client.aclose()
