"""
Snippet Manager Backend — Authentication Guard
================================================

What:  Turns the `Authorization` header into a verified Principal, or
       rejects the request with 401 UNAUTHORIZED.
Why:   Every snippet and AI route must know who is calling before doing any
       work. The verified user id (not the raw token) is what the datastore
       session is scoped to; see `Database.session_for`.
How:   `authenticate()` is a pure-ish function returning an AuthResult;
       `require_auth` is the FastAPI dependency that raises on failure.

Decision table:
    no header                          → "Missing authentication token"
    header not starting with "Bearer " → "Invalid authentication token format"
    "Bearer " with an empty token      → "Missing authentication token"
    provider rejects the token         → "Invalid or expired authentication token"
    provider call raises               → "Authentication failed"
    provider returns a user            → success(user_id, token)
"""

import logging
from typing import Any, Optional

from fastapi import Depends, Request

from snippet_manager.dependencies import get_auth_client
from snippet_manager.exceptions import AuthenticationError
from snippet_manager.schemas.auth import AuthResult, Principal

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

MISSING_TOKEN = "Missing authentication token"
INVALID_FORMAT = "Invalid authentication token format"
INVALID_TOKEN = "Invalid or expired authentication token"
AUTH_FAILED = "Authentication failed"


async def authenticate(authorization: Optional[str], auth_client: Any) -> AuthResult:
    if not authorization:
        return AuthResult.failed(MISSING_TOKEN)

    if not authorization.startswith(BEARER_PREFIX):
        # A bare "Bearer" is a bearer header whose token is empty
        if authorization.strip() == BEARER_PREFIX.strip():
            return AuthResult.failed(MISSING_TOKEN)
        return AuthResult.failed(INVALID_FORMAT)

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        return AuthResult.failed(MISSING_TOKEN)

    try:
        user = await auth_client.get_user(token)
    except Exception as e:
        logger.warning("Token verification failed: %s", type(e).__name__)
        return AuthResult.failed(AUTH_FAILED)

    if user is None:
        return AuthResult.failed(INVALID_TOKEN)

    return AuthResult.ok(user_id=user.id, access_token=token)


async def require_auth(
    request: Request,
    auth_client: Any = Depends(get_auth_client),
) -> Principal:
    """
    Route dependency: resolve the caller or raise AuthenticationError (401).

    Runs before the route body, so a rejected request never reaches
    validation, the datastore or the AI provider.
    """
    result = await authenticate(request.headers.get("Authorization"), auth_client)
    if not result.success:
        raise AuthenticationError(result.error)
    return Principal(user_id=result.user_id, access_token=result.access_token)
