"""
Snippet Manager Backend — Account Route Handlers
==================================================

What:  Sign-up, login, logout and password reset, proxied to the hosted
       auth provider.
Why:   The frontend talks to one origin; provider credentials (the anon key)
       stay server-side.

Endpoints:
    POST /api/auth/signup          {email, password} → session (or user only,
                                   when email confirmation is required)
    POST /api/auth/login           {email, password} → session
    POST /api/auth/logout          bearer required; revokes the session
    POST /api/auth/reset-password  {email} → sends a reset link
"""

import logging

from fastapi import APIRouter, Depends, Request

from snippet_manager.config import Settings
from snippet_manager.dependencies import get_auth_client, get_settings
from snippet_manager.middleware.auth import require_auth
from snippet_manager.routes.common import read_json_body
from snippet_manager.schemas.auth import MessageResponse, Principal, SessionResponse
from snippet_manager.schemas.snippet import ErrorResponse
from snippet_manager.services.auth_service import HostedAuthClient
from snippet_manager.validators.auth_validator import (
    validate_credentials,
    validate_reset_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

PROVIDER_DOWN = {503: {"description": "Auth provider unreachable", "model": ErrorResponse}}


@router.post(
    "/signup",
    response_model=SessionResponse,
    responses={400: {"model": ErrorResponse}, **PROVIDER_DOWN},
    summary="Create an account",
)
async def signup(
    request: Request,
    auth_client: HostedAuthClient = Depends(get_auth_client),
) -> SessionResponse:
    data = validate_credentials(await read_json_body(request)).unwrap()
    session = await auth_client.sign_up(data.email, data.password)
    logger.info("Account created: %s", session.user.id)
    return session


@router.post(
    "/login",
    response_model=SessionResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, **PROVIDER_DOWN},
    summary="Sign in with email and password",
)
async def login(
    request: Request,
    auth_client: HostedAuthClient = Depends(get_auth_client),
) -> SessionResponse:
    data = validate_credentials(await read_json_body(request)).unwrap()
    return await auth_client.sign_in(data.email, data.password)


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse}, **PROVIDER_DOWN},
    summary="Revoke the current session",
)
async def logout(
    principal: Principal = Depends(require_auth),
    auth_client: HostedAuthClient = Depends(get_auth_client),
) -> MessageResponse:
    await auth_client.sign_out(principal.access_token)
    return MessageResponse(message="Signed out")


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, **PROVIDER_DOWN},
    summary="Email a password reset link",
)
async def reset_password(
    request: Request,
    auth_client: HostedAuthClient = Depends(get_auth_client),
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    data = validate_reset_password(await read_json_body(request)).unwrap()
    await auth_client.reset_password(
        data.email, redirect_to=f"{settings.app_url.rstrip('/')}/reset-password"
    )
    return MessageResponse(
        message="If an account exists for this email, a password reset link has been sent."
    )
