"""Validators for the account endpoints (sign-up, login, password reset)."""

from typing import Any

from snippet_manager.schemas.auth import CredentialsRequest, ResetPasswordRequest
from snippet_manager.validators.result import ValidationResult, run_validation


def validate_credentials(body: Any) -> ValidationResult[CredentialsRequest]:
    return run_validation(CredentialsRequest, body)


def validate_reset_password(body: Any) -> ValidationResult[ResetPasswordRequest]:
    return run_validation(ResetPasswordRequest, body)
