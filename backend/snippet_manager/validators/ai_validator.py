"""
Snippet Manager Backend — AI Request Validators
=================================================

All three AI endpoints accept the same `{code, language}` payload with the
same code/language rules as snippet creation. Separate entry points keep
each route's call site explicit.
"""

from typing import Any

from snippet_manager.schemas.ai import AICodeRequest
from snippet_manager.validators.result import ValidationResult, run_validation


def validate_suggest_tags(body: Any) -> ValidationResult[AICodeRequest]:
    return run_validation(AICodeRequest, body)


def validate_explain_code(body: Any) -> ValidationResult[AICodeRequest]:
    return run_validation(AICodeRequest, body)


def validate_generate_description(body: Any) -> ValidationResult[AICodeRequest]:
    return run_validation(AICodeRequest, body)
