"""
Snippet Manager Backend — Snippet Validators
==============================================

What:  Validation entry points for the snippet endpoints: list query,
       snippet ID, create body, partial-update body.
How:   Each wraps the matching pydantic model from `schemas.snippet` via
       `run_validation`, so all violations in one payload are reported.

Examples:
    >>> validate_snippet_list_query({}).data.model_dump(exclude_none=True)
    {'page': 1, 'limit': 20, 'sort': 'created_at', 'order': 'desc'}
    >>> validate_snippet_list_query({"limit": "101"}).error
    {'errors': [{'field': 'limit', 'message': 'Limit must not exceed 100'}]}
"""

from typing import Any

from snippet_manager.schemas.snippet import (
    CreateSnippetRequest,
    SnippetIdParam,
    SnippetListQuery,
    UpdateSnippetRequest,
)
from snippet_manager.validators.result import ValidationResult, run_validation


def validate_snippet_list_query(query: Any) -> ValidationResult[SnippetListQuery]:
    return run_validation(SnippetListQuery, query)


def validate_snippet_id(snippet_id: Any) -> ValidationResult[SnippetIdParam]:
    return run_validation(SnippetIdParam, {"id": snippet_id})


def validate_create_snippet(body: Any) -> ValidationResult[CreateSnippetRequest]:
    """Title and code come back trimmed; tags default to []."""
    return run_validation(CreateSnippetRequest, body)


def validate_update_snippet(body: Any) -> ValidationResult[UpdateSnippetRequest]:
    """
    Any non-empty subset of updatable fields. Use `data.changes()` to get
    only the keys the client sent.
    """
    return run_validation(UpdateSnippetRequest, body)
