"""
Snippet Manager Backend — Snippet Route Handlers
==================================================

What:  CRUD and listing endpoints for snippets under /api/snippets.
Why:   The HTTP boundary of the snippet service.
How:   Every handler runs the same fixed sequence:
           1. auth guard (dependency)       → 401 before anything else
           2. validator on the raw input    → 400 before any datastore call
           3. SnippetService in a transaction scoped to the caller
           4. None / False from the service → 404 NOT_FOUND

Endpoints:
    GET    /api/snippets          paginated, filtered, searchable list
    POST   /api/snippets          create → 201 + Location
    GET    /api/snippets/{id}     single snippet
    PUT    /api/snippets/{id}     partial update
    DELETE /api/snippets/{id}     delete → 204
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from snippet_manager.dependencies import get_snippet_services
from snippet_manager.exceptions import NotFoundError
from snippet_manager.middleware.auth import require_auth
from snippet_manager.routes.common import query_dict, read_json_body, split_tags
from snippet_manager.schemas.auth import Principal
from snippet_manager.schemas.snippet import (
    CreateSnippetCommand,
    DeleteSnippetCommand,
    ErrorResponse,
    GetSnippetByIdCommand,
    GetSnippetsCommand,
    PaginatedSnippetsResponse,
    SnippetResponse,
    UpdateSnippetCommand,
)
from snippet_manager.services.snippet_service import SnippetServiceFactory
from snippet_manager.validators.snippet_validator import (
    validate_create_snippet,
    validate_snippet_id,
    validate_snippet_list_query,
    validate_update_snippet,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/snippets", tags=["Snippets"])

ERROR_RESPONSES = {
    400: {"description": "Validation failed", "model": ErrorResponse},
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
NOT_FOUND_RESPONSE = {404: {"description": "Snippet not found", "model": ErrorResponse}}

INVALID_ID_MESSAGE = "Invalid snippet ID format"


@router.get(
    "",
    response_model=PaginatedSnippetsResponse,
    responses=ERROR_RESPONSES,
    summary="List the caller's snippets",
    description=(
        "Query: page (default 1), limit (1-100, default 20), sort "
        "(created_at | updated_at | title), order (asc | desc), language, "
        "tags (comma-separated, matches any), search (full text over title, "
        "description and AI description)."
    ),
)
async def list_snippets(
    request: Request,
    principal: Principal = Depends(require_auth),
    snippet_services: SnippetServiceFactory = Depends(get_snippet_services),
) -> PaginatedSnippetsResponse:
    query = validate_snippet_list_query(query_dict(request)).unwrap("Invalid query parameters")

    command = GetSnippetsCommand(
        user_id=principal.user_id,
        page=query.page,
        limit=query.limit,
        sort=query.sort,
        order=query.order,
        language=query.language,
        tags=split_tags(query.tags),
        search=(query.search or "").strip() or None,
    )
    async with snippet_services.open(principal) as snippets:
        return await snippets.get_snippets(command)


@router.post(
    "",
    response_model=SnippetResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Create a snippet",
)
async def create_snippet(
    request: Request,
    response: Response,
    principal: Principal = Depends(require_auth),
    snippet_services: SnippetServiceFactory = Depends(get_snippet_services),
) -> SnippetResponse:
    body = await read_json_body(request)
    data = validate_create_snippet(body).unwrap()

    command = CreateSnippetCommand(user_id=principal.user_id, **data.model_dump())
    async with snippet_services.open(principal) as snippets:
        snippet = await snippets.create_snippet(command)

    response.headers["Location"] = f"/api/snippets/{snippet.id}"
    return snippet


@router.get(
    "/{snippet_id}",
    response_model=SnippetResponse,
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
    summary="Get one of the caller's snippets",
)
async def get_snippet(
    snippet_id: str,
    principal: Principal = Depends(require_auth),
    snippet_services: SnippetServiceFactory = Depends(get_snippet_services),
) -> SnippetResponse:
    params = validate_snippet_id(snippet_id).unwrap(INVALID_ID_MESSAGE)

    command = GetSnippetByIdCommand(id=params.id, user_id=principal.user_id)
    async with snippet_services.open(principal) as snippets:
        snippet = await snippets.get_snippet_by_id(command)

    # Another user's snippet and a missing one look the same
    if snippet is None:
        raise NotFoundError(resource="Snippet", resource_id=params.id)
    return snippet


@router.put(
    "/{snippet_id}",
    response_model=SnippetResponse,
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
    summary="Update any subset of a snippet's fields",
)
async def update_snippet(
    snippet_id: str,
    request: Request,
    principal: Principal = Depends(require_auth),
    snippet_services: SnippetServiceFactory = Depends(get_snippet_services),
) -> SnippetResponse:
    params = validate_snippet_id(snippet_id).unwrap(INVALID_ID_MESSAGE)
    body = await read_json_body(request)
    data = validate_update_snippet(body).unwrap()

    command = UpdateSnippetCommand(
        id=params.id,
        user_id=principal.user_id,
        updates=data.changes(),
    )
    async with snippet_services.open(principal) as snippets:
        snippet = await snippets.update_snippet(command)

    if snippet is None:
        raise NotFoundError(resource="Snippet", resource_id=params.id)
    return snippet


@router.delete(
    "/{snippet_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
    summary="Delete a snippet",
)
async def delete_snippet(
    snippet_id: str,
    principal: Principal = Depends(require_auth),
    snippet_services: SnippetServiceFactory = Depends(get_snippet_services),
) -> Response:
    params = validate_snippet_id(snippet_id).unwrap(INVALID_ID_MESSAGE)

    command = DeleteSnippetCommand(id=params.id, user_id=principal.user_id)
    async with snippet_services.open(principal) as snippets:
        deleted = await snippets.delete_snippet(command)

    if not deleted:
        raise NotFoundError(resource="Snippet", resource_id=params.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
