"""
Snippet Manager Backend — AI Assist Route Handlers
====================================================

What:  POST /api/ai/suggest-tags, /api/ai/explain-code and
       /api/ai/generate-description.
How:   auth guard → JSON body → validator → AIAssistService. Provider
       failures (after retries) arrive as AIServiceError and are rendered
       as 500 AI_SERVICE_ERROR with a "Please try again." message.

Nothing is persisted here: the client decides whether to save the result
onto a snippet through PUT /api/snippets/{id}.
"""

import logging

from fastapi import APIRouter, Depends, Request

from snippet_manager.dependencies import get_ai_service
from snippet_manager.middleware.auth import require_auth
from snippet_manager.routes.common import read_json_body
from snippet_manager.schemas.ai import (
    ExplainCodeResponse,
    GenerateDescriptionResponse,
    SuggestTagsResponse,
)
from snippet_manager.schemas.auth import Principal
from snippet_manager.schemas.snippet import ErrorResponse
from snippet_manager.services.ai_service import AIAssistService
from snippet_manager.validators.ai_validator import (
    validate_explain_code,
    validate_generate_description,
    validate_suggest_tags,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["AI Assist"])

ERROR_RESPONSES = {
    400: {"description": "Validation failed", "model": ErrorResponse},
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    500: {"description": "AI provider failed after retries", "model": ErrorResponse},
}


@router.post(
    "/suggest-tags",
    response_model=SuggestTagsResponse,
    responses=ERROR_RESPONSES,
    summary="Suggest up to 5 tags for a piece of code",
)
async def suggest_tags(
    request: Request,
    principal: Principal = Depends(require_auth),
    ai_service: AIAssistService = Depends(get_ai_service),
) -> SuggestTagsResponse:
    data = validate_suggest_tags(await read_json_body(request)).unwrap()
    logger.info("Tag suggestion requested by %s (%s)", principal.user_id, data.language)
    tags = await ai_service.suggest_tags(data.code, data.language)
    return SuggestTagsResponse(tags=tags)


@router.post(
    "/explain-code",
    response_model=ExplainCodeResponse,
    responses=ERROR_RESPONSES,
    summary="Explain a piece of code step by step",
)
async def explain_code(
    request: Request,
    principal: Principal = Depends(require_auth),
    ai_service: AIAssistService = Depends(get_ai_service),
) -> ExplainCodeResponse:
    data = validate_explain_code(await read_json_body(request)).unwrap()
    logger.info("Code explanation requested by %s (%s)", principal.user_id, data.language)
    explanation = await ai_service.explain_code(data.code, data.language)
    return ExplainCodeResponse(explanation=explanation)


@router.post(
    "/generate-description",
    response_model=GenerateDescriptionResponse,
    responses=ERROR_RESPONSES,
    summary="Summarize a piece of code in 1-2 sentences",
)
async def generate_description(
    request: Request,
    principal: Principal = Depends(require_auth),
    ai_service: AIAssistService = Depends(get_ai_service),
) -> GenerateDescriptionResponse:
    data = validate_generate_description(await read_json_body(request)).unwrap()
    logger.info("Description requested by %s (%s)", principal.user_id, data.language)
    description = await ai_service.generate_description(data.code, data.language)
    return GenerateDescriptionResponse(description=description)
