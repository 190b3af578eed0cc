"""
Snippet Manager Backend — AI Assist Schemas
=============================================

What:  Request and response models for the three AI assist endpoints.
Why:   All three share one payload shape ({code, language}); only the
       response key differs.
How:   `code` uses the untrimmed rule: blank code is rejected, but the
       code the model sees is exactly what the user submitted.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from snippet_manager.schemas.fields import RawCode, SupportedLanguage


class AICodeRequest(BaseModel):
    """Body of POST /api/ai/suggest-tags, /explain-code and /generate-description."""

    model_config = ConfigDict(extra="ignore")

    code: RawCode = Field(default=None, validate_default=True)
    language: SupportedLanguage = Field(default=None, validate_default=True)


class SuggestTagsResponse(BaseModel):
    tags: List[str] = Field(description="At most 5 lowercase tags")


class ExplainCodeResponse(BaseModel):
    explanation: str


class GenerateDescriptionResponse(BaseModel):
    description: str
