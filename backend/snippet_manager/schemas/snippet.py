"""
Snippet Manager Backend — Snippet Request/Response Schemas
============================================================

What:  Pydantic models for the snippet API contract: inbound payloads and
       query strings, the internal command objects handed to the service
       layer, and the response DTOs.
Why:   Requests are checked against one declarative definition per payload.
       Responses have a fixed field set no matter how sparse the stored row is.
How:   Field rules come from `schemas.fields`. Validation is invoked
       explicitly by `validators.snippet_validator` after authentication,
       never implicitly by FastAPI, so the auth → validate order holds.
"""

import re
import uuid
from datetime import datetime
from typing import Annotated, Any, Callable, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from snippet_manager.constants import (
    LIMIT_DEFAULT,
    LIMIT_MAX,
    LIMIT_MIN,
    PAGE_DEFAULT,
    PAGE_MIN,
    Language,
    SortField,
    SortOrder,
)
from snippet_manager.schemas.fields import (
    Code,
    FavoriteFlag,
    SupportedLanguage,
    TagList,
    Title,
)

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


# ══════════════════════════════════════════════════════════════════════════
# Query Parameter Models
# ══════════════════════════════════════════════════════════════════════════


def int_query_rule(
    default: int,
    minimum: int,
    below_minimum: str,
    invalid: str,
    maximum: Optional[int] = None,
    above_maximum: Optional[str] = None,
) -> Callable[[Any], int]:
    """
    Parse an optional query-string integer.

    Query values arrive as strings; absent or empty values fall back to
    `default`. Non-numeric text fails with `invalid`.
    """

    def validate(value: Any) -> int:
        if value is None or value == "":
            return default
        if isinstance(value, bool):
            raise PydanticCustomError("int_parsing", invalid)
        if isinstance(value, int):
            number = value
        else:
            try:
                number = int(str(value).strip())
            except ValueError:
                raise PydanticCustomError("int_parsing", invalid)
        if number < minimum:
            raise PydanticCustomError("greater_than_equal", below_minimum)
        if maximum is not None and number > maximum:
            raise PydanticCustomError("less_than_equal", above_maximum or invalid)
        return number

    return validate


PageNumber = Annotated[
    int,
    BeforeValidator(
        int_query_rule(
            default=PAGE_DEFAULT,
            minimum=PAGE_MIN,
            below_minimum="Page must be a positive integer",
            invalid="Page must be a positive integer",
        )
    ),
]

PageLimit = Annotated[
    int,
    BeforeValidator(
        int_query_rule(
            default=LIMIT_DEFAULT,
            minimum=LIMIT_MIN,
            below_minimum=f"Limit must be at least {LIMIT_MIN}",
            invalid="Limit must be a valid integer",
            maximum=LIMIT_MAX,
            above_maximum=f"Limit must not exceed {LIMIT_MAX}",
        )
    ),
]


class SnippetListQuery(BaseModel):
    """
    Validated query parameters for GET /api/snippets.

    Defaults: page=1, limit=20, sort=created_at, order=desc.
    `tags` stays the raw comma-separated string; the route splits it.
    """

    model_config = ConfigDict(use_enum_values=True, extra="ignore")

    page: PageNumber = Field(default=None, validate_default=True)
    limit: PageLimit = Field(default=None, validate_default=True)
    sort: SortField = Field(default=SortField.CREATED_AT, validate_default=True)
    order: SortOrder = Field(default=SortOrder.DESC, validate_default=True)
    language: Optional[Language] = None
    tags: Optional[str] = None
    search: Optional[str] = None


class SnippetIdParam(BaseModel):
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def validate_uuid(cls, value: Any) -> str:
        if not isinstance(value, str) or not UUID_PATTERN.match(value):
            raise PydanticCustomError(
                "uuid_parsing", "Invalid snippet ID format. Must be a valid UUID."
            )
        return value


# ══════════════════════════════════════════════════════════════════════════
# Request Body Models
# ══════════════════════════════════════════════════════════════════════════


class CreateSnippetRequest(BaseModel):
    """
    Body of POST /api/snippets.

    Title and code are trimmed. Tags default to an empty list. Unknown keys
    are ignored rather than rejected.
    """

    model_config = ConfigDict(extra="ignore")

    title: Title = Field(default=None, validate_default=True)
    code: Code = Field(default=None, validate_default=True)
    language: SupportedLanguage = Field(default=None, validate_default=True)
    description: Optional[str] = None
    tags: TagList = Field(default_factory=list)
    ai_description: Optional[str] = None
    ai_explanation: Optional[str] = None


class UpdateSnippetRequest(BaseModel):
    """
    Body of PUT /api/snippets/{id}: any non-empty subset of updatable fields.

    Absent fields are left untouched; present fields obey the create rules.
    Only the nullable text fields accept an explicit null.
    """

    model_config = ConfigDict(extra="ignore")

    title: Title = None
    code: Code = None
    language: SupportedLanguage = None
    description: Optional[str] = None
    tags: TagList = None
    ai_description: Optional[str] = None
    ai_explanation: Optional[str] = None
    is_favorite: FavoriteFlag = None

    @model_validator(mode="after")
    def require_at_least_one_field(self) -> "UpdateSnippetRequest":
        if not self.model_fields_set:
            raise PydanticCustomError(
                "empty_update", "At least one field must be provided for update"
            )
        return self

    def changes(self) -> Dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Commands: validated input handed to the service layer
# ══════════════════════════════════════════════════════════════════════════


class GetSnippetsCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: uuid.UUID
    page: int = PAGE_DEFAULT
    limit: int = LIMIT_DEFAULT
    sort: str = SortField.CREATED_AT.value
    order: str = SortOrder.DESC.value
    language: Optional[str] = None
    tags: Optional[List[str]] = None
    search: Optional[str] = None


class GetSnippetByIdCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    user_id: uuid.UUID


class CreateSnippetCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: uuid.UUID
    title: str
    code: str
    language: str
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    ai_description: Optional[str] = None
    ai_explanation: Optional[str] = None


class UpdateSnippetCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    user_id: uuid.UUID
    updates: Dict[str, Any]


class DeleteSnippetCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    user_id: uuid.UUID


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SnippetResponse(BaseModel):
    """
    The snippet DTO. Optional columns are always present: null for missing
    text, [] for missing tags, false for a missing favorite flag.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    code: str
    language: str
    description: Optional[str] = None
    ai_description: Optional[str] = None
    ai_explanation: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False
    created_at: datetime
    updated_at: datetime


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PaginatedSnippetsResponse(BaseModel):
    data: List[SnippetResponse]
    pagination: PaginationMeta


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models (OpenAPI documentation)
# ══════════════════════════════════════════════════════════════════════════


class ErrorDetail(BaseModel):
    code: str = Field(description="Machine-readable error code, e.g. NOT_FOUND")
    message: str = Field(description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Field errors or other context")


class ErrorResponse(BaseModel):
    error: ErrorDetail


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    ai_provider: str = Field(description="available or unavailable")
    uptime_seconds: float
