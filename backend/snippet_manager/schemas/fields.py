"""
Snippet Manager Backend — Reusable Field Rules
================================================

What:  Annotated field types shared by the snippet, AI and auth schemas.
Why:   Each rule (title, code, language, tag, tag list, boolean flag) is
       declared once and carries its own client-facing messages, so a create
       payload and an AI payload reject bad `code` with identical wording.
How:   `BeforeValidator` and `WrapValidator` callables raise
       `PydanticCustomError`, whose message text pydantic reports verbatim.
       Pydantic collects the failures of all fields, so every violation in a
       payload is reported, not just the first.
"""

from typing import Annotated, Any, Callable, List

from pydantic import (
    BeforeValidator,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
)
from pydantic_core import PydanticCustomError

from snippet_manager.constants import (
    CODE_MAX_LENGTH,
    SUPPORTED_LANGUAGES,
    TAG_MAX_LENGTH,
    TAG_MIN_LENGTH,
    TAGS_MAX_COUNT,
    TITLE_MAX_LENGTH,
)


def text_rule(label: str, max_length: int, trim: bool = True) -> Callable[[Any], str]:
    """
    Build a validator for a required, non-blank, bounded string.

    `trim=True` returns the stripped value (titles, stored code); `trim=False`
    only uses stripping to detect blank input (code sent for AI analysis).
    """

    def validate(value: Any) -> str:
        if value is None:
            raise PydanticCustomError("missing", f"{label} is required")
        if not isinstance(value, str):
            raise PydanticCustomError("string_type", f"{label} must be a string")
        stripped = value.strip()
        if not stripped:
            raise PydanticCustomError("string_too_short", f"{label} must not be empty")
        result = stripped if trim else value
        if len(result) > max_length:
            raise PydanticCustomError(
                "string_too_long",
                f"{label} exceeds maximum length of {max_length} characters",
            )
        return result

    return validate


def validate_language(value: Any) -> str:
    if value is None:
        raise PydanticCustomError("missing", "Language is required")
    if value not in SUPPORTED_LANGUAGES:
        raise PydanticCustomError(
            "unsupported_language",
            "Unsupported language. Must be one of: {languages}",
            {"languages": ", ".join(SUPPORTED_LANGUAGES)},
        )
    return value


def validate_tag(value: Any) -> str:
    if not isinstance(value, str):
        raise PydanticCustomError("string_type", "Each tag must be a string")
    if len(value) < TAG_MIN_LENGTH:
        raise PydanticCustomError(
            "tag_too_short", f"Each tag must be at least {TAG_MIN_LENGTH} characters"
        )
    if len(value) > TAG_MAX_LENGTH:
        raise PydanticCustomError(
            "tag_too_long", f"Each tag must not exceed {TAG_MAX_LENGTH} characters"
        )
    return value


def validate_tag_list(value: Any, handler: ValidatorFunctionWrapHandler) -> List[str]:
    """
    Element rules and the count limit are both reported: a 21-item list with
    a one-letter tag yields the count error and the tag error together.
    """
    if value is None:
        raise PydanticCustomError("list_type", "Tags must be a list of strings")
    too_many = isinstance(value, (list, tuple)) and len(value) > TAGS_MAX_COUNT
    count_error = PydanticCustomError("too_many_tags", f"Maximum {TAGS_MAX_COUNT} tags allowed")

    try:
        tags = handler(value)
    except ValidationError as exc:
        if not too_many:
            raise
        line_errors = [{"type": count_error, "loc": (), "input": value}]
        line_errors.extend(
            {
                "type": PydanticCustomError(err["type"], err["msg"]),
                "loc": err["loc"],
                "input": err["input"],
            }
            for err in exc.errors()
        )
        raise ValidationError.from_exception_data(exc.title, line_errors)

    if too_many:
        raise count_error
    return tags


def flag_rule(label: str) -> Callable[[Any], bool]:
    def validate(value: Any) -> bool:
        if not isinstance(value, bool):
            raise PydanticCustomError("bool_type", f"{label} must be a boolean")
        return value

    return validate


Title = Annotated[str, BeforeValidator(text_rule("Title", TITLE_MAX_LENGTH))]
Code = Annotated[str, BeforeValidator(text_rule("Code", CODE_MAX_LENGTH))]
RawCode = Annotated[str, BeforeValidator(text_rule("Code", CODE_MAX_LENGTH, trim=False))]
SupportedLanguage = Annotated[str, BeforeValidator(validate_language)]
Tag = Annotated[str, BeforeValidator(validate_tag)]
TagList = Annotated[List[Tag], WrapValidator(validate_tag_list)]
FavoriteFlag = Annotated[bool, BeforeValidator(flag_rule("is_favorite"))]
