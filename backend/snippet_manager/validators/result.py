"""
Snippet Manager Backend — Validation Result Type
==================================================

What:  The discriminated result every validator returns, plus the formatter
       that flattens pydantic errors into `{field, message}` entries.
Why:   Validation failure is an expected outcome, not a fault. Callers branch
       on `success` and only the route boundary turns a failure into an
       exception (and from there into a 400 response).
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from snippet_manager.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class ValidationResult(Generic[ModelT]):
    success: bool
    data: Optional[ModelT] = None
    error: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls, data: ModelT) -> "ValidationResult[ModelT]":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: Dict[str, Any]) -> "ValidationResult[ModelT]":
        return cls(success=False, error=error)

    def unwrap(self, message: str = "Validation failed") -> ModelT:
        """Return the validated data or raise `ValidationError` carrying the field errors."""
        if not self.success:
            raise ValidationError(message, details=self.error)
        return self.data


def format_validation_errors(error: PydanticValidationError) -> Dict[str, List[Dict[str, str]]]:
    """
    Flatten a pydantic failure into the client-facing error details.

    Nested locations are dot-joined (`("user", "name")` → `"user.name"`,
    `("tags", 3)` → `"tags.3"`). Model-level errors have an empty field.
    """
    return {
        "errors": [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in error.errors()
        ]
    }


def run_validation(model: Type[ModelT], data: Any) -> ValidationResult[ModelT]:
    """Validate `data` against `model`, collecting every violation."""
    try:
        return ValidationResult.ok(model.model_validate(data))
    except PydanticValidationError as exc:
        return ValidationResult.failed(format_validation_errors(exc))
