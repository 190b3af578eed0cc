"""
Helpers shared by the route modules: reading raw request input in the form
the validators expect.
"""

import json
from typing import Any, Dict, List, Optional

from fastapi import Request

from snippet_manager.exceptions import ValidationError


async def read_json_body(request: Request) -> Any:
    """Decode the request body as JSON or raise VALIDATION_ERROR "Invalid JSON format"."""
    raw = await request.body()
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON format")


def query_dict(request: Request) -> Dict[str, str]:
    """
    Query parameters with empty values dropped, so they fall back to defaults.

    A repeated key keeps its first value (`?limit=5&limit=500` → "5").
    """
    params = request.query_params
    first_values = {key: params.getlist(key)[0] for key in params.keys()}
    return {key: value for key, value in first_values.items() if value != ""}


def split_tags(raw: Optional[str]) -> Optional[List[str]]:
    """
    "api, auth,,sql" → ["api", "auth", "sql"]; None when nothing is left.
    """
    if not raw:
        return None
    tags = [tag.strip() for tag in raw.split(",") if tag.strip()]
    return tags or None
