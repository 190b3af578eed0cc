"""
Snippet Manager Backend — Domain Constants
===========================================

Validation bounds, supported languages, and list-query defaults shared by
the validators, the ORM model, and the service layer.
"""

from enum import Enum
from typing import Tuple

APP_NAME = "AI Snippet Manager"
APP_DESCRIPTION = (
    "AI-powered code snippet manager with automatic descriptions, "
    "explanations, and tagging"
)


class Language(str, Enum):
    """Programming languages a snippet may be stored as."""

    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    JAVA = "java"
    CSHARP = "csharp"
    CPP = "cpp"
    GO = "go"
    RUST = "rust"
    PHP = "php"
    RUBY = "ruby"
    SQL = "sql"
    HTML = "html"
    CSS = "css"


SUPPORTED_LANGUAGES: Tuple[str, ...] = tuple(language.value for language in Language)


class SortField(str, Enum):
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    TITLE = "title"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ── Field bounds ──────────────────────────────────────────────────────────
TITLE_MAX_LENGTH = 255
CODE_MAX_LENGTH = 50_000
LANGUAGE_MAX_LENGTH = 50
TAG_MIN_LENGTH = 2
TAG_MAX_LENGTH = 30
TAGS_MAX_COUNT = 20

# ── List query ────────────────────────────────────────────────────────────
PAGE_MIN = 1
LIMIT_MIN = 1
LIMIT_MAX = 100
LIMIT_DEFAULT = 20
PAGE_DEFAULT = 1
SORT_DEFAULT = SortField.CREATED_AT.value
ORDER_DEFAULT = SortOrder.DESC.value

# ── AI assist ─────────────────────────────────────────────────────────────
MAX_SUGGESTED_TAGS = 5

# ── Auth ──────────────────────────────────────────────────────────────────
PASSWORD_MIN_LENGTH = 6
