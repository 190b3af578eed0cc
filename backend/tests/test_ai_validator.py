"""
Snippet Manager Backend — AI Request Validator Tests
======================================================

The three AI payload validators share one rule set: non-blank code of at
most 50000 characters and a supported language.
"""

import pytest

from snippet_manager.validators.ai_validator import (
    validate_explain_code,
    validate_generate_description,
    validate_suggest_tags,
)

VALIDATORS = [validate_suggest_tags, validate_explain_code, validate_generate_description]


def messages(result):
    return [entry["message"] for entry in result.error["errors"]]


@pytest.mark.parametrize("validate", VALIDATORS)
class TestAIRequestValidation:

    def test_valid_payload(self, validate):
        result = validate({"code": "def add(a, b):\n    return a + b\n", "language": "python"})
        assert result.success
        assert result.data.language == "python"

    def test_code_is_not_trimmed(self, validate):
        code = "  indented = True\n"
        result = validate({"code": code, "language": "python"})
        assert result.data.code == code

    def test_missing_code(self, validate):
        result = validate({"language": "python"})
        assert not result.success
        assert "Code is required" in messages(result)

    def test_blank_code(self, validate):
        result = validate({"code": "   \n", "language": "python"})
        assert not result.success
        assert any("empty" in m for m in messages(result))

    def test_code_too_long(self, validate):
        result = validate({"code": "x" * 50001, "language": "python"})
        assert not result.success
        assert any("50000" in m for m in messages(result))

    def test_unsupported_language(self, validate):
        result = validate({"code": "print(1)", "language": "brainfuck"})
        assert not result.success
        assert messages(result)[0].startswith("Unsupported language. Must be one of: javascript")

    def test_missing_language(self, validate):
        result = validate({"code": "print(1)"})
        assert "Language is required" in messages(result)

    def test_both_fields_reported(self, validate):
        result = validate({})
        assert {e["field"] for e in result.error["errors"]} == {"code", "language"}
