"""
Snippet Manager Backend — AI Assist Route Tests
=================================================

What:  HTTP-level tests for /api/ai/* with a scripted provider.

What we test:
    ✅ Response shapes ({tags}, {explanation}, {description})
    ✅ 401 before validation; 400 before any provider call
    ✅ Provider failure after retries → 500 AI_SERVICE_ERROR
"""

import pytest

from conftest import TOKEN_A, bearer

PAYLOAD = {"code": "function add(a, b) { return a + b; }", "language": "javascript"}


class TestSuggestTags:

    @pytest.mark.asyncio
    async def test_returns_tags(self, test_client, fake_provider):
        response = await test_client.post(
            "/api/ai/suggest-tags", json=PAYLOAD, headers=bearer(TOKEN_A)
        )

        assert response.status_code == 200
        assert response.json() == {"tags": ["javascript", "sorting", "arrays"]}
        assert len(fake_provider.calls) == 1

    @pytest.mark.asyncio
    async def test_requires_auth(self, test_client, fake_provider):
        response = await test_client.post("/api/ai/suggest-tags", json={})
        assert response.status_code == 401
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_unsupported_language(self, test_client, fake_provider):
        response = await test_client.post(
            "/api/ai/suggest-tags",
            json={"code": "x", "language": "fortran"},
            headers=bearer(TOKEN_A),
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["errors"][0]["field"] == "language"
        assert fake_provider.calls == []


class TestExplainAndDescribe:

    @pytest.mark.asyncio
    async def test_explain_code(self, test_client, fake_provider):
        fake_provider.results = ["  Adds two numbers.  "]

        response = await test_client.post(
            "/api/ai/explain-code", json=PAYLOAD, headers=bearer(TOKEN_A)
        )

        assert response.status_code == 200
        assert response.json() == {"explanation": "Adds two numbers."}

    @pytest.mark.asyncio
    async def test_generate_description(self, test_client, fake_provider):
        fake_provider.results = ["Returns the sum of two numbers."]

        response = await test_client.post(
            "/api/ai/generate-description", json=PAYLOAD, headers=bearer(TOKEN_A)
        )

        assert response.status_code == 200
        assert response.json() == {"description": "Returns the sum of two numbers."}

    @pytest.mark.asyncio
    async def test_blank_code(self, test_client, fake_provider):
        response = await test_client.post(
            "/api/ai/explain-code",
            json={"code": "   ", "language": "python"},
            headers=bearer(TOKEN_A),
        )
        assert response.status_code == 400
        assert fake_provider.calls == []


class TestProviderFailure:

    @pytest.mark.asyncio
    async def test_exhausted_retries(self, test_client, fake_provider):
        fake_provider.results = [TimeoutError("deadline exceeded")]

        response = await test_client.post(
            "/api/ai/generate-description", json=PAYLOAD, headers=bearer(TOKEN_A)
        )

        assert response.status_code == 500
        assert response.json() == {
            "error": {
                "code": "AI_SERVICE_ERROR",
                "message": "Failed to generate description. Please try again.",
            }
        }
        assert len(fake_provider.calls) == 3
