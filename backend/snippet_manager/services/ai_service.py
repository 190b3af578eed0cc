"""
Snippet Manager Backend — AI Assist Service
=============================================

What:  The three AI assist operations: one-line description, step-by-step
       explanation, and tag suggestions for a piece of code.
Why:   Routes stay thin. Prompt wording, token budgets, retry policy and
       result post-processing live here, once.
How:   Each operation renders its prompt, runs one provider completion
       through `call_with_retry`, post-processes the text, and converts a
       final failure into AIServiceError with a retry hint for the user.

Budgets:
    description  150 tokens  temperature 0.7
    explanation  800 tokens  temperature 0.7
    tags          50 tokens  temperature 0.5
"""

import logging
from typing import Awaitable, Callable, List, TypeVar

from snippet_manager.constants import MAX_SUGGESTED_TAGS
from snippet_manager.exceptions import AIServiceError
from snippet_manager.services.llm_base import AIProvider
from snippet_manager.services.retry import call_with_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")

DESCRIPTION_PROMPT = """Analyze this {language} code and provide a concise 1-2 sentence description of what it does. Focus on the main functionality.

Code:
{code}

Description:"""

EXPLANATION_PROMPT = """Explain this {language} code step by step. Break down the logic and explain what each important section does.

Code:
{code}

Explanation:"""

TAGS_PROMPT = """Suggest 3-5 relevant tags for this {language} code snippet. Tags should describe the functionality, patterns, or technologies used. Return only comma-separated tags.

Code:
{code}

Tags:"""


def parse_tag_list(text: str) -> List[str]:
    """
    Turn a comma-separated completion into at most five tags.

    >>> parse_tag_list(" sorting, arrays ,, algorithms ")
    ['sorting', 'arrays', 'algorithms']
    """
    tags = [tag.strip() for tag in text.strip().split(",")]
    return [tag for tag in tags if tag][:MAX_SUGGESTED_TAGS]


class AIAssistService:
    def __init__(self, provider: AIProvider, max_attempts: int = 3, base_delay: float = 1.0):
        self.provider = provider
        self.max_attempts = max_attempts
        self.base_delay = base_delay

    async def generate_description(self, code: str, language: str) -> str:
        """1-2 sentence summary, trimmed. Empty string if the model returned nothing."""
        text = await self._run(
            "generate_description",
            "Failed to generate description. Please try again.",
            lambda: self.provider.complete(
                DESCRIPTION_PROMPT.format(language=language, code=code),
                max_output_tokens=150,
                temperature=0.7,
            ),
        )
        return text.strip()

    async def explain_code(self, code: str, language: str) -> str:
        text = await self._run(
            "explain_code",
            "Failed to explain code. Please try again.",
            lambda: self.provider.complete(
                EXPLANATION_PROMPT.format(language=language, code=code),
                max_output_tokens=800,
                temperature=0.7,
            ),
        )
        return text.strip()

    async def suggest_tags(self, code: str, language: str) -> List[str]:
        text = await self._run(
            "suggest_tags",
            "Failed to suggest tags. Please try again.",
            lambda: self.provider.complete(
                TAGS_PROMPT.format(language=language, code=code),
                max_output_tokens=50,
                temperature=0.5,
            ),
        )
        return parse_tag_list(text)

    async def _run(
        self,
        operation: str,
        failure_message: str,
        call: Callable[[], Awaitable[T]],
    ) -> T:
        try:
            return await call_with_retry(
                call, max_attempts=self.max_attempts, base_delay=self.base_delay
            )
        except Exception as e:
            logger.error(
                "AI %s failed after retries: %s: %s",
                operation,
                type(e).__name__,
                str(e),
            )
            raise AIServiceError(
                message=failure_message,
                context={"operation": operation, "error_type": type(e).__name__},
            ) from e
