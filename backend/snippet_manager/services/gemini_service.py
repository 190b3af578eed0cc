"""
Snippet Manager Backend — Google Gemini Provider
==================================================

What:  AIProvider implementation backed by Google Gemini text models.
Why:   Gemini's free tier covers development; gemini-1.5-flash answers the
       short description/tag prompts in one to three seconds.
How:   One `generate_content_async` call per completion, with the token
       limit and temperature passed as generation config and the request
       timeout passed as a request option.
Who:   Constructed once in `create_app()` and handed to AIAssistService.

Error behavior:
    google.api_core exceptions carry the HTTP status as an int `code`
    (InvalidArgument 400, PermissionDenied 403, ResourceExhausted 429,
    ServiceUnavailable 503...). They are re-raised untouched so the retry
    policy can skip client errors.
"""

import logging
import time

import google.generativeai as genai

from snippet_manager.services.llm_base import AIProvider

logger = logging.getLogger(__name__)


class GeminiProvider(AIProvider):
    def __init__(self, api_key: str, model_name: str = "gemini-1.5-flash", timeout: int = 30):
        # The SDK keeps the API key in module-level state
        if api_key:
            genai.configure(api_key=api_key)

        self.model_name = model_name
        self.timeout = timeout
        self.model = genai.GenerativeModel(model_name)

        logger.info("GeminiProvider initialized with model=%s, timeout=%ds", model_name, timeout)

    async def complete(self, prompt: str, max_output_tokens: int, temperature: float) -> str:
        start_time = time.perf_counter()

        try:
            response = await self.model.generate_content_async(
                prompt,
                generation_config={
                    "max_output_tokens": max_output_tokens,
                    "temperature": temperature,
                },
                request_options={"timeout": self.timeout},
            )
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.warning(
                "Gemini completion failed after %.0fms: %s (%s)",
                duration_ms,
                type(e).__name__,
                getattr(e, "code", None),
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        # `.text` raises ValueError when the candidate was blocked or empty
        try:
            text = response.text or ""
        except ValueError:
            logger.warning("Gemini returned no text candidate (finish reason blocked or empty)")
            text = ""

        logger.info(
            "Gemini completion finished in %.0fms, %d chars (max_tokens=%d)",
            duration_ms,
            len(text),
            max_output_tokens,
        )
        return text

    async def health_check(self) -> bool:
        """
        Lists models to verify the key and connectivity. Costs no tokens.
        """
        try:
            model_names = [m.name for m in genai.list_models()]
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False

        target = f"models/{self.model_name}"
        if target not in model_names:
            logger.warning("Configured model %s not found in available models", target)
        return True
