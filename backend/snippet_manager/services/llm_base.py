"""
Snippet Manager Backend — Abstract Text-Generation Provider
=============================================================

What:  Abstract base class for the external prompt → text completion call.
Why:   AIAssistService builds prompts and handles retries; the provider only
       knows how to reach one vendor. Swapping Gemini for another vendor, or
       for a canned fake in tests, touches nothing else.
How:   Concrete providers implement `complete()` and `health_check()`.
Who:   Called by AIAssistService for descriptions, explanations and tags.
"""

from abc import ABC, abstractmethod


class AIProvider(ABC):
    """
    Contract:
        - complete() performs exactly one completion round trip; it never
          retries (the caller owns the retry policy)
        - Vendor errors propagate unchanged so the retry policy can read
          their HTTP-style status (a 4xx is never retried)
        - Each call is bounded by the provider's configured request timeout
    """

    @abstractmethod
    async def complete(self, prompt: str, max_output_tokens: int, temperature: float) -> str:
        """
        Send one prompt and return the completion text.

        Args:
            prompt:            Full prompt text, code included.
            max_output_tokens: Upper bound on generated tokens.
            temperature:       Sampling temperature.

        Returns:
            The raw completion text. Empty string when the model produced
            nothing usable. Never None.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Lightweight reachability probe (must not consume completion quota).

        Returns: True if the provider is reachable and the key is accepted.
        """
        ...
