"""
Snippet Manager Backend — Retry Policy for External AI Calls
==============================================================

What:  Bounded retry with exponential backoff around one async call.
Why:   Completion providers fail transiently (timeouts, 5xx, dropped
       connections). A client error (4xx: bad key, invalid request, quota)
       will fail identically on every attempt, so it is rethrown at once.
How:   tenacity `AsyncRetrying`, iterated attempt by attempt so each call is
       awaited explicitly:
           stop    after `max_attempts` invocations
           wait    base_delay * 2**(attempt - 1)   (1s, 2s, 4s ... by default)
           retry   only errors without a 4xx status
           reraise the last error itself, not tenacity's RetryError

Only the AI assist layer retries. Datastore and auth calls never do.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_ATTRIBUTES = ("status", "status_code", "code")


def client_error_status(error: BaseException) -> Optional[int]:
    """Return the HTTP-style status an error carries, if it is a 4xx."""
    for attr in STATUS_ATTRIBUTES:
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value if 400 <= value < 500 else None
    return None


def is_client_error(error: BaseException) -> bool:
    return client_error_status(error) is not None


def _should_retry(error: BaseException) -> bool:
    # Cancellation and interpreter exits are never retried
    return isinstance(error, Exception) and not is_client_error(error)


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    sleep: Optional[Callable[[float], Awaitable[None]]] = None,
) -> T:
    """
    Await `operation()` up to `max_attempts` times.

    `sleep` replaces tenacity's asyncio sleep between attempts.

    Raises:
        The first client (4xx) error immediately, or the last error once
        all attempts are used.
    """
    options: Dict[str, Any] = {}
    if sleep is not None:
        options["sleep"] = sleep

    async for attempt in AsyncRetrying(
        retry=retry_if_exception(_should_retry),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=base_delay),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
        **options,
    ):
        with attempt:
            return await operation()
