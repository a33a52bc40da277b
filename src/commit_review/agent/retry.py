"""Retry controller for remote review calls.

Every remote call goes through ``call_with_retry``.  Failures are classified
into three classes, each with its own wait policy:

* ``FATAL``        authentication/authorization errors, raised at once
* ``RATE_LIMITED`` HTTP 429, waits ``base * attempt * multiplier``
* ``TRANSIENT``    everything else (network, timeout, 5xx), waits
  ``base * attempt``

Attempts run strictly one after another; the wait is a plain
``asyncio.sleep`` with nothing else in flight for the call.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, TypeVar

import anthropic
import openai

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]

DEFAULT_RATE_LIMIT_MULTIPLIER = 2.0

_FATAL_ERRORS: tuple[type[BaseException], ...] = (
    openai.AuthenticationError,
    openai.PermissionDeniedError,
    anthropic.AuthenticationError,
    anthropic.PermissionDeniedError,
)
_RATE_LIMIT_ERRORS: tuple[type[BaseException], ...] = (
    openai.RateLimitError,
    anthropic.RateLimitError,
)
_FATAL_STATUS = frozenset({401, 403})
_RATE_LIMIT_STATUS = 429


class ErrorClass(str, Enum):
    FATAL = "fatal"
    RATE_LIMITED = "rate_limited"
    TRANSIENT = "transient"


@dataclass
class RetryAttempt:
    """Bookkeeping for the attempt that just failed."""

    attempt_number: int
    last_error: BaseException
    next_delay_ms: float


def classify_error(exc: BaseException) -> ErrorClass:
    """Map an exception to its retry class.

    SDK exception types are checked first; any other exception carrying a
    ``status_code`` attribute is classified by that code.
    """
    if isinstance(exc, _FATAL_ERRORS):
        return ErrorClass.FATAL
    if isinstance(exc, _RATE_LIMIT_ERRORS):
        return ErrorClass.RATE_LIMITED

    status = getattr(exc, "status_code", None)
    if status in _FATAL_STATUS:
        return ErrorClass.FATAL
    if status == _RATE_LIMIT_STATUS:
        return ErrorClass.RATE_LIMITED
    return ErrorClass.TRANSIENT


def compute_delay_ms(
    error_class: ErrorClass,
    attempt_number: int,
    base_delay_ms: float,
    rate_limit_multiplier: float = DEFAULT_RATE_LIMIT_MULTIPLIER,
) -> float:
    """Wait before the attempt after *attempt_number* (1-based)."""
    delay = base_delay_ms * attempt_number
    if error_class is ErrorClass.RATE_LIMITED:
        delay *= rate_limit_multiplier
    return delay


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int,
    base_delay_ms: float,
    *,
    rate_limit_multiplier: float = DEFAULT_RATE_LIMIT_MULTIPLIER,
    sleep: Sleep = asyncio.sleep,
    on_retry: Callable[[RetryAttempt], None] | None = None,
) -> T:
    """Await ``operation()`` until it succeeds, with bounded retries.

    Raises the last error once *max_attempts* is used up, or the first
    fatal-class error immediately.
    """
    max_attempts = max(1, max_attempts)
    attempt = 1

    while True:
        try:
            return await operation()
        except Exception as e:
            error_class = classify_error(e)
            if error_class is ErrorClass.FATAL:
                logger.debug("Fatal error on attempt %d, not retrying: %s", attempt, e)
                raise
            if attempt >= max_attempts:
                logger.debug("Giving up after %d attempt(s): %s", attempt, e)
                raise

            delay_ms = compute_delay_ms(error_class, attempt, base_delay_ms, rate_limit_multiplier)
            logger.warning(
                "Review request failed (%s, attempt %d/%d), retrying in %.1fs: %s",
                error_class.value, attempt, max_attempts, delay_ms / 1000, e,
            )
            if on_retry:
                on_retry(RetryAttempt(attempt_number=attempt, last_error=e, next_delay_ms=delay_ms))
            await sleep(delay_ms / 1000)
            attempt += 1
