"""
Bounded retry for calls against the generative service.

Only rate-limit / resource-exhaustion failures are retried. Everything else,
including transport timeouts and safety classifications, propagates on the
first attempt.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
    wait_random,
)

from companion.entities.errors import TransientQuotaError

T = TypeVar("T")

_logger = logging.getLogger(__name__)

QUOTA_STATUSES: frozenset[Any] = frozenset({429, "429", "RESOURCE_EXHAUSTED"})


@dataclass(frozen=True)
class RetryPolicy:
    """How many extra attempts to make and how long to wait between them."""

    max_retries: int = 1
    base_delay: float = 2.0
    jitter: float = 0.0


def is_quota_error(error: BaseException) -> bool:
    """
    Classify an exception as a transient quota failure.

    Recognises our own TransientQuotaError, google-genai APIError instances
    (``code == 429`` or ``status == "RESOURCE_EXHAUSTED"``), and any error
    whose message mentions HTTP 429.
    """
    if isinstance(error, TransientQuotaError):
        return True
    if getattr(error, "code", None) in QUOTA_STATUSES:
        return True
    if getattr(error, "status", None) in QUOTA_STATUSES:
        return True
    return "429" in str(error)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    logger: logging.Logger | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """
    Run ``operation``, retrying transient quota errors according to ``policy``.

    The last error is re-raised unchanged once the retry budget is spent.
    """
    policy = policy or RetryPolicy()
    retrying = AsyncRetrying(
        retry=retry_if_exception(is_quota_error),
        stop=stop_after_attempt(max(0, policy.max_retries) + 1),
        wait=wait_fixed(policy.base_delay) + wait_random(0, max(0.0, policy.jitter)),
        sleep=sleep,
        before_sleep=before_sleep_log(logger or _logger, logging.WARNING),
        reraise=True,
    )
    return await retrying(operation)
