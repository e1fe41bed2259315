"""Bounded exponential-backoff retry for external calls."""
from __future__ import annotations

import functools
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Delay before attempt ``i + 1`` is ``base_delay * 2 ** i`` seconds."""

    max_attempts: int = 3
    base_delay: float = 1.0

    def delay_for(self, attempt_index: int) -> float:
        return self.base_delay * (2 ** attempt_index)


def call_with_retry(
    operation: Callable[[], T],
    policy: RetryPolicy | None = None,
    *,
    sleep: Callable[[float], None] = time.sleep,
    label: str | None = None,
) -> T:
    """Run *operation* until it succeeds or the policy is exhausted.

    Every exception counts as retryable. The last one is re-raised once all
    attempts have failed.
    """
    policy = policy or RetryPolicy()
    name = label or getattr(operation, "__qualname__", repr(operation))
    attempts = max(1, policy.max_attempts)
    for attempt in range(attempts):
        try:
            return operation()
        except Exception as exc:
            logger.warning(
                "%s attempt %d/%d failed: %s",
                name,
                attempt + 1,
                attempts,
                exc,
            )
            if attempt == attempts - 1:
                logger.error("%s failed after %d attempts", name, attempts)
                raise
            sleep(policy.delay_for(attempt))
    raise AssertionError("unreachable")


def retry(
    policy: RetryPolicy | None = None,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator form of :func:`call_with_retry`, labelled by the function name."""

    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            return call_with_retry(
                lambda: fn(*args, **kwargs), policy, sleep=sleep, label=fn.__qualname__
            )

        return wrapper

    return decorator
