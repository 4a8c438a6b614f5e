"""
Bounded in-process retry with exponential backoff.

The retry policy is an explicit value passed to callers instead of being
inherited from whatever the queue broker does. It is unaware of, and
independent from, broker-level redelivery.

The sleep function is injectable so backoff timing can be asserted
deterministically in tests.

Usage:
    from core.retry import RetryPolicy, call_with_retries

    policy = RetryPolicy(max_attempts=5, initial_delay_ms=1000)
    policy.delays_ms()  # [1000, 2000, 4000, 8000]

    data = call_with_retries(lambda: client.get(url), policy)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetriesExhaustedError(Exception):
    """Raised when every attempt failed without capturing an error."""


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry parameters.

    Attributes:
        max_attempts: Total attempts including the first one
        initial_delay_ms: Delay after the first failed attempt
        multiplier: Growth factor between consecutive delays
    """

    max_attempts: int = 5
    initial_delay_ms: int = 1000
    multiplier: int = 2

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay_ms < 0:
            raise ValueError("initial_delay_ms must not be negative")

    def delay_ms(self, attempt: int) -> int:
        """
        Delay to wait after failed ``attempt`` (1-indexed).

        No jitter: attempt 1 -> 1000, attempt 2 -> 2000, attempt 3 -> 4000.
        """
        return self.initial_delay_ms * self.multiplier ** (attempt - 1)

    def delays_ms(self) -> list[int]:
        """Every delay the policy can produce, in order."""
        return [self.delay_ms(attempt) for attempt in range(1, self.max_attempts)]


def call_with_retries(
    func: Callable[[], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
    description: str = "call",
) -> T:
    """
    Call ``func`` until it succeeds or the policy's attempts run out.

    Args:
        func: Zero-argument callable to attempt
        policy: Attempt bound and backoff parameters
        sleep: Sleep function taking seconds (injectable for tests)
        description: Short label used in log lines

    Returns:
        The first successful return value of ``func``

    Raises:
        The last exception raised by ``func`` once attempts are exhausted.
    """
    last_error: Exception | None = None

    for attempt in range(1, policy.max_attempts + 1):
        try:
            logger.debug(f"{description}: attempt {attempt}/{policy.max_attempts}")
            return func()
        except Exception as exc:
            last_error = exc
            if attempt >= policy.max_attempts:
                break
            delay_ms = policy.delay_ms(attempt)
            logger.info(
                f"{description} failed on attempt {attempt}, "
                f"retrying in {delay_ms}ms: {exc}"
            )
            sleep(delay_ms / 1000)

    logger.error(
        f"{description} failed after {policy.max_attempts} attempts "
        f"(error captured: {last_error is not None})"
    )
    if last_error is not None:
        raise last_error
    raise RetriesExhaustedError(f"{description} failed after retries")
