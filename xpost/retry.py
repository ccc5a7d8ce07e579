from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from .config_schema import RetrySettings

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """
    Exponential backoff retry policy for upstream HTTP calls.

    - max_attempts counts the initial attempt (max_attempts=3 => 1 try + 2 retries).
    - base_delay_seconds is the first delay after the first failure.
    - jitter_ratio adds multiplicative jitter in [1-jitter, 1+jitter].
    - retry_after_cap_seconds caps any Retry-After override (0 disables the cap).
    """

    max_attempts: int = 4
    base_delay_seconds: float = 0.5
    max_delay_seconds: float = 10.0
    jitter_ratio: float = 0.25
    retry_after_cap_seconds: float = 60.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay_seconds < 0:
            raise ValueError("base_delay_seconds must be >= 0")
        if self.max_delay_seconds < self.base_delay_seconds:
            raise ValueError("max_delay_seconds must be >= base_delay_seconds")
        if not (0.0 <= self.jitter_ratio <= 1.0):
            raise ValueError("jitter_ratio must be between 0 and 1")
        if self.retry_after_cap_seconds < 0:
            raise ValueError("retry_after_cap_seconds must be >= 0")

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> "RetryConfig":
        return cls(
            max_attempts=settings.max_attempts,
            base_delay_seconds=settings.base_delay_seconds,
            max_delay_seconds=settings.max_delay_seconds,
        )


@dataclass(frozen=True)
class RetryEvent:
    operation: str
    failure_attempt: int
    next_attempt: int
    max_attempts: int

    delay_seconds: float
    retry_after_seconds: float | None
    reason: str | None

    error_type: str
    error_message: str


IsRetryableFn = Callable[[BaseException], tuple[bool, float | None, str | None]]
OnRetryFn = Callable[[RetryEvent], None]
SleepFn = Callable[[float], None]


def backoff_seconds(failure_attempt: int, cfg: RetryConfig) -> float:
    # failure_attempt=1 => base delay.
    exponent = max(0, int(failure_attempt) - 1)
    delay = cfg.base_delay_seconds * (2**exponent)
    return min(cfg.max_delay_seconds, max(0.0, float(delay)))


def _jittered(delay: float, cfg: RetryConfig) -> float:
    if delay <= 0.0 or cfg.jitter_ratio <= 0:
        return max(0.0, delay)
    return max(0.0, delay * random.uniform(1.0 - cfg.jitter_ratio, 1.0 + cfg.jitter_ratio))


def _capped_retry_after(value: float | None, cfg: RetryConfig) -> float | None:
    if value is None or value < 0:
        return None
    if cfg.retry_after_cap_seconds > 0:
        return min(float(value), cfg.retry_after_cap_seconds)
    return float(value)


def call_with_retries(
    fn: Callable[[], T],
    *,
    cfg: RetryConfig,
    is_retryable: IsRetryableFn,
    operation: str,
    on_retry: OnRetryFn | None = None,
    sleep_fn: SleepFn | None = None,
) -> T:
    """
    Call fn() and retry while is_retryable(exc) says so, up to cfg.max_attempts.

    The delay is the exponential backoff, raised to any Retry-After hint, then jittered.
    The last failure is re-raised unchanged.
    """
    op = (operation or "").strip() or "operation"
    sleeper = sleep_fn or time.sleep

    attempt = 1
    while True:
        try:
            return fn()
        except Exception as exc:
            retryable, retry_after, reason = is_retryable(exc)
            if not retryable or attempt >= cfg.max_attempts:
                raise

            hint = _capped_retry_after(retry_after, cfg)
            delay = backoff_seconds(attempt, cfg)
            if hint is not None:
                delay = max(delay, hint)
            delay = _jittered(delay, cfg)

            if on_retry is not None:
                on_retry(
                    RetryEvent(
                        operation=op,
                        failure_attempt=attempt,
                        next_attempt=attempt + 1,
                        max_attempts=cfg.max_attempts,
                        delay_seconds=delay,
                        retry_after_seconds=hint,
                        reason=reason,
                        error_type=type(exc).__name__,
                        error_message=(str(exc) or "").strip(),
                    )
                )

            if delay > 0:
                sleeper(delay)
            attempt += 1
