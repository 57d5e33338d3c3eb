"""Token-bucket rate limiting for ECS API calls."""

import threading
import time
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, TypeVar

from ecs_updater.utils.logging import get_logger

if TYPE_CHECKING:
    from ecs_updater.core.config import RateLimitsConfig

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable)

ECS_API = "ecs_api"


class TokenBucket:
    """Thread-safe token bucket.

    Holds up to ``capacity`` tokens refilled at ``refill_rate`` tokens per
    second; each call consumes one token and waits up to ``max_wait`` seconds
    when the bucket is empty.
    """

    def __init__(self, capacity: int, refill_rate: float, max_wait: float = 60.0):
        self.capacity = capacity
        self.refill_rate = refill_rate
        self.max_wait = max_wait

        self._tokens = float(capacity)
        self._lock = threading.Lock()
        self._last_refill = time.monotonic()

    def _refill(self) -> None:
        now = time.monotonic()
        self._tokens = min(self.capacity, self._tokens + (now - self._last_refill) * self.refill_rate)
        self._last_refill = now

    def acquire(self, tokens: int = 1, wait: bool = True) -> bool:
        """Acquire tokens from the bucket.

        Args:
            tokens: Number of tokens to acquire
            wait: Whether to wait for tokens if unavailable

        Returns:
            True if tokens acquired, False if not available and wait=False

        Raises:
            TimeoutError: If waiting exceeds max_wait
        """
        start_time = time.monotonic()

        while True:
            with self._lock:
                self._refill()
                if self._tokens >= tokens:
                    self._tokens -= tokens
                    return True

            if not wait:
                logger.warning("tokens_unavailable", requested=tokens)
                return False

            elapsed = time.monotonic() - start_time
            if elapsed >= self.max_wait:
                logger.error("token_acquisition_timeout", elapsed=elapsed, max_wait=self.max_wait)
                raise TimeoutError(f"Rate limit: waited {elapsed:.1f}s for tokens")

            time.sleep(0.1)

    def get_available_tokens(self) -> float:
        with self._lock:
            self._refill()
            return self._tokens


class RateLimiter:
    """Named collection of token buckets."""

    def __init__(self) -> None:
        self._limiters: dict[str, TokenBucket] = {}
        self._lock = threading.Lock()

    def register(self, name: str, capacity: int, refill_rate: float, max_wait: float = 60.0) -> None:
        """Register a bucket under ``name``; re-registering keeps the existing bucket."""
        with self._lock:
            if name in self._limiters:
                logger.debug("rate_limiter_already_registered", name=name)
                return

            self._limiters[name] = TokenBucket(
                capacity=capacity, refill_rate=refill_rate, max_wait=max_wait
            )
            logger.debug("rate_limiter_registered", name=name, capacity=capacity)

    def is_registered(self, name: str) -> bool:
        with self._lock:
            return name in self._limiters

    def acquire(self, name: str, tokens: int = 1, wait: bool = True) -> bool:
        """Acquire tokens from a named bucket.

        Raises:
            ValueError: If limiter not registered
            TimeoutError: If wait exceeds max_wait
        """
        with self._lock:
            if name not in self._limiters:
                raise ValueError(f"Rate limiter '{name}' not registered")
            limiter = self._limiters[name]

        return limiter.acquire(tokens=tokens, wait=wait)


_rate_limiter = RateLimiter()


def get_rate_limiter() -> RateLimiter:
    """Get the process-wide rate limiter."""
    return _rate_limiter


def initialize_rate_limiters(rate_limits: "RateLimitsConfig") -> None:
    """Register the ECS API bucket from configuration.

    Args:
        rate_limits: Requests-per-minute limits
    """
    get_rate_limiter().register(
        name=ECS_API,
        capacity=rate_limits.ecs_api,
        refill_rate=rate_limits.ecs_api / 60.0,
        max_wait=rate_limits.max_wait_seconds,
    )


def rate_limited(limiter_name: str, tokens: int = 1) -> Callable[[F], F]:
    """Decorator that takes a token from ``limiter_name`` before each call.

    Example:
        @rate_limited("ecs_api")
        def describe_services(...):
            ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs):
            get_rate_limiter().acquire(limiter_name, tokens=tokens, wait=True)
            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator
