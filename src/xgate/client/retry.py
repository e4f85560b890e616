"""
Retry and backoff around transport calls

Rate-limit, retryable network and 5xx failures are retried with a delay;
every other failure surfaces on first occurrence.
"""

import time
import logging
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from xgate.config.xgate_config import ConfigDefaults, XGateConfig
from xgate.exceptions import (
    ApiError,
    NetworkError,
    RateLimitError,
    RetryExhaustedError,
    XGateError,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass
class RetryState:
    """Progress of one logical operation"""
    attempt: int
    max_attempts: int
    last_error: Optional[XGateError] = None

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts


class RetryPolicy:
    """
    Decides whether and how long to wait before retrying a failed call

    Delays are in seconds. Exponential backoff is
    ``min(base_delay * 2 ** attempt, max_delay)`` with a 0-based attempt,
    so the defaults wait 1s, 2s, 4s, ... never more than 30s.
    """

    def __init__(
        self,
        max_attempts: int = ConfigDefaults.MAX_ATTEMPTS,
        base_delay: float = ConfigDefaults.RETRY_DELAY / 1000.0,
        max_delay: float = ConfigDefaults.MAX_RETRY_DELAY / 1000.0,
        max_retry_after: float = ConfigDefaults.MAX_RETRY_AFTER,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.max_retry_after = max_retry_after
        self._sleep = sleep

    @classmethod
    def from_config(
        cls, config: XGateConfig, sleep: Callable[[float], None] = time.sleep
    ) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            base_delay=config.retry_delay / 1000.0,
            max_delay=config.max_retry_delay / 1000.0,
            max_retry_after=config.max_retry_after,
            sleep=sleep,
        )

    def backoff(self, attempt: int) -> float:
        return min(self.base_delay * (2 ** attempt), self.max_delay)

    def compute_delay(self, error: Exception, attempt: int) -> Optional[float]:
        """
        Seconds to wait before retrying after ``error``, or None to give up

        Args:
            error: Failure raised by the operation
            attempt: 0-based index of the attempt that failed
        """
        if isinstance(error, RateLimitError):
            if error.has_retry_after:
                if error.retry_after > self.max_retry_after:
                    return None
                return float(error.retry_after)
            return self.backoff(attempt)

        if isinstance(error, NetworkError):
            return self.backoff(attempt) if error.retryable else None

        if isinstance(error, ApiError) and error.is_server_error:
            return self.backoff(attempt)

        return None

    def execute(
        self,
        operation: Callable[[], T],
        max_attempts: Optional[int] = None,
    ) -> T:
        """
        Run ``operation`` until it succeeds or retries run out

        Raises:
            RetryExhaustedError: A retryable failure happened on the last
                allowed attempt
            XGateError: Any non-retryable failure, unchanged
        """
        state = RetryState(attempt=0, max_attempts=max_attempts or self.max_attempts)

        while True:
            try:
                return operation()
            except XGateError as e:
                state.last_error = e
                delay = self.compute_delay(e, state.attempt)
                if delay is None:
                    raise

                state.attempt += 1
                if state.exhausted:
                    logger.error(
                        f"Giving up after {state.attempt} attempts: {e}"
                    )
                    raise RetryExhaustedError(state.attempt, e) from e

                logger.warning(
                    f"Request failed (attempt {state.attempt}/{state.max_attempts}), "
                    f"retrying in {delay:.2f}s: {e}"
                )
                self._sleep(delay)
