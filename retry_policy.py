import logging
import time
from typing import Callable, TypeVar

from gemini_client import UpstreamCallFailure

logger = logging.getLogger("gemini_relay.retry")

T = TypeVar("T")


def is_retryable(error: UpstreamCallFailure) -> bool:
    # network failures carry no status
    if error.status_code is None:
        return True
    return error.status_code == 429 or error.status_code >= 500


class RetryPolicy:
    """Bounded retry with exponential backoff. max_attempts=1 means a single call."""

    def __init__(self, max_attempts: int = 1, backoff_seconds: float = 0.5, sleep: Callable[[float], None] = time.sleep):
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds
        self.sleep = sleep

    def call(self, fn: Callable[..., T], *args) -> T:
        attempt = 1
        while True:
            try:
                return fn(*args)
            except UpstreamCallFailure as e:
                if attempt >= self.max_attempts or not is_retryable(e):
                    raise
                delay = self.backoff_seconds * 2 ** (attempt - 1)
                logger.warning("Attempt %d/%d failed (%s), retrying in %.2fs", attempt, self.max_attempts, e, delay)
                self.sleep(delay)
                attempt += 1
