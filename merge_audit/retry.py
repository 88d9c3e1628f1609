"""Retry policy with exponential backoff for GitHub API calls."""

import logging
import time
from typing import Callable, TypeVar

from .errors import (
    ApiError,
    PermanentApiError,
    RateLimitedError,
    RetriesExhaustedError,
    TransientNetworkError,
)

MAX_ATTEMPTS = 5
BASE_DELAY_SECONDS = 5

RATE_LIMITED = 'rate_limited'
TRANSIENT = 'transient'
PERMANENT = 'permanent'

RATE_LIMIT_PHRASES = (
    'rate limit',
    'secondary rate limit',
    'abuse detection',
    'too many requests',
)

NETWORK_ERROR_PHRASES = (
    'connection reset',
    'connection refused',
    'connection aborted',
    'eof',
    'timeout',
    'timed out',
    'tls handshake',
    'service unavailable',
    'bad gateway',
    'gateway timeout',
    'broken pipe',
)

T = TypeVar('T')


def classify_error(text: str) -> str:
    """Classify an error message as RATE_LIMITED, TRANSIENT or PERMANENT."""
    lowered = (text or '').lower()
    if any(phrase in lowered for phrase in RATE_LIMIT_PHRASES):
        return RATE_LIMITED
    if any(phrase in lowered for phrase in NETWORK_ERROR_PHRASES):
        return TRANSIENT
    return PERMANENT


def error_from_text(text: str) -> ApiError:
    """Build the ApiError subclass matching the classification of text."""
    kind = classify_error(text)
    if kind == RATE_LIMITED:
        return RateLimitedError(text)
    if kind == TRANSIENT:
        return TransientNetworkError(text)
    return PermanentApiError(text)


class RetryPolicy:
    """Runs an operation, retrying rate-limit and network failures.

    The delay starts at ``base_delay`` seconds and doubles after every failed
    attempt. Errors classified as permanent are raised immediately.
    """

    def __init__(self, max_attempts: int = MAX_ATTEMPTS, base_delay: float = BASE_DELAY_SECONDS,
                 classifier: Callable[[str], str] = classify_error,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize the retry policy.

        Args:
            max_attempts: Total number of attempts, including the first one
            base_delay: Seconds to wait after the first failure
            classifier: Maps an error message to RATE_LIMITED, TRANSIENT or PERMANENT
            sleep: Function used to wait between attempts (replaced in tests)
        """
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.classifier = classifier
        self.sleep = sleep

    def call(self, operation: Callable[[], T], description: str = 'API call') -> T:
        """Run operation until it succeeds or the policy gives up.

        Args:
            operation: Zero-argument callable performing one attempt
            description: Human-readable name used in log messages

        Returns:
            Whatever operation returns on its first successful attempt

        Raises:
            PermanentApiError: On the first non-retryable failure
            RetriesExhaustedError: If every attempt failed with a retryable error
        """
        delay = self.base_delay
        last_error = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return operation()
            except ApiError as e:
                kind = self.classifier(str(e))
                if kind == PERMANENT:
                    logging.error(f"{description} failed: {e}")
                    if isinstance(e, PermanentApiError):
                        raise
                    raise PermanentApiError(str(e)) from e

                last_error = e
                if attempt == self.max_attempts:
                    break

                label = 'Rate limited' if kind == RATE_LIMITED else 'Network error'
                logging.warning(f"{label} on {description}; retrying in {delay}s "
                                f"(attempt {attempt}/{self.max_attempts})")
                self.sleep(delay)
                delay *= 2

        logging.error(f"{description} failed after {self.max_attempts} attempts")
        raise RetriesExhaustedError(
            f"{description} failed after {self.max_attempts} attempts: {last_error}"
        ) from last_error
