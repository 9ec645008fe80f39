# common/retry_utils.py
# -*- coding: utf-8 -*-
"""
Fixed-interval polling with a bounded number of attempts.

Every wait in the setup scripts (daemon config file, API key, daemon
readiness, Xcode tools, folder convergence) goes through `retry`.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

module_logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollTimeoutError(RuntimeError):
    """Raised when a polled operation never produced a value."""

    def __init__(self, description: str, attempts: int):
        super().__init__(
            f"Timed out waiting for {description} after {attempts} attempts"
        )
        self.description = description
        self.attempts = attempts


def retry(
    operation: Callable[[], Optional[T]],
    interval: float,
    max_attempts: Optional[int],
    description: str = "operation",
    sleep: Callable[[float], None] = time.sleep,
    on_waiting: Optional[Callable[[int], None]] = None,
    current_logger: Optional[logging.Logger] = None,
) -> T:
    """
    Call `operation` until it returns something other than None.

    Args:
        operation: Zero-argument callable. None means "not ready yet".
        interval: Seconds to sleep between attempts.
        max_attempts: Maximum number of calls. None polls indefinitely.
        description: Human-readable name used in logs and the timeout error.
        sleep: Sleep function, injectable for tests.
        on_waiting: Called with the attempt number after each unsuccessful attempt.
        current_logger: Optional logger.

    Returns:
        The first non-None value returned by `operation`.

    Raises:
        PollTimeoutError: If `max_attempts` calls all returned None.
    """
    logger_to_use = current_logger if current_logger else module_logger
    attempt = 0
    while max_attempts is None or attempt < max_attempts:
        attempt += 1
        result = operation()
        if result is not None:
            logger_to_use.debug(
                f"{description} ready after {attempt} attempt(s)"
            )
            return result
        if on_waiting is not None:
            on_waiting(attempt)
        if max_attempts is not None and attempt >= max_attempts:
            break
        sleep(interval)

    raise PollTimeoutError(description, attempt)
