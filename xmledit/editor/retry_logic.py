"""Bounded retry for actions that wait on content becoming available.

This module provides retry_until_ready, used after a document is loaded
to refresh the revision list once content is present. It polls a readiness
check at a fixed interval (5 attempts, 100 ms apart) and gives up silently
with a debug log when the content never becomes ready.
"""

import logging
import time
from functools import wraps
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_ATTEMPTS = 5
RETRY_DELAY = 0.1


def retry_until_ready(
    is_ready: Callable[[], bool],
    action: Callable[[], T],
    max_attempts: int = MAX_ATTEMPTS,
    delay: float = RETRY_DELAY,
) -> Optional[T]:
    """Run action once is_ready() returns True, polling a bounded number of times.

    Args:
        is_ready: Readiness check evaluated before each attempt
        action: Function to run once ready
        max_attempts: Total number of readiness checks
        delay: Seconds to wait between checks

    Returns:
        The return value of action, or None if never ready

    Example:
        >>> retry_until_ready(lambda: bool(session.xml), session.refresh_revisions)
    """
    for attempt in range(1, max_attempts + 1):
        logger.debug(f"Readiness check attempt {attempt}/{max_attempts}")
        if is_ready():
            return action()
        if attempt < max_attempts:
            time.sleep(delay)

    logger.debug("Max attempts reached, giving up")
    return None


def when_ready(is_ready: Callable[..., bool], max_attempts: int = MAX_ATTEMPTS,
               delay: float = RETRY_DELAY):
    """Decorator version of retry_until_ready for methods.

    The readiness check receives the same arguments as the decorated
    function.

    Example:
        >>> class Panel:
        ...     @when_ready(lambda self: bool(self.content))
        ...     def refresh(self):
        ...         ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., Optional[T]]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Optional[T]:
            return retry_until_ready(
                lambda: is_ready(*args, **kwargs),
                lambda: func(*args, **kwargs),
                max_attempts=max_attempts,
                delay=delay,
            )
        return wrapper
    return decorator
