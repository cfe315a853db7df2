"""
Retry Backoff
=============
Exponential backoff retry for transient storage failures.
"""

import random
import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional, Tuple, Type, TypeVar

import structlog

from ..exceptions import StorageError
from .exceptions import RetryExhausted

logger = structlog.get_logger(__name__)

T = TypeVar('T')


@dataclass
class RetryPolicy:
    """Backoff settings for retrying backend calls."""
    max_attempts: int = 3
    base_delay: float = 0.2
    max_delay: float = 5.0
    exponential_base: float = 2.0
    jitter: bool = True
    retryable_exceptions: Tuple[Type[Exception], ...] = (StorageError,)
    
    def delay_for(self, attempt: int) -> float:
        delay = min(
            self.base_delay * (self.exponential_base ** (attempt - 1)),
            self.max_delay,
        )
        if self.jitter:
            delay = delay * (0.5 + random.random())
        return delay


def retry_with_backoff(
    func: Callable[..., T],
    *args,
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs,
) -> T:
    """
    Execute a function with exponential backoff retry.
    
    Args:
        func: Function to execute
        *args: Positional arguments for func
        policy: Backoff settings (defaults to RetryPolicy())
        sleep: Delay function, replaceable in tests
        **kwargs: Keyword arguments for func
        
    Returns:
        Result of func
        
    Raises:
        RetryExhausted: If all attempts fail with a retryable error
    """
    policy = policy or RetryPolicy()
    retryable = tuple(policy.retryable_exceptions)
    name = getattr(func, "__name__", repr(func))
    last_exception = None
    
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return func(*args, **kwargs)
        except retryable as e:
            if not getattr(e, "retryable", True):
                raise
            last_exception = e
            
            if attempt == policy.max_attempts:
                logger.error(
                    "Retry exhausted",
                    func=name,
                    attempts=attempt,
                    error=str(e),
                )
                raise RetryExhausted(
                    f"Failed after {policy.max_attempts} attempts: {e}",
                    last_exception=e,
                ) from e
            
            delay = policy.delay_for(attempt)
            logger.warning(
                "Retrying after failure",
                func=name,
                attempt=attempt,
                delay=delay,
                error=str(e),
            )
            sleep(delay)
    
    raise RetryExhausted(f"Failed after {policy.max_attempts} attempts", last_exception)


def with_retry(policy: Optional[RetryPolicy] = None):
    """
    Decorator for retry with exponential backoff.
    
    Usage:
        @with_retry(RetryPolicy(max_attempts=5))
        def load_names(store):
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            return retry_with_backoff(func, *args, policy=policy, **kwargs)
        return wrapper
    return decorator
