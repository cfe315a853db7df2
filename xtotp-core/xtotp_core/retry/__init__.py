"""
Retry Logic with Exponential Backoff
=====================================
Retry mechanism for transient storage failures.
"""

# Re-export all public APIs
from .exceptions import RetryExhausted
from .backoff import RetryPolicy, retry_with_backoff, with_retry

__all__ = [
    # Exceptions
    "RetryExhausted",
    # Backoff
    "RetryPolicy",
    "retry_with_backoff",
    "with_retry",
]
