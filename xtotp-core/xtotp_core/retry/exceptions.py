"""
Retry Exceptions
================
Exception classes for retry operations.
"""

from typing import Optional

from ..exceptions import StorageError


class RetryExhausted(StorageError):
    """Raised when all retry attempts against the backend have failed."""
    
    retryable = False
    
    def __init__(self, message: str, last_exception: Optional[Exception] = None):
        backend = getattr(last_exception, "backend", "unknown")
        key = getattr(last_exception, "key", None)
        super().__init__(message, backend=backend, key=key)
        self.last_exception = last_exception
