"""
Xtotp Exceptions
================
Error taxonomy shared by the codec, engine and credential store.
"""

from typing import Optional


class XtotpError(Exception):
    """Base exception for all xtotp-core errors."""
    pass


class ValidationError(XtotpError, ValueError):
    """Raised when entry fields or provisioning input violate an invariant."""
    
    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class DecodeError(XtotpError):
    """Raised when persisted bytes are malformed, truncated or of an unknown version."""
    pass


class StorageError(XtotpError):
    """Raised when the secure key-value backend fails (unavailable, permission, capacity)."""
    
    retryable = True
    
    def __init__(self, message: str, backend: str = "unknown", key: Optional[str] = None):
        self.message = message
        self.backend = backend
        self.key = key
        super().__init__(f"[{backend}] {message}")


class EngineError(XtotpError):
    """Raised when the HMAC construction rejects its input or the algorithm is unsupported."""
    pass


class EntryNotFound(XtotpError, KeyError):
    """Raised when no credential entry exists under the requested name."""
    
    def __init__(self, name: str):
        self.name = name
        super().__init__(name)
    
    def __str__(self) -> str:
        return f"No credential entry named {self.name!r}"
