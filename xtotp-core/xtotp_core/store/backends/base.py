"""
Secure Backend Interface
========================
Narrow contract the credential store uses to reach a secure key-value backend.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class BackendNamespace(ABC):
    """
    A namespace ("dictionary") of named binary blobs.
    
    Implementations must publish each put atomically: a reader sees either
    the previous blob or the new one, never a partial write.
    """
    
    namespace: str
    
    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the blob stored under key, or None if absent."""
    
    @abstractmethod
    def put(self, key: str, blob: bytes) -> None:
        """Create or replace the blob stored under key."""
    
    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove key. Returns False if it was absent."""
    
    @abstractmethod
    def keys(self) -> List[str]:
        """List every key in the namespace."""


class SecureBackend(ABC):
    """Factory for backend namespaces."""
    
    name: str = "backend"
    
    @abstractmethod
    def open(self, namespace: str) -> BackendNamespace:
        """Open (creating if needed) a namespace."""
