"""
In-Memory Backend
=================
Process-local backend for development and testing.
"""

import threading
from typing import Dict, List, Optional

from .base import BackendNamespace, SecureBackend


class InMemoryNamespace(BackendNamespace):
    
    def __init__(self, namespace: str, blobs: Dict[str, bytes], lock: threading.Lock):
        self.namespace = namespace
        self._blobs = blobs
        self._lock = lock
    
    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._blobs.get(key)
    
    def put(self, key: str, blob: bytes) -> None:
        # bytes() copies, so later mutation of a caller's bytearray is not visible
        data = bytes(blob)
        with self._lock:
            self._blobs[key] = data
    
    def delete(self, key: str) -> bool:
        with self._lock:
            return self._blobs.pop(key, None) is not None
    
    def keys(self) -> List[str]:
        with self._lock:
            return list(self._blobs)


class InMemoryBackend(SecureBackend):
    """
    Simple in-memory backend.
    
    For development and testing only.
    Use VaultBackend or DirectoryBackend for persistent storage.
    """
    
    name = "memory"
    
    def __init__(self):
        self._namespaces: Dict[str, Dict[str, bytes]] = {}
        self._lock = threading.Lock()
    
    def open(self, namespace: str) -> InMemoryNamespace:
        with self._lock:
            blobs = self._namespaces.setdefault(namespace, {})
        return InMemoryNamespace(namespace, blobs, self._lock)
