"""Secure key-value backends for the credential store."""

from .base import BackendNamespace, SecureBackend
from .memory import InMemoryBackend
from .directory import DirectoryBackend
from .vault import VaultBackend

__all__ = [
    "BackendNamespace",
    "SecureBackend",
    "InMemoryBackend",
    "DirectoryBackend",
    "VaultBackend",
]
