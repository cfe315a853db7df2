"""
Credential Storage
==================
Credential store and its secure key-value backends.
"""

from .store import CredentialStore, DEFAULT_NAMESPACE
from .backends import (
    BackendNamespace,
    SecureBackend,
    InMemoryBackend,
    DirectoryBackend,
    VaultBackend,
)

__all__ = [
    # Store
    "CredentialStore",
    "DEFAULT_NAMESPACE",
    # Backends
    "BackendNamespace",
    "SecureBackend",
    "InMemoryBackend",
    "DirectoryBackend",
    "VaultBackend",
]
