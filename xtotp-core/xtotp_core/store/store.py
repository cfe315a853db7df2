"""
Credential Store
================
Named credential entries persisted in a secure key-value namespace.
"""

from typing import List, Optional

import structlog

from ..entries.codec import decode_entry, encode_entry
from ..entries.models import CredentialEntry
from ..entries.provisioning import parse_otpauth_uri
from ..exceptions import DecodeError, EntryNotFound, ValidationError
from .backends.base import BackendNamespace, SecureBackend

logger = structlog.get_logger(__name__)

DEFAULT_NAMESPACE = "xtotp.otp_entries"


def _check_name(name: str) -> str:
    if not isinstance(name, str) or not name:
        raise ValidationError("Entry name must be a non-empty string", field="name")
    return name


class CredentialStore:
    """
    CRUD and enumeration over credential entries.
    
    Each entry is encoded once and handed to the backend as a single blob,
    so the backend's per-key atomic publish is never split across calls.
    Returned entries are fresh decoded values; the store holds no reference
    to them afterwards.
    """
    
    def __init__(self, backend: SecureBackend, namespace: str = DEFAULT_NAMESPACE):
        self.backend = backend
        self.namespace = namespace
        self._dict: BackendNamespace = backend.open(namespace)
    
    def put(self, name: str, entry: CredentialEntry) -> None:
        """
        Create or overwrite the entry stored under name.
        
        Args:
            name: Storage key; must equal entry.name
            entry: Entry to persist
            
        Raises:
            ValidationError: If name and entry.name differ
            StorageError: If the backend write fails
        """
        _check_name(name)
        if not isinstance(entry, CredentialEntry):
            raise ValidationError(f"Expected CredentialEntry, got {type(entry).__name__}")
        if entry.name != name:
            raise ValidationError(
                f"Entry name {entry.name!r} does not match key {name!r}", field="name"
            )
        
        blob = encode_entry(entry)
        self._dict.put(name, blob)
        logger.info(
            "Credential entry stored",
            namespace=self.namespace,
            entry=name,
            algorithm=entry.algorithm.value,
            digits=entry.digit_count,
            step=entry.step_seconds,
        )
    
    def save(self, entry: CredentialEntry) -> None:
        """Store an entry under its own name."""
        self.put(entry.name, entry)
    
    def get(self, name: str) -> CredentialEntry:
        """
        Load and decode one entry.
        
        Raises:
            EntryNotFound: If no entry is stored under name
            DecodeError: If the stored blob is malformed
            StorageError: If the backend read fails
        """
        _check_name(name)
        blob = self._dict.get(name)
        if blob is None:
            raise EntryNotFound(name)
        
        try:
            entry = decode_entry(blob)
        except DecodeError as e:
            logger.warning(
                "Stored credential entry is unreadable",
                namespace=self.namespace,
                entry=name,
                error=str(e),
            )
            raise
        
        if entry.name != name:
            logger.warning(
                "Stored credential entry name mismatch",
                namespace=self.namespace,
                entry=name,
            )
            raise DecodeError(f"Blob under {name!r} holds an entry named {entry.name!r}")
        return entry
    
    def find(self, name: str) -> Optional[CredentialEntry]:
        """Like get, but returns None instead of raising EntryNotFound."""
        try:
            return self.get(name)
        except EntryNotFound:
            return None
    
    def exists(self, name: str) -> bool:
        _check_name(name)
        return self._dict.get(name) is not None
    
    def list(self) -> List[str]:
        """Names of every stored entry, sorted."""
        return sorted(self._dict.keys())
    
    def delete(self, name: str) -> None:
        """
        Remove an entry.
        
        Raises:
            EntryNotFound: If no entry is stored under name
        """
        _check_name(name)
        if not self._dict.delete(name):
            raise EntryNotFound(name)
        logger.info("Credential entry deleted", namespace=self.namespace, entry=name)
    
    def load_all(self) -> List[CredentialEntry]:
        """Decode every stored entry in name order. Errors propagate."""
        return [self.get(name) for name in self.list()]
    
    def import_uri(self, uri: str, overwrite: bool = True) -> CredentialEntry:
        """
        Provision an entry from an otpauth://totp/ URI.
        
        Args:
            uri: Provisioning URI (contains the secret; never logged)
            overwrite: Replace an existing entry with the same name
            
        Returns:
            The stored entry
        """
        entry = parse_otpauth_uri(uri)
        if not overwrite and self.exists(entry.name):
            raise ValidationError(f"Entry {entry.name!r} already exists", field="name")
        self.save(entry)
        return entry
