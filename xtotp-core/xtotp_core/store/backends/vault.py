"""
HashiCorp Vault Backend
=======================

Stores each credential entry as a KV v2 secret.

Usage:
    from xtotp_core.store import CredentialStore, VaultBackend
    
    backend = VaultBackend(url="https://vault.example.com", token="...")
    store = CredentialStore(backend)
    
    # Secrets land at <mount_point>/<namespace>/<quoted name>
    store.save(entry)
"""

import base64
import binascii
import logging
import os
from typing import Any, Dict, List, Optional
from urllib.parse import quote, unquote

import hvac
import hvac.exceptions
import requests

from ...exceptions import StorageError
from .base import BackendNamespace, SecureBackend

logger = logging.getLogger(__name__)

BLOB_FIELD = "blob"

# Vault or transport faults; InvalidPath is handled separately as "absent"
_BACKEND_ERRORS = (hvac.exceptions.VaultError, requests.exceptions.RequestException)


class VaultNamespace(BackendNamespace):
    
    def __init__(self, backend: "VaultBackend", namespace: str):
        self.backend = backend
        self.namespace = namespace
    
    def _path(self, key: str) -> str:
        return f"{self.namespace}/{quote(key, safe='')}"
    
    def _error(self, action: str, key: Optional[str], exc: Exception) -> StorageError:
        logger.error(
            f"Vault {action} failed at {self.backend.mount_point}/{self.namespace}: "
            f"{type(exc).__name__}"
        )
        return StorageError(f"{action} failed: {type(exc).__name__}: {exc}", backend="vault", key=key)
    
    def get(self, key: str) -> Optional[bytes]:
        try:
            secret = self.backend.client.secrets.kv.v2.read_secret_version(
                path=self._path(key),
                mount_point=self.backend.mount_point,
                raise_on_deleted_version=True,
            )
        except hvac.exceptions.InvalidPath:
            return None
        except _BACKEND_ERRORS as e:
            raise self._error("read", key, e) from e
        
        data: Dict[str, Any] = secret["data"]["data"]
        try:
            return base64.b64decode(data[BLOB_FIELD], validate=True)
        except (KeyError, TypeError, binascii.Error):
            # Unreadable payload is corruption, left for the codec to reject
            logger.warning(f"Vault secret for {self.namespace} has no valid '{BLOB_FIELD}' field")
            return b""
    
    def put(self, key: str, blob: bytes) -> None:
        try:
            self.backend.client.secrets.kv.v2.create_or_update_secret(
                path=self._path(key),
                secret={BLOB_FIELD: base64.b64encode(blob).decode("ascii")},
                mount_point=self.backend.mount_point,
            )
        except _BACKEND_ERRORS as e:
            raise self._error("write", key, e) from e
    
    def delete(self, key: str) -> bool:
        if self.get(key) is None:
            return False
        try:
            self.backend.client.secrets.kv.v2.delete_metadata_and_all_versions(
                path=self._path(key),
                mount_point=self.backend.mount_point,
            )
        except hvac.exceptions.InvalidPath:
            return False
        except _BACKEND_ERRORS as e:
            raise self._error("delete", key, e) from e
        return True
    
    def keys(self) -> List[str]:
        try:
            response = self.backend.client.secrets.kv.v2.list_secrets(
                path=self.namespace,
                mount_point=self.backend.mount_point,
            )
        except hvac.exceptions.InvalidPath:
            # Vault reports an empty folder as a missing path
            return []
        except _BACKEND_ERRORS as e:
            raise self._error("list", None, e) from e
        
        return [
            unquote(name)
            for name in response["data"]["keys"]
            if not name.endswith("/")
        ]


class VaultBackend(SecureBackend):
    """HashiCorp Vault KV v2 backend for credential entries."""
    
    name = "vault"
    
    def __init__(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        mount_point: str = "secret",
        timeout: float = 10.0,
        client: Optional[hvac.Client] = None,
    ):
        self.url = url or os.environ.get("VAULT_ADDR", "http://127.0.0.1:8200")
        self.token = token or os.environ.get("VAULT_TOKEN")
        self.mount_point = mount_point
        self.timeout = timeout
        self._client: Optional[hvac.Client] = client
    
    @property
    def client(self) -> hvac.Client:
        """Lazy-loaded Vault client."""
        if self._client is None:
            client = hvac.Client(url=self.url, token=self.token, timeout=self.timeout)
            try:
                authenticated = client.is_authenticated()
            except _BACKEND_ERRORS as e:
                raise StorageError(f"Vault unreachable at {self.url}: {e}", backend=self.name) from e
            if not authenticated:
                raise StorageError("Vault authentication failed. Check VAULT_TOKEN.", backend=self.name)
            self._client = client
        return self._client
    
    def open(self, namespace: str) -> VaultNamespace:
        return VaultNamespace(self, namespace)
