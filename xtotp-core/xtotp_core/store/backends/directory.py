"""
Directory Backend
=================
File-per-key backend with atomic replace on write.
"""

import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import quote, unquote

import structlog

from ...exceptions import StorageError, ValidationError
from .base import BackendNamespace, SecureBackend

logger = structlog.get_logger(__name__)

BLOB_SUFFIX = ".entry"
TEMP_SUFFIX = ".partial"

# Common filesystem limit on a single path component
MAX_FILENAME_BYTES = 255


def _filename(key: str) -> str:
    return quote(key, safe="") + BLOB_SUFFIX


def _fits(key: str) -> bool:
    return len(_filename(key).encode("ascii")) <= MAX_FILENAME_BYTES


class DirectoryNamespace(BackendNamespace):
    """
    One directory per namespace, one file per key.
    
    Writes go to a temp file in the same directory which is fsynced and
    then renamed over the target with os.replace.
    """
    
    def __init__(self, namespace: str, path: Path):
        self.namespace = namespace
        self.path = path
    
    def _error(self, action: str, key: Optional[str], exc: OSError) -> StorageError:
        logger.error(
            "Directory backend failure",
            action=action,
            namespace=self.namespace,
            key=key,
            error=str(exc),
        )
        return StorageError(f"{action} failed: {exc}", backend="directory", key=key)
    
    def get(self, key: str) -> Optional[bytes]:
        if not _fits(key):
            return None
        try:
            return (self.path / _filename(key)).read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise self._error("read", key, e) from e
    
    def put(self, key: str, blob: bytes) -> None:
        if not _fits(key):
            raise ValidationError(
                f"Entry name is too long for a {MAX_FILENAME_BYTES}-byte filename once encoded",
                field="name",
            )
        target = self.path / _filename(key)
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.path, prefix=".", suffix=TEMP_SUFFIX)
            with os.fdopen(fd, "wb") as f:
                f.write(blob)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, target)
            tmp_path = None
        except OSError as e:
            raise self._error("write", key, e) from e
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.warning("Could not remove temp file", path=tmp_path)
    
    def delete(self, key: str) -> bool:
        if not _fits(key):
            return False
        try:
            os.remove(self.path / _filename(key))
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise self._error("delete", key, e) from e
    
    def keys(self) -> List[str]:
        try:
            names = os.listdir(self.path)
        except OSError as e:
            raise self._error("list", None, e) from e
        return [
            unquote(name[:-len(BLOB_SUFFIX)])
            for name in names
            if name.endswith(BLOB_SUFFIX)
        ]


class DirectoryBackend(SecureBackend):
    """
    Local directory backend.
    
    Does not encrypt blobs; point it at an encrypted volume or use
    VaultBackend where at-rest protection is required.
    """
    
    name = "directory"
    
    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
    
    def open(self, namespace: str) -> DirectoryNamespace:
        path = self.root / quote(namespace, safe="")
        try:
            path.mkdir(parents=True, exist_ok=True, mode=0o700)
        except OSError as e:
            raise StorageError(f"Cannot open namespace {namespace!r}: {e}", backend=self.name) from e
        return DirectoryNamespace(namespace, path)
