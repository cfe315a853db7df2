"""
Credential Entry Codec
======================
Compact, versioned binary encoding for persisted credential entries.

Layout (format version 1, all integers big-endian):

    offset  size  field
    0       1     format version (0x01)
    1       1     algorithm tag (1=SHA1, 2=SHA256, 3=SHA512)
    2       2     step_seconds (u16)
    4       1     digit_count (u8)
    5       2     name length N (u16)
    7       N     name (UTF-8)
    7+N     2     secret length S (u16)
    9+N     S     shared secret

Changing this layout breaks every persisted entry. New layouts must
take a new version number and keep decoding the old ones.
"""

import struct

from ..exceptions import DecodeError, ValidationError
from .models import CredentialEntry, TotpAlgorithm

FORMAT_VERSION = 1

_HEADER = struct.Struct(">BBHB")
_LENGTH = struct.Struct(">H")


def encode_entry(entry: CredentialEntry) -> bytes:
    """
    Encode a credential entry into a single self-contained buffer.
    
    Args:
        entry: A validated credential entry
        
    Returns:
        Encoded bytes, written to the backend in one call
    """
    if not isinstance(entry, CredentialEntry):
        raise ValidationError(f"Expected CredentialEntry, got {type(entry).__name__}")
    
    name = entry.name.encode("utf-8")
    return b"".join((
        _HEADER.pack(FORMAT_VERSION, entry.algorithm.tag, entry.step_seconds, entry.digit_count),
        _LENGTH.pack(len(name)),
        name,
        _LENGTH.pack(len(entry.shared_secret)),
        entry.shared_secret,
    ))


class _Reader:
    """Bounds-checked cursor over an encoded buffer."""
    
    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0
    
    def take(self, size: int, what: str) -> bytes:
        end = self.pos + size
        if end > len(self.data):
            raise DecodeError(
                f"Truncated entry: need {size} bytes for {what} at offset {self.pos}, "
                f"have {len(self.data) - self.pos}"
            )
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk
    
    def unpack(self, fmt: struct.Struct, what: str) -> tuple:
        return fmt.unpack(self.take(fmt.size, what))
    
    def take_prefixed(self, what: str) -> bytes:
        (length,) = self.unpack(_LENGTH, f"{what} length")
        return self.take(length, what)


def decode_entry(data: bytes) -> CredentialEntry:
    """
    Decode and validate a persisted credential entry.
    
    Args:
        data: Bytes previously produced by encode_entry
        
    Returns:
        A CredentialEntry satisfying every entry invariant
        
    Raises:
        DecodeError: If the buffer is empty, truncated, has trailing bytes,
            an unknown version or algorithm tag, or invalid field values
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise DecodeError(f"Expected bytes, got {type(data).__name__}")
    reader = _Reader(bytes(data))
    if not reader.data:
        raise DecodeError("Empty entry buffer")
    
    version, tag, step_seconds, digit_count = reader.unpack(_HEADER, "header")
    if version != FORMAT_VERSION:
        raise DecodeError(f"Unsupported entry format version: {version}")
    
    try:
        algorithm = TotpAlgorithm.from_tag(tag)
    except ValidationError as e:
        raise DecodeError(str(e)) from e
    
    raw_name = reader.take_prefixed("name")
    secret = reader.take_prefixed("shared secret")
    
    if reader.pos != len(reader.data):
        raise DecodeError(f"{len(reader.data) - reader.pos} trailing bytes after entry")
    
    try:
        name = raw_name.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError("Entry name is not valid UTF-8") from e
    
    try:
        return CredentialEntry(
            name=name,
            shared_secret=secret,
            algorithm=algorithm,
            digit_count=digit_count,
            step_seconds=step_seconds,
        )
    except ValidationError as e:
        raise DecodeError(f"Invalid entry field {e.field}: {e}") from e
