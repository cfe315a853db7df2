"""
Credential Entry Models
=======================
Data models and enums for configured TOTP credential entries.
"""

import hashlib
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict

from ..exceptions import ValidationError

MIN_DIGITS = 1
MAX_DIGITS = 9  # 10**10 exceeds the 31-bit truncation output
MAX_STEP_SECONDS = 0xFFFF
MAX_FIELD_BYTES = 0xFFFF

DEFAULT_DIGITS = 6
DEFAULT_STEP_SECONDS = 30


class TotpAlgorithm(str, Enum):
    """HMAC variants supported by the OTP engine."""
    HMAC_SHA1 = "HMAC-SHA1"
    HMAC_SHA256 = "HMAC-SHA256"
    HMAC_SHA512 = "HMAC-SHA512"
    
    @property
    def tag(self) -> int:
        """Wire tag written by the binary codec."""
        return _ALGORITHM_TAGS[self]
    
    @property
    def hash_factory(self) -> Callable:
        return _HASH_FACTORIES[self]
    
    @property
    def digest_size(self) -> int:
        return _DIGEST_SIZES[self]
    
    @property
    def short_name(self) -> str:
        """Name used in otpauth URIs (SHA1, SHA256, SHA512)."""
        return self.value.split("-", 1)[1]
    
    @classmethod
    def from_tag(cls, tag: int) -> "TotpAlgorithm":
        for algorithm, known in _ALGORITHM_TAGS.items():
            if known == tag:
                return algorithm
        raise ValidationError(f"Unknown algorithm tag: {tag}", field="algorithm")
    
    @classmethod
    def from_name(cls, name: str) -> "TotpAlgorithm":
        """
        Resolve an algorithm from a loose name.
        
        Accepts "SHA1", "sha256", "HMAC-SHA512" and similar spellings.
        """
        normalized = name.strip().upper().replace("_", "-")
        if not normalized.startswith("HMAC-"):
            normalized = f"HMAC-{normalized}"
        normalized = normalized.replace("SHA-", "SHA")
        try:
            return cls(normalized)
        except ValueError:
            raise ValidationError(f"Unsupported algorithm: {name!r}", field="algorithm") from None


_ALGORITHM_TAGS: Dict[TotpAlgorithm, int] = {
    TotpAlgorithm.HMAC_SHA1: 1,
    TotpAlgorithm.HMAC_SHA256: 2,
    TotpAlgorithm.HMAC_SHA512: 3,
}

_HASH_FACTORIES: Dict[TotpAlgorithm, Callable] = {
    TotpAlgorithm.HMAC_SHA1: hashlib.sha1,
    TotpAlgorithm.HMAC_SHA256: hashlib.sha256,
    TotpAlgorithm.HMAC_SHA512: hashlib.sha512,
}

_DIGEST_SIZES: Dict[TotpAlgorithm, int] = {
    TotpAlgorithm.HMAC_SHA1: 20,
    TotpAlgorithm.HMAC_SHA256: 32,
    TotpAlgorithm.HMAC_SHA512: 64,
}


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class CredentialEntry:
    """
    One configured OTP source.
    
    The shared secret is excluded from repr so entries can be logged
    or printed without leaking key material.
    """
    name: str
    shared_secret: bytes = field(repr=False)
    algorithm: TotpAlgorithm = TotpAlgorithm.HMAC_SHA1
    digit_count: int = DEFAULT_DIGITS
    step_seconds: int = DEFAULT_STEP_SECONDS
    
    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValidationError("Entry name must be a non-empty string", field="name")
        if len(self.name.encode("utf-8")) > MAX_FIELD_BYTES:
            raise ValidationError("Entry name is too long", field="name")
        
        if not isinstance(self.shared_secret, (bytes, bytearray, memoryview)):
            raise ValidationError("Shared secret must be bytes", field="shared_secret")
        secret = bytes(self.shared_secret)
        if not secret:
            raise ValidationError("Shared secret must not be empty", field="shared_secret")
        if len(secret) > MAX_FIELD_BYTES:
            raise ValidationError("Shared secret is too long", field="shared_secret")
        object.__setattr__(self, "shared_secret", secret)
        
        if not isinstance(self.algorithm, TotpAlgorithm):
            if isinstance(self.algorithm, str):
                object.__setattr__(self, "algorithm", TotpAlgorithm.from_name(self.algorithm))
            else:
                raise ValidationError(f"Unknown algorithm: {self.algorithm!r}", field="algorithm")
        
        if not _is_int(self.digit_count) or not MIN_DIGITS <= self.digit_count <= MAX_DIGITS:
            raise ValidationError(
                f"digit_count must be between {MIN_DIGITS} and {MAX_DIGITS}, got {self.digit_count!r}",
                field="digit_count",
            )
        
        if not _is_int(self.step_seconds) or not 0 < self.step_seconds <= MAX_STEP_SECONDS:
            raise ValidationError(
                f"step_seconds must be between 1 and {MAX_STEP_SECONDS}, got {self.step_seconds!r}",
                field="step_seconds",
            )
    
    def with_changes(self, **changes) -> "CredentialEntry":
        """Return a validated copy with the given fields replaced."""
        return replace(self, **changes)
