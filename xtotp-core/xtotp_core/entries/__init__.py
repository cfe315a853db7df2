"""
Credential Entries
==================
Entry model, binary codec and provisioning URI helpers.
"""

from .models import (
    CredentialEntry,
    TotpAlgorithm,
    DEFAULT_DIGITS,
    DEFAULT_STEP_SECONDS,
    MAX_DIGITS,
    MIN_DIGITS,
)
from .codec import encode_entry, decode_entry, FORMAT_VERSION
from .provisioning import (
    parse_otpauth_uri,
    build_otpauth_uri,
    decode_base32_secret,
    encode_base32_secret,
)

__all__ = [
    # Models
    "CredentialEntry",
    "TotpAlgorithm",
    "DEFAULT_DIGITS",
    "DEFAULT_STEP_SECONDS",
    "MAX_DIGITS",
    "MIN_DIGITS",
    # Codec
    "encode_entry",
    "decode_entry",
    "FORMAT_VERSION",
    # Provisioning
    "parse_otpauth_uri",
    "build_otpauth_uri",
    "decode_base32_secret",
    "encode_base32_secret",
]
