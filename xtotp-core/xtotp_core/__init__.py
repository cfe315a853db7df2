"""
Xtotp Core Library
==================
TOTP code generation and secure storage of credential entries.
"""

__version__ = "0.1.0"

# Errors
from xtotp_core.exceptions import (
    XtotpError,
    ValidationError,
    DecodeError,
    StorageError,
    EngineError,
    EntryNotFound,
)

# Entries
from xtotp_core.entries import (
    CredentialEntry,
    TotpAlgorithm,
    encode_entry,
    decode_entry,
    parse_otpauth_uri,
    build_otpauth_uri,
)

# OTP
from xtotp_core.otp import (
    generate_code,
    hotp,
    time_counter,
    seconds_remaining,
    verify_code,
    SystemClock,
    FixedClock,
)

# Store
from xtotp_core.store import (
    CredentialStore,
    SecureBackend,
    InMemoryBackend,
    DirectoryBackend,
    VaultBackend,
)

# Retry
from xtotp_core.retry import (
    RetryPolicy,
    RetryExhausted,
    retry_with_backoff,
    with_retry,
)

# Board
from xtotp_core.board import CodeBoard, CodeRow, RowStatus

# Config / logging
from xtotp_core.config import XtotpConfig, open_board, open_store
from xtotp_core.log import setup_logging

__all__ = [
    # Errors
    "XtotpError",
    "ValidationError",
    "DecodeError",
    "StorageError",
    "EngineError",
    "EntryNotFound",
    # Entries
    "CredentialEntry",
    "TotpAlgorithm",
    "encode_entry",
    "decode_entry",
    "parse_otpauth_uri",
    "build_otpauth_uri",
    # OTP
    "generate_code",
    "hotp",
    "time_counter",
    "seconds_remaining",
    "verify_code",
    "SystemClock",
    "FixedClock",
    # Store
    "CredentialStore",
    "SecureBackend",
    "InMemoryBackend",
    "DirectoryBackend",
    "VaultBackend",
    # Retry
    "RetryPolicy",
    "RetryExhausted",
    "retry_with_backoff",
    "with_retry",
    # Board
    "CodeBoard",
    "CodeRow",
    "RowStatus",
    # Config / logging
    "XtotpConfig",
    "open_store",
    "open_board",
    "setup_logging",
]
