"""
OTP Engine
==========
HOTP (RFC 4226) and TOTP (RFC 6238) code generation.

All functions here are pure: the same inputs always give the same code,
and nothing is cached between calls.
"""

import hmac
import struct
from typing import Union

from ..entries.models import CredentialEntry, MAX_DIGITS, MIN_DIGITS, TotpAlgorithm
from ..exceptions import EngineError

MAX_COUNTER = 0xFFFFFFFFFFFFFFFF

_COUNTER = struct.Struct(">Q")
_TRUNCATED = struct.Struct(">I")


def time_counter(unix_time: int, step_seconds: int) -> int:
    """
    Map a Unix time to its TOTP time-step counter.
    
    Args:
        unix_time: Seconds since the epoch
        step_seconds: Length of one time step
        
    Returns:
        floor(unix_time / step_seconds)
    """
    if step_seconds <= 0:
        raise EngineError(f"step_seconds must be positive, got {step_seconds}")
    if unix_time < 0:
        raise EngineError(f"unix_time must not be negative, got {unix_time}")
    return int(unix_time) // step_seconds


def seconds_remaining(unix_time: int, step_seconds: int) -> int:
    """Seconds until the code for unix_time rolls over to the next step."""
    if step_seconds <= 0:
        raise EngineError(f"step_seconds must be positive, got {step_seconds}")
    return step_seconds - (int(unix_time) % step_seconds)


def dynamic_truncate(digest: bytes) -> int:
    """
    RFC 4226 section 5.3 dynamic truncation.
    
    The low nibble of the last byte selects a 4-byte window; the top bit
    of that window is cleared, leaving a 31-bit integer.
    """
    offset = digest[-1] & 0x0F
    (value,) = _TRUNCATED.unpack_from(digest, offset)
    return value & 0x7FFFFFFF


def _hmac_digest(secret: bytes, counter: int, algorithm: TotpAlgorithm) -> bytes:
    if not isinstance(algorithm, TotpAlgorithm):
        raise EngineError(f"Unsupported algorithm: {algorithm!r}")
    if not secret:
        raise EngineError("HMAC key must not be empty")
    if not 0 <= counter <= MAX_COUNTER:
        raise EngineError(f"Counter {counter} does not fit in 64 bits")
    
    digest = hmac.new(bytes(secret), _COUNTER.pack(counter), algorithm.hash_factory).digest()
    if len(digest) != algorithm.digest_size:
        raise EngineError(
            f"{algorithm.value} produced a {len(digest)}-byte digest, "
            f"expected {algorithm.digest_size}"
        )
    return digest


def hotp(
    secret: bytes,
    counter: int,
    digits: int = 6,
    algorithm: TotpAlgorithm = TotpAlgorithm.HMAC_SHA1,
) -> str:
    """
    Compute an HOTP value.
    
    Args:
        secret: Raw shared secret bytes
        counter: Moving factor (0 <= counter < 2**64)
        digits: Output length, 1-9
        algorithm: HMAC variant
        
    Returns:
        Decimal code, left-padded with zeros to exactly `digits` characters
    """
    if isinstance(digits, bool) or not isinstance(digits, int) or not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise EngineError(f"digits must be between {MIN_DIGITS} and {MAX_DIGITS}, got {digits!r}")
    
    binary_code = dynamic_truncate(_hmac_digest(secret, counter, algorithm))
    return str(binary_code % (10 ** digits)).zfill(digits)


def generate_code(entry: CredentialEntry, unix_time: int) -> str:
    """
    Compute the TOTP code of an entry for a point in time.
    
    Args:
        entry: Credential entry
        unix_time: Current Unix time in whole seconds
        
    Returns:
        Code string of exactly entry.digit_count digits
    """
    counter = time_counter(unix_time, entry.step_seconds)
    return hotp(entry.shared_secret, counter, entry.digit_count, entry.algorithm)


def verify_code(
    entry: CredentialEntry,
    code: Union[str, int],
    unix_time: int,
    window: int = 1,
) -> bool:
    """
    Check a submitted code against the entry, tolerating clock drift.
    
    Args:
        entry: Credential entry
        code: Code as typed by the user (spaces ignored); an int is
            zero-padded to entry.digit_count
        unix_time: Verification time
        window: Number of adjacent steps accepted on each side
        
    Returns:
        True if the code matches any step in the window
    """
    if window < 0:
        raise EngineError(f"window must not be negative, got {window}")
    if isinstance(code, int) and not isinstance(code, bool):
        candidate = str(code).zfill(entry.digit_count)
    else:
        candidate = str(code).strip().replace(" ", "")
    if len(candidate) != entry.digit_count or not candidate.isdigit():
        return False
    
    counter = time_counter(unix_time, entry.step_seconds)
    matched = False
    for offset in range(-window, window + 1):
        step = counter + offset
        if not 0 <= step <= MAX_COUNTER:
            continue
        expected = hotp(entry.shared_secret, step, entry.digit_count, entry.algorithm)
        # no early exit on a match
        matched |= hmac.compare_digest(expected, candidate)
    return matched
