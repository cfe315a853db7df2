"""
TOTP Generation
===============
RFC 4226 / RFC 6238 one-time password engine and clock sources.
"""

# Re-export all public APIs
from .engine import (
    generate_code,
    hotp,
    time_counter,
    seconds_remaining,
    dynamic_truncate,
    verify_code,
)
from .clock import Clock, SystemClock, FixedClock

__all__ = [
    # Engine
    "generate_code",
    "hotp",
    "time_counter",
    "seconds_remaining",
    "dynamic_truncate",
    "verify_code",
    # Clock
    "Clock",
    "SystemClock",
    "FixedClock",
]
