"""
Clock Sources
=============
Providers of the current Unix time in whole seconds.
"""

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int:
        ...


class SystemClock:
    """Wall clock. No drift correction; a skewed host clock yields codes for the wrong step."""
    
    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """Clock pinned to a given instant, for tests and replays."""
    
    def __init__(self, unix_time: int):
        self.unix_time = int(unix_time)
    
    def now(self) -> int:
        return self.unix_time
    
    def advance(self, seconds: int) -> None:
        self.unix_time += int(seconds)
