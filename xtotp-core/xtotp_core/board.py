"""
Code Board
==========
One refresh pass over the store: list names, load each entry, compute its
current code. This is the read-side seam a display layer consumes; it
renders nothing itself.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import structlog

from .exceptions import DecodeError, EngineError, EntryNotFound
from .otp.clock import Clock, SystemClock
from .otp.engine import generate_code, seconds_remaining
from .retry import RetryPolicy, retry_with_backoff
from .store.store import CredentialStore

logger = structlog.get_logger(__name__)


class RowStatus(str, Enum):
    """Outcome of computing one row."""
    OK = "ok"
    UNREADABLE = "unreadable"      # stored blob failed to decode
    ENGINE_ERROR = "engine_error"  # entry rejected by the HMAC construction


@dataclass(frozen=True)
class CodeRow:
    """A displayable name/code pair. Never carries the secret."""
    name: str
    code: Optional[str]
    seconds_remaining: Optional[int]
    status: RowStatus = RowStatus.OK
    
    @property
    def ok(self) -> bool:
        return self.status == RowStatus.OK


class CodeBoard:
    """
    Computes current codes for every stored entry.
    
    Store and clock are injected. Storage failures are retried with backoff
    and then propagate as RetryExhausted; per-entry data problems become
    row statuses so other entries still show.
    """
    
    def __init__(
        self,
        store: CredentialStore,
        clock: Optional[Clock] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.retry_policy = retry_policy or RetryPolicy()
    
    def _retry(self, func, *args):
        return retry_with_backoff(func, *args, policy=self.retry_policy)
    
    def row_for(self, name: str, unix_time: int) -> Optional[CodeRow]:
        """Compute one row, or None if the entry vanished since listing."""
        try:
            entry = self._retry(self.store.get, name)
        except EntryNotFound:
            return None
        except DecodeError:
            return CodeRow(name=name, code=None, seconds_remaining=None, status=RowStatus.UNREADABLE)
        
        try:
            code = generate_code(entry, unix_time)
        except EngineError as e:
            logger.warning("Code generation failed", entry=name, error=str(e))
            return CodeRow(name=name, code=None, seconds_remaining=None, status=RowStatus.ENGINE_ERROR)
        
        return CodeRow(
            name=name,
            code=code,
            seconds_remaining=seconds_remaining(unix_time, entry.step_seconds),
        )
    
    def refresh(self) -> List[CodeRow]:
        """
        Run one refresh cycle for the clock's current time.
        
        Returns:
            Rows in name order
            
        Raises:
            RetryExhausted: If the backend stays unavailable
        """
        unix_time = self.clock.now()
        names = self._retry(self.store.list)
        
        rows = []
        for name in names:
            row = self.row_for(name, unix_time)
            if row is not None:
                rows.append(row)
        
        logger.debug(
            "Code board refreshed",
            entries=len(rows),
            failed=sum(1 for row in rows if not row.ok),
        )
        return rows
