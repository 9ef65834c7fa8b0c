import threading
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional
from .models import ScanLogEntry, ScanStats, VerifyTicketResponse


class ScanSession:
    """
    Running tally and recent-scan log of one scanner.

    Only the most recently accepted code is remembered: the same code coming
    back within duplicate_window seconds is ignored, which keeps a camera
    that keeps decoding one ticket from submitting it over and over.
    """

    def __init__(
        self,
        log_limit: int = 10,
        duplicate_window: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.log_limit = log_limit
        self.duplicate_window = duplicate_window
        self._clock = clock
        self._lock = threading.Lock()
        self._stats = ScanStats()
        self._recent: List[ScanLogEntry] = []
        self._last_code: Optional[str] = None
        self._last_accepted_at = 0.0

    def should_process(self, code: str) -> bool:
        if not code:
            return False
        with self._lock:
            now = self._clock()
            if code == self._last_code and now - self._last_accepted_at < self.duplicate_window:
                return False
            self._last_code = code
            self._last_accepted_at = now
            return True

    def record(
        self,
        code: str,
        result: VerifyTicketResponse,
        timestamp: Optional[datetime] = None,
        log: bool = True,
    ) -> ScanLogEntry:
        """Count a scan; with log=False it is tallied but kept out of the recent log."""
        entry = ScanLogEntry(
            code=code,
            result=result,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        with self._lock:
            self._stats.totalScanned += 1
            if result.used is False:
                self._stats.validTickets += 1
            elif result.used is True:
                self._stats.usedTickets += 1
            else:
                self._stats.invalidTickets += 1

            if log:
                self._recent.insert(0, entry)
                del self._recent[self.log_limit:]
        return entry

    @property
    def stats(self) -> ScanStats:
        with self._lock:
            return self._stats.model_copy()

    @property
    def recent(self) -> List[ScanLogEntry]:
        with self._lock:
            return list(self._recent)
