"""
Printer Directory Cache
=======================

Serves the installed printer list while bounding how often the (slow) OS
enumeration runs.

Cached entries are served while they are younger than the TTL and the list
is non-empty. Concurrent callers that miss the cache share one enumeration,
including its outcome when it comes back empty or fails. A failed
enumeration leaves the last good list in place; an empty result replaces it.
"""

import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

from .errors import PrintAgentError, MalformedEnumerationOutput
from .handlers import BaseHandler
from .models import PrinterInfo

logger = logging.getLogger(__name__)


class PrinterDirectory:
    """Process-wide printer list with a time-to-live."""

    def __init__(self, handler: BaseHandler, ttl: float = 10.0,
                 enum_timeout: Optional[float] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.handler = handler
        self.ttl = ttl
        self.enum_timeout = enum_timeout
        self._clock = clock

        self._entries: List[PrinterInfo] = []
        self._fetched_at: Optional[float] = None

        # Bumped after every finished enumeration, successful or not
        self._generation = 0
        self._last_error: Optional[PrintAgentError] = None

        self._lock = threading.Lock()
        self._refresh_lock = threading.Lock()

    def _is_fresh(self) -> bool:
        # Caller holds self._lock
        if not self._entries or self._fetched_at is None:
            return False
        return self._clock() - self._fetched_at < self.ttl

    def get_printers(self, force: bool = False) -> Tuple[List[PrinterInfo], bool]:
        """
        Get installed printers.

        Args:
            force: Skip the cache and enumerate now

        Returns:
            (printers, fresh) where fresh is True when this call ran the
            enumeration itself

        Raises:
            EnumerationFailed: enumeration command failed
            MalformedEnumerationOutput: enumeration output was unreadable
        """
        with self._lock:
            if not force and self._is_fresh():
                return list(self._entries), False
            seen = self._generation

        with self._refresh_lock:
            if not force:
                with self._lock:
                    if self._generation != seen:
                        # Another caller refreshed while we waited
                        if self._last_error is not None:
                            raise self._last_error
                        return list(self._entries), False

            try:
                entries = self._enumerate()
            except PrintAgentError as e:
                with self._lock:
                    self._last_error = e
                    self._generation += 1
                raise

            with self._lock:
                self._entries = entries
                self._fetched_at = self._clock()
                self._last_error = None
                self._generation += 1

        logger.info("Printer list refreshed (%d printers)", len(entries))
        return list(entries), True

    def _enumerate(self) -> List[PrinterInfo]:
        records = self.handler.list_printers(timeout=self.enum_timeout)
        if records is None:
            return []
        if isinstance(records, dict):
            records = [records]
        if not isinstance(records, list):
            raise MalformedEnumerationOutput(
                detail=f'Expected printer records, got {type(records).__name__}'
            )
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise MalformedEnumerationOutput(
                    detail=f'Printer record {index} is {type(record).__name__}, expected an object'
                )
        return [PrinterInfo.from_record(r) for r in records]
