"""
Diagnostic trace collection for a single search.

The cascade and the PLUTO lookup run on separate threads, so the recorder
guards its lists with a lock. ``freeze`` produces the immutable
``DiagnosticTrace`` that is attached to the report.
"""

import logging
import threading
from typing import Optional

from .models import CollaboratorFailure, DiagnosticTrace

logger = logging.getLogger(__name__)


class TraceRecorder:
    def __init__(self):
        self._lock = threading.Lock()
        self._failures: list[CollaboratorFailure] = []
        self._strategy_counts: list[tuple[str, int]] = []
        self.address_source = ""
        self.searched_for = ""
        self.winning_strategy: Optional[str] = None
        self.record_count = 0

    def failure(self, stage: str, error: BaseException) -> None:
        logger.warning(f"{stage} failed, treating as empty: {error}")
        with self._lock:
            self._failures.append(CollaboratorFailure(stage=stage, message=str(error)))

    def strategy(self, name: str, count: int) -> None:
        with self._lock:
            self._strategy_counts.append((name, count))

    @property
    def failures(self) -> tuple[CollaboratorFailure, ...]:
        with self._lock:
            return tuple(self._failures)

    def freeze(self) -> DiagnosticTrace:
        with self._lock:
            return DiagnosticTrace(
                searched_for=self.searched_for,
                address_source=self.address_source,
                winning_strategy=self.winning_strategy,
                record_count=self.record_count,
                strategy_counts=tuple(self._strategy_counts),
                failures=tuple(self._failures),
            )
