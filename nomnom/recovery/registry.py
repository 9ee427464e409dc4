"""Per-operation attempt bookkeeping."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable


@dataclass
class AttemptRecord:
    """Attempt count and last attempt time for one in-flight operation."""

    operation_id: str
    attempt_count: int
    last_attempt_at: datetime


class AttemptRegistry:
    """
    Track in-flight retry counts keyed by a caller-chosen operation id.

    Callers must use a distinct id per logical unit of work. Two concurrent
    executions sharing an id will interleave their counts.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._records: dict[str, AttemptRecord] = {}
        self._lock = threading.Lock()

    def record_attempt(self, operation_id: str) -> int:
        """Register one more attempt and return the new attempt count."""
        now = self._clock()
        with self._lock:
            record = self._records.get(operation_id)
            if record is None:
                record = AttemptRecord(operation_id=operation_id, attempt_count=0, last_attempt_at=now)
                self._records[operation_id] = record
            record.attempt_count += 1
            record.last_attempt_at = now
            return record.attempt_count

    def attempt_count(self, operation_id: str) -> int:
        with self._lock:
            record = self._records.get(operation_id)
            return record.attempt_count if record else 0

    def is_retrying(self, operation_id: str) -> bool:
        with self._lock:
            return operation_id in self._records

    def time_since_last_attempt(self, operation_id: str) -> timedelta | None:
        with self._lock:
            record = self._records.get(operation_id)
            last = record.last_attempt_at if record else None
        if last is None:
            return None
        return self._clock() - last

    def get(self, operation_id: str) -> AttemptRecord | None:
        """Return a copy of the record for ``operation_id``, if tracked."""
        with self._lock:
            record = self._records.get(operation_id)
            if record is None:
                return None
            return AttemptRecord(record.operation_id, record.attempt_count, record.last_attempt_at)

    def clear(self, operation_id: str) -> None:
        with self._lock:
            self._records.pop(operation_id, None)

    def clear_all(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
