"""
In-process storage for accepted monitoring records.

The dashboard treats storage as a collaborator behind `MonitoringStore`; the bundled
implementation keeps a bounded, lock-protected buffer in memory.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import deque
from dataclasses import dataclass
from typing import Protocol

from monitoring_dashboard.monitoring.records import MonitoringRecord

LOGGER = logging.getLogger("monitoring.store")


@dataclass(frozen=True)
class StoredRecord:
    record_id: str
    received_at_ms: int
    record: MonitoringRecord


class MonitoringStore(Protocol):
    def add(self, record: MonitoringRecord, *, received_at_ms: int) -> StoredRecord: ...

    def list_records(self, *, source: str | None = None) -> list[StoredRecord]: ...

    def purge(self, *, cutoff_ms: int | None = None, source: str | None = None) -> int: ...

    def count(self) -> int: ...


class InMemoryMonitoringStore:
    """Bounded record buffer; the oldest records are evicted once `max_records` is reached."""

    def __init__(self, *, max_records: int = 10_000) -> None:
        if max_records <= 0:
            raise ValueError("max_records must be greater than 0.")
        self.max_records = max_records
        self._records: deque[StoredRecord] = deque(maxlen=max_records)
        self._lock = threading.Lock()

    def add(self, record: MonitoringRecord, *, received_at_ms: int) -> StoredRecord:
        stored = StoredRecord(
            record_id=uuid.uuid4().hex,
            received_at_ms=received_at_ms,
            record=record,
        )
        with self._lock:
            if len(self._records) == self.max_records:
                LOGGER.warning(
                    "Record buffer full (%d); evicting oldest record %s",
                    self.max_records,
                    self._records[0].record_id,
                )
            self._records.append(stored)
        return stored

    def list_records(self, *, source: str | None = None) -> list[StoredRecord]:
        with self._lock:
            snapshot = list(self._records)
        if source is None:
            return snapshot
        return [item for item in snapshot if item.record.source_label == source]

    def purge(self, *, cutoff_ms: int | None = None, source: str | None = None) -> int:
        """Drop records matching `source` captured before `cutoff_ms`.

        Without a cutoff every matching record is dropped. With a cutoff, records
        whose timestamp is not numeric are kept since their age is unknown.
        """

        def _matches(item: StoredRecord) -> bool:
            if source is not None and item.record.source_label != source:
                return False
            if cutoff_ms is None:
                return True
            captured_at = item.record.timestamp_ms
            return captured_at is not None and captured_at < cutoff_ms

        with self._lock:
            kept = [item for item in self._records if not _matches(item)]
            purged = len(self._records) - len(kept)
            self._records = deque(kept, maxlen=self.max_records)
        return purged

    def count(self) -> int:
        with self._lock:
            return len(self._records)
