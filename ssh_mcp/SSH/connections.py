"""Connection table: caller-chosen ids mapped to live SSH sessions."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any

from .errors import UnknownConnection


@dataclass(frozen=True)
class Endpoint:
    host: str
    port: int
    username: str

    def __str__(self) -> str:
        return f"{self.username}@{self.host}:{self.port}"


@dataclass
class ConnectionRecord:
    """One live remote session.

    The executor is owned by the table entry holding this record and is
    closed when the entry is removed, replaced, or swept at shutdown.
    """

    connection_id: str
    executor: Any
    endpoint: Endpoint
    connected_at: float = field(default_factory=time.time)


class ConnectionTable:
    """Thread-safe mapping of connection id -> `ConnectionRecord`."""

    def __init__(self) -> None:
        self._records: dict[str, ConnectionRecord] = {}
        self._lock = threading.Lock()

    def put(self, record: ConnectionRecord) -> ConnectionRecord | None:
        """Store `record`, returning the record it displaced, if any."""
        with self._lock:
            previous = self._records.get(record.connection_id)
            self._records[record.connection_id] = record
            return previous

    def get(self, connection_id: str) -> ConnectionRecord:
        with self._lock:
            record = self._records.get(connection_id)
        if record is None:
            raise UnknownConnection(connection_id)
        return record

    def remove(self, connection_id: str) -> ConnectionRecord:
        with self._lock:
            record = self._records.pop(connection_id, None)
        if record is None:
            raise UnknownConnection(connection_id)
        return record

    def all(self) -> list[ConnectionRecord]:
        """Snapshot of the current records."""
        with self._lock:
            return list(self._records.values())

    def pop_all(self) -> list[ConnectionRecord]:
        """Empty the table and return everything it held."""
        with self._lock:
            records = list(self._records.values())
            self._records.clear()
            return records

    def __contains__(self, connection_id: object) -> bool:
        with self._lock:
            return connection_id in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
