"""Persistence contract shared by the reading stores."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Protocol

from models.records import SensorReading


class PersistenceError(RuntimeError):
    """Raised when a store cannot write or query readings."""


class ReadingStore(Protocol):
    """Durable append/query collaborator used by the reading service.

    ``create_reading`` assigns ``id`` and ``received_at`` and returns the stored
    record. ``find_recent`` returns at most ``limit`` readings ordered by
    ``received_at`` descending, each projected to a plain dict without the
    columns named in ``exclude_fields``. Both raise ``PersistenceError``.
    """

    def create_reading(self, values: Mapping[str, Any]) -> SensorReading:
        ...

    def find_recent(
        self, limit: int, exclude_fields: Iterable[str] = ()
    ) -> List[Dict[str, Any]]:
        ...

    def ping(self) -> bool:
        ...

    def close(self) -> None:
        ...
