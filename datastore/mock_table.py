from __future__ import annotations
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from datastore.base import PersistenceError
from models.records import READING_FIELDS, SensorReading

logger = logging.getLogger(__name__)

_ROW = TypeAdapter(SensorReading)
_ROWS = TypeAdapter(List[SensorReading])

_WRITABLE_COLUMNS = tuple(
    column for column in READING_FIELDS if column not in {"id", "received_at"}
)


class MockReadingTable:
    """Append-only reading table kept in memory, optionally mirrored to JSON."""

    def __init__(self, name: str, persistence_path: Optional[Path] = None) -> None:
        self.name = name
        self._rows: List[SensorReading] = []
        self._next_id = 1
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def create_reading(self, values: Mapping[str, Any]) -> SensorReading:
        columns = {column: values.get(column) for column in _WRITABLE_COLUMNS}
        with self._lock:
            try:
                reading = _ROW.validate_python(
                    {
                        **columns,
                        "id": self._next_id,
                        "received_at": datetime.now(timezone.utc),
                    }
                )
            except ValidationError as exc:
                raise PersistenceError(f"Rejected row for table {self.name!r}: {exc}") from exc
            self._rows.append(reading)
            try:
                self._persist()
            except OSError as exc:
                self._rows.pop()
                raise PersistenceError(f"Could not write {self.persistence_path}: {exc}") from exc
            self._next_id += 1
            return reading

    def find_recent(
        self, limit: int, exclude_fields: Iterable[str] = ()
    ) -> List[Dict[str, Any]]:
        if limit < 0:
            raise PersistenceError(f"Invalid limit {limit!r}.")
        with self._lock:
            rows = list(self._rows)
        rows.sort(key=lambda row: (row.received_at, row.id), reverse=True)
        excluded = tuple(exclude_fields)
        return [row.to_dict(exclude=excluded) for row in rows[:limit]]

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        """Nothing to release; rows are flushed on every write."""

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        self.persistence_path.write_bytes(_ROWS.dump_json(self._rows, indent=2))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "[]"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            data = None
        if not isinstance(data, list):
            logger.warning(
                "Ignoring unreadable reading table file",
                extra={"store": str(self.persistence_path)},
            )
            return

        for position, payload in enumerate(data):
            try:
                self._rows.append(_ROW.validate_python(payload))
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed row %d",
                    position,
                    extra={"store": str(self.persistence_path), "reason": exc.errors()[0]["msg"]},
                )

        if self._rows:
            self._next_id = max(row.id for row in self._rows) + 1
