"""Ingestion and retrieval of motor-sensor readings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import ValidationError as SchemaError

from app.schemas import ReadingOut, ReadingPayload
from datastore.base import PersistenceError, ReadingStore
from datastore.mock_table import MockReadingTable
from datastore.sql_table import SqlReadingTable
from services.alerts import evaluate_alerts
from settings import Settings, get_settings

logger = logging.getLogger(__name__)

RECENT_LIMIT = 100

# Wire names in the order they are checked.
REQUIRED_WIRE_FIELDS = ("deviceId", "vibration", "temperature")


class ValidationError(ValueError):
    """A submitted reading lacks required fields or carries unusable values."""

    def __init__(
        self, missing: Sequence[str] = (), invalid: Sequence[str] = ()
    ) -> None:
        self.missing = list(missing)
        self.invalid = list(invalid)
        if self.missing:
            message = f"Missing required fields: {', '.join(self.missing)}"
        else:
            message = f"Invalid field values: {', '.join(self.invalid)}"
        super().__init__(message)


@dataclass
class IngestResult:
    id: int
    received_at: datetime
    alerts: List[str] = field(default_factory=list)


class ReadingService:
    """Validates, stores and reads back sensor readings through a ``ReadingStore``."""

    def __init__(self, store: ReadingStore, recent_limit: int = RECENT_LIMIT) -> None:
        self.store = store
        self.recent_limit = recent_limit

    def ingest(self, payload: Mapping[str, Any]) -> IngestResult:
        """Validate and persist one reading, returning its id and alerts."""
        missing = [name for name in REQUIRED_WIRE_FIELDS if payload.get(name) is None]
        if missing:
            raise ValidationError(missing=missing)

        try:
            reading = ReadingPayload.model_validate(payload)
        except SchemaError as exc:
            raise ValidationError(invalid=_invalid_fields(exc)) from exc

        try:
            stored = self.store.create_reading(reading.model_dump())
        except PersistenceError:
            logger.exception(
                "Failed to store reading",
                extra={"device_id": reading.device_id},
            )
            raise

        alerts = evaluate_alerts(stored.vibration, stored.temperature)
        if alerts:
            logger.warning(
                "Alerts for %s: %s",
                stored.device_id,
                " | ".join(alerts),
                extra={
                    "device_id": stored.device_id,
                    "reading_id": stored.id,
                    "alert_count": len(alerts),
                },
            )
        return IngestResult(id=stored.id, received_at=stored.received_at, alerts=alerts)

    def recent(self) -> List[ReadingOut]:
        """Return the newest readings first, without their surrogate ids."""
        try:
            rows = self.store.find_recent(self.recent_limit, exclude_fields=("id",))
        except PersistenceError:
            logger.exception("Failed to query recent readings")
            raise
        return [ReadingOut.model_validate(row) for row in rows]

    def database_connected(self) -> bool:
        return self.store.ping()

    def shutdown(self) -> None:
        """Release the store's resources during application shutdown."""
        self.store.close()


def _invalid_fields(exc: SchemaError) -> List[str]:
    names: List[str] = []
    for error in exc.errors():
        location = error.get("loc") or ("body",)
        name = str(location[0])
        if name not in names:
            names.append(name)
    return names


def build_default_store(settings: Optional[Settings] = None) -> ReadingStore:
    """Select the SQL store when a database URL is configured, the JSON table otherwise."""
    settings = settings or get_settings()
    if settings.database_url:
        table = SqlReadingTable(settings.database_url)
        table.create_schema()
        return table
    path = Path(settings.store_path) if settings.store_path else None
    return MockReadingTable(name="sensor_data", persistence_path=path)


def build_default_service(settings: Optional[Settings] = None) -> ReadingService:
    """Factory that wires the reading service with the configured store."""
    return ReadingService(store=build_default_store(settings))
