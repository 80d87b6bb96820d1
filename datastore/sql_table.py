"""SQLAlchemy-backed reading store.

The ``sensor_data`` table keeps ``deviceId``, ``vibration``, ``temperature`` and
``receivedAt`` NOT NULL. ``humidity``, ``accX``, ``accY``, ``accZ`` and ``timestamp``
are nullable so readings that omit them can be stored. ``create_schema`` only
creates a missing table and never alters an existing one, so a table created with
those columns NOT NULL must be migrated by hand, e.g.
``ALTER TABLE sensor_data ALTER COLUMN humidity DROP NOT NULL`` per column on PostgreSQL.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import BigInteger, DateTime, Float, Integer, String, create_engine, func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from datastore.base import PersistenceError
from models.records import SensorReading

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class SensorDataRow(Base):
    __tablename__ = "sensor_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_id: Mapped[str] = mapped_column("deviceId", String(255), nullable=False)
    vibration: Mapped[float] = mapped_column(Float, nullable=False)
    temperature: Mapped[float] = mapped_column(Float, nullable=False)
    humidity: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    acc_x: Mapped[Optional[float]] = mapped_column("accX", Float, nullable=True)
    acc_y: Mapped[Optional[float]] = mapped_column("accY", Float, nullable=True)
    acc_z: Mapped[Optional[float]] = mapped_column("accZ", Float, nullable=True)
    timestamp: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    received_at: Mapped[datetime] = mapped_column(
        "receivedAt",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<SensorDataRow id={self.id} device={self.device_id}>"


_WRITABLE_COLUMNS = (
    "device_id",
    "vibration",
    "temperature",
    "humidity",
    "acc_x",
    "acc_y",
    "acc_z",
    "timestamp",
)


class SqlReadingTable:
    """Stores readings in the ``sensor_data`` table of a relational database."""

    def __init__(self, url: str, engine: Optional[Engine] = None) -> None:
        self.engine = engine or create_engine(url, pool_pre_ping=True, future=True)
        self._sessions = sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False
        )

    def create_schema(self) -> bool:
        """Create the table if needed. Returns False when the database is unreachable."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError:
            logger.exception(
                "Could not synchronise reading table schema",
                extra={"store": self.engine.url.render_as_string(hide_password=True)},
            )
            return False
        return True

    def create_reading(self, values: Mapping[str, Any]) -> SensorReading:
        row = SensorDataRow(
            **{column: values.get(column) for column in _WRITABLE_COLUMNS},
            received_at=datetime.now(timezone.utc),
        )
        try:
            with self._sessions.begin() as session:
                session.add(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc
        return _to_reading(row)

    def find_recent(
        self, limit: int, exclude_fields: Iterable[str] = ()
    ) -> List[Dict[str, Any]]:
        excluded = tuple(exclude_fields)
        statement = (
            select(SensorDataRow)
            .order_by(SensorDataRow.received_at.desc(), SensorDataRow.id.desc())
            .limit(limit)
        )
        try:
            with self._sessions() as session:
                rows = session.scalars(statement).all()
                return [_to_reading(row).to_dict(exclude=excluded) for row in rows]
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    def ping(self) -> bool:
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()


def _to_reading(row: SensorDataRow) -> SensorReading:
    received_at = row.received_at
    # SQLite hands back naive datetimes.
    if received_at.tzinfo is None:
        received_at = received_at.replace(tzinfo=timezone.utc)
    return SensorReading(
        id=row.id,
        device_id=row.device_id,
        vibration=row.vibration,
        temperature=row.temperature,
        humidity=row.humidity,
        acc_x=row.acc_x,
        acc_y=row.acc_y,
        acc_z=row.acc_z,
        timestamp=row.timestamp,
        received_at=received_at,
    )
