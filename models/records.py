"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

MEASUREMENT_FIELDS = ("vibration", "temperature", "humidity", "acc_x", "acc_y", "acc_z")

# Column order of a stored reading.
READING_FIELDS = (
    "id",
    "device_id",
    *MEASUREMENT_FIELDS,
    "timestamp",
    "received_at",
)


@dataclass(frozen=True, slots=True)
class SensorReading:
    """A reading as persisted by a store, including server-assigned columns."""

    id: int
    device_id: str
    vibration: float
    temperature: float
    received_at: datetime
    humidity: Optional[float] = None
    acc_x: Optional[float] = None
    acc_y: Optional[float] = None
    acc_z: Optional[float] = None
    timestamp: Optional[int] = None

    def to_dict(self, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        skipped = set(exclude)
        values = asdict(self)
        return {name: values[name] for name in READING_FIELDS if name not in skipped}
