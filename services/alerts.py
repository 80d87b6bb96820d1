"""Threshold alerts derived from a single reading."""

from __future__ import annotations

from typing import List

VIBRATION_LIMIT_G = 2.0
TEMPERATURE_LIMIT_C = 60.0


def format_measurement(value: float) -> str:
    """Render a measurement the way devices report it (``65`` rather than ``65.0``)."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def evaluate_alerts(vibration: float, temperature: float) -> List[str]:
    """Return alert messages for values strictly above the fixed limits.

    The vibration check always comes before the temperature check.
    """
    alerts: List[str] = []
    if vibration > VIBRATION_LIMIT_G:
        alerts.append(f"High vibration: {format_measurement(vibration)}g")
    if temperature > TEMPERATURE_LIMIT_C:
        alerts.append(f"Critical temperature: {format_measurement(temperature)}°C")
    return alerts
