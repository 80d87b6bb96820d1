from __future__ import annotations

from typing import Any, Dict, Iterable

import typer

_READING_COLUMNS = (
    "receivedAt",
    "deviceId",
    "vibration",
    "temperature",
    "humidity",
    "accX",
    "accY",
    "accZ",
    "timestamp",
)


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_ack(payload: Dict[str, Any]) -> None:
    echo_heading("Reading Stored")
    echo_key_values(
        [
            ("id", payload.get("id")),
            ("receivedAt", payload.get("receivedAt")),
        ]
    )

    alerts = payload.get("alerts") or []
    typer.echo()
    echo_heading("Alerts")
    if alerts:
        for alert in alerts:
            typer.secho(f"  - {alert}", fg=typer.colors.YELLOW)
    else:
        typer.echo("No alerts raised.")


def render_readings(payload: Dict[str, Any], show: int) -> None:
    results = payload.get("results") or []
    echo_heading(f"Latest Readings (count={payload.get('count', len(results))})")
    if not results:
        typer.echo("No readings stored.")
        return

    typer.echo(" | ".join(_READING_COLUMNS))
    for reading in results[:show]:
        typer.echo(" | ".join(_cell(reading.get(column)) for column in _READING_COLUMNS))
    hidden = len(results) - show
    if hidden > 0:
        typer.echo(f"... {hidden} more")


def render_health(payload: Dict[str, Any]) -> None:
    echo_heading("Service Health")
    echo_key_values(
        [
            ("status", payload.get("status")),
            ("database", payload.get("database")),
            ("uptime", payload.get("uptime")),
        ]
    )


def _cell(value: Any) -> str:
    return "-" if value is None else str(value)
