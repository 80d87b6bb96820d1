from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_ack, render_health, render_readings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the motor monitoring service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("send")
def send_command(
    ctx: typer.Context,
    device_id: str = typer.Option(..., "--device-id", "-d", help="Device identifier."),
    vibration: float = typer.Option(..., "--vibration", help="Vibration magnitude in g."),
    temperature: float = typer.Option(..., "--temperature", help="Temperature in °C."),
    humidity: Optional[float] = typer.Option(None, "--humidity", help="Relative humidity."),
    acc_x: Optional[float] = typer.Option(None, "--acc-x", help="Accelerometer X axis."),
    acc_y: Optional[float] = typer.Option(None, "--acc-y", help="Accelerometer Y axis."),
    acc_z: Optional[float] = typer.Option(None, "--acc-z", help="Accelerometer Z axis."),
    timestamp: Optional[int] = typer.Option(
        None,
        "--timestamp",
        help="Capture time in epoch milliseconds (defaults to now).",
    ),
) -> None:
    """Submit one reading and show the assigned id and any alerts."""
    state = _get_state(ctx)
    payload: Dict[str, Any] = {
        "deviceId": device_id,
        "vibration": vibration,
        "temperature": temperature,
        "timestamp": timestamp if timestamp is not None else int(time.time() * 1000),
    }
    optional = {"humidity": humidity, "accX": acc_x, "accY": acc_y, "accZ": acc_z}
    payload.update({key: value for key, value in optional.items() if value is not None})

    typer.echo(f"Sending reading for {device_id} to {state.config.base_url} ...")
    result = state.client.send_reading(payload)
    typer.echo()
    render_ack(result)


@app.command("recent")
def recent_command(
    ctx: typer.Context,
    show: int = typer.Option(10, "--show", "-n", min=1, help="Number of readings to print."),
) -> None:
    """List the latest stored readings, newest first."""
    state = _get_state(ctx)
    payload = state.client.list_readings()
    render_readings(payload, show=show)


@app.command("health")
def health_command(ctx: typer.Context) -> None:
    """Show service and database status."""
    state = _get_state(ctx)
    payload = state.client.health()
    render_health(payload)
