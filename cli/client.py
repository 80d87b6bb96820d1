from __future__ import annotations

from typing import Any, Dict, NoReturn

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the motor monitoring service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def send_reading(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/sensor", json=payload)

    def list_readings(self) -> Dict[str, Any]:
        return self._request("GET", "/api/sensor")

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> NoReturn:
        detail: str | None = None
        try:
            data = exc.response.json()
        except ValueError:
            detail = exc.response.text.strip()
        else:
            detail = _describe_error(data)
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _describe_error(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    parts = [str(data.get("error") or data.get("detail") or "")]
    if data.get("missing"):
        parts.append(f"missing={','.join(data['missing'])}")
    if data.get("invalid"):
        parts.append(f"invalid={','.join(data['invalid'])}")
    if data.get("details"):
        parts.append(f"details={data['details']}")
    return " ".join(part for part in parts if part) or None
