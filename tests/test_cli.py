from __future__ import annotations

from typing import Any, Dict, List

import httpx
import pytest
import typer
from typer.testing import CliRunner

from cli.app import app
from cli.client import ApiClient
from cli.config import CLIConfig, load_config


class StubClient:
    def __init__(self, config, alerts: List[str] | None = None) -> None:
        self.config = config
        self.sent: List[Dict[str, Any]] = []
        self.alerts = alerts or []
        self.readings: Dict[str, Any] = {
            "count": 3,
            "results": [
                {
                    "deviceId": f"M{index}",
                    "vibration": 0.5,
                    "temperature": 30.0,
                    "humidity": None,
                    "accX": 0.1,
                    "accY": 0.2,
                    "accZ": 0.9,
                    "timestamp": 1717000000000,
                    "receivedAt": "2024-06-01T00:00:00Z",
                }
                for index in range(3)
            ],
        }
        self.closed = False

    def send_reading(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.sent.append(payload)
        return {
            "success": True,
            "id": 7,
            "receivedAt": "2024-06-01T00:00:00Z",
            "alerts": self.alerts,
        }

    def list_readings(self) -> Dict[str, Any]:
        return self.readings

    def health(self) -> Dict[str, Any]:
        return {"status": "operational", "database": "connected", "uptime": 12.5}

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _install_stub(monkeypatch, stub: StubClient) -> None:
    def factory(config):
        stub.config = config
        return stub

    monkeypatch.setattr("cli.app.ApiClient", factory)


def test_send_builds_payload(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(
        app,
        [
            "send",
            "--device-id", "M1",
            "--vibration", "0.7",
            "--temperature", "41",
            "--acc-x", "0.1",
            "--timestamp", "1717000000000",
        ],
    )

    assert result.exit_code == 0
    assert stub.sent == [
        {
            "deviceId": "M1",
            "vibration": 0.7,
            "temperature": 41.0,
            "timestamp": 1717000000000,
            "accX": 0.1,
        }
    ]
    assert "id: 7" in result.stdout
    assert "No alerts raised." in result.stdout
    assert stub.closed is True


def test_send_defaults_timestamp_and_shows_alerts(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None, alerts=["High vibration: 2.5g"])
    _install_stub(monkeypatch, stub)

    result = runner.invoke(
        app, ["send", "-d", "M1", "--vibration", "2.5", "--temperature", "20"]
    )

    assert result.exit_code == 0
    assert isinstance(stub.sent[0]["timestamp"], int)
    assert "High vibration: 2.5g" in result.stdout


def test_recent_limits_printed_rows(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["recent", "--show", "2"])

    assert result.exit_code == 0
    assert "count=3" in result.stdout
    assert "M0" in result.stdout
    assert "M1" in result.stdout
    assert "M2" not in result.stdout
    assert "... 1 more" in result.stdout


def test_health_command(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["--base-url", "http://sensors:9000/", "health"])

    assert result.exit_code == 0
    assert "database: connected" in result.stdout
    assert stub.config.base_url == "http://sensors:9000"


def test_load_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("API_BASE_URL", "http://example:8080/")
    monkeypatch.setenv("CLI_HTTP_TIMEOUT", "nope")

    config = load_config()

    assert config.base_url == "http://example:8080"
    assert config.timeout == 30.0


def _client_with_transport(handler) -> ApiClient:
    client = ApiClient(CLIConfig(base_url="http://testserver"))
    client._client = httpx.Client(
        base_url="http://testserver", transport=httpx.MockTransport(handler)
    )
    return client


def test_client_reports_missing_fields(capsys) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"error": "Missing required fields", "missing": ["vibration"], "invalid": []},
        )

    client = _client_with_transport(handler)

    with pytest.raises(typer.Exit) as excinfo:
        client.send_reading({"deviceId": "M1"})

    assert excinfo.value.exit_code == 1
    assert "missing=vibration" in capsys.readouterr().err
    client.close()


def test_client_returns_json_on_success() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/sensor"
        return httpx.Response(200, json={"count": 0, "results": []})

    client = _client_with_transport(handler)

    assert client.list_readings() == {"count": 0, "results": []}
    client.close()
