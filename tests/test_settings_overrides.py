from __future__ import annotations

from typing import Iterator

import pytest

from datastore.mock_table import MockReadingTable
from datastore.sql_table import SqlReadingTable
from services.readings import build_default_service, build_default_store
from settings import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch) -> None:
    for name in ("SENSOR_DATABASE_URL", "SENSOR_STORE_PATH", "APP_ENV", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.database_url is None
    assert settings.store_path == "./tmp/sensor_data.json"
    assert settings.environment == "production"
    assert settings.is_production is True
    assert settings.log_level == "INFO"


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    table_path = tmp_path / "readings.json"
    monkeypatch.delenv("SENSOR_DATABASE_URL", raising=False)
    monkeypatch.setenv("SENSOR_STORE_PATH", str(table_path))
    monkeypatch.setenv("APP_ENV", " Development ")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()
    store = build_default_store()

    assert settings.environment == "development"
    assert settings.is_production is False
    assert settings.log_level == "DEBUG"
    assert isinstance(store, MockReadingTable)
    assert store.persistence_path == table_path


def test_blank_store_path_keeps_readings_in_memory(monkeypatch) -> None:
    monkeypatch.delenv("SENSOR_DATABASE_URL", raising=False)
    monkeypatch.setenv("SENSOR_STORE_PATH", "  ")

    store = build_default_store()

    assert isinstance(store, MockReadingTable)
    assert store.persistence_path is None


def test_database_url_selects_sql_store(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("SENSOR_DATABASE_URL", f"sqlite:///{tmp_path / 'readings.db'}")

    service = build_default_service()

    try:
        assert isinstance(service.store, SqlReadingTable)
        assert service.database_connected() is True
        assert service.recent() == []
    finally:
        service.shutdown()
