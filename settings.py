from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_DATABASE_URL_ENV = "SENSOR_DATABASE_URL"
_STORE_PATH_ENV = "SENSOR_STORE_PATH"
_ENVIRONMENT_ENV = "APP_ENV"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str]
    store_path: Optional[str]
    environment: str
    log_level: str

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_environment(default: str) -> str:
    value = os.getenv(_ENVIRONMENT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    return candidate.lower() if candidate else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        database_url=_read_optional_env(_DATABASE_URL_ENV, None),
        store_path=_read_optional_env(_STORE_PATH_ENV, "./tmp/sensor_data.json"),
        environment=_read_environment("production"),
        log_level=_read_log_level("INFO"),
    )
