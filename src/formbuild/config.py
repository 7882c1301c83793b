from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import orjson

BASE_DIR = Path(__file__).resolve().parent

VERSION = "1.0.0"

FIELD_TYPES = ("text", "email", "textarea", "number", "date", "checkbox")
NAME_PATTERN = re.compile(r"^[A-Za-z0-9]+\Z")
FORM_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+\Z")

LOG_LEVELS = ("critical", "error", "warning", "info", "debug")

DEFAULT_CLIENT_KEYS = '["api-key-1","api-key-2"]'


class ConfigError(ValueError):
    pass


def parse_client_keys(raw: str) -> frozenset[str]:
    try:
        keys = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ConfigError(f"CLIENT_KEYS is not valid JSON: {exc}") from exc
    if not isinstance(keys, list) or not all(isinstance(key, str) for key in keys):
        raise ConfigError("CLIENT_KEYS must be a JSON array of strings")
    return frozenset(key for key in keys if key)


def _int_setting(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc


class Settings:
    def __init__(self, **overrides: Any) -> None:
        def pick(key: str, env: str, default: str) -> Any:
            if key in overrides:
                return overrides[key]
            return os.getenv(env, default)

        self.host = pick("host", "APP_HOST", "0.0.0.0")
        self.port = _int_setting("APP_PORT", pick("port", "APP_PORT", "8080"))
        self.domain = pick("domain", "APP_DOMAIN", "http://0.0.0.0:8080")
        self.form_build_dir = Path(pick("form_build_dir", "FORM_BUILD_DIR", "form-build"))
        self.csv_lock_timeout = float(
            _int_setting("CSV_LOCK_TIMEOUT", pick("csv_lock_timeout", "CSV_LOCK_TIMEOUT", "10"))
        )
        self.shutdown_timeout = _int_setting(
            "SHUTDOWN_TIMEOUT", pick("shutdown_timeout", "SHUTDOWN_TIMEOUT", "10")
        )
        self.log_level = str(pick("log_level", "LOG_LEVEL", "info")).lower()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(
                f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )

        keys = pick("client_keys", "CLIENT_KEYS", DEFAULT_CLIENT_KEYS)
        if isinstance(keys, str):
            self.client_keys = parse_client_keys(keys)
        else:
            self.client_keys = frozenset(keys)


def ensure_dirs(settings: Settings) -> None:
    settings.form_build_dir.mkdir(parents=True, exist_ok=True)
