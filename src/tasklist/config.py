"""Settings loaded from environment variables.

The remote backend needs an endpoint URL and an access key; starting without
them is a fatal ConfigError. The sqlite and memory backends need neither.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from tasklist.domain.errors import ConfigError

BACKENDS = ("rest", "sqlite", "memory")


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v.strip()


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    backend: str = "rest"
    store_url: Optional[str] = None
    store_key: Optional[str] = None
    table: str = "todos"
    timeout: float = 10.0
    db_path: str = "./data/tasklist.db"
    log_level: str = "INFO"
    log_dir: str = "./logs"
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        port = _env("PORT", "8000")
        if not port.isdigit():
            raise ConfigError(f"PORT must be an integer, got {port!r}")
        settings = cls(
            backend=_env("TASKLIST_BACKEND", "rest").lower(),
            store_url=_env("TASKLIST_STORE_URL") or None,
            store_key=_env("TASKLIST_STORE_KEY") or None,
            table=_env("TASKLIST_TABLE", "todos") or "todos",
            timeout=_env_float("TASKLIST_TIMEOUT", 10.0),
            db_path=_env("DB_PATH", "./data/tasklist.db"),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
            log_dir=_env("LOG_DIR", "./logs"),
            host=_env("HOST", "127.0.0.1"),
            port=int(port),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.backend not in BACKENDS:
            raise ConfigError(f"TASKLIST_BACKEND must be one of {', '.join(BACKENDS)}, got {self.backend!r}")
        if self.backend == "rest":
            missing = [
                name
                for name, value in (("TASKLIST_STORE_URL", self.store_url), ("TASKLIST_STORE_KEY", self.store_key))
                if not value
            ]
            if missing:
                raise ConfigError(f"remote backend requires {' and '.join(missing)}")
