from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost:3000",
    "https://claude.ai",
    "https://www.claude.ai",
)


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PORT: listening port (default 3001)
    - HOST: bind address (default '0.0.0.0')
    - FRONTEND_URL: one extra allowed CORS origin, appended to the built-in list
    - SQLITE_DB_PATH: path to the sqlite db file, relative to the working directory. Default 'todos.db'
    - LOG_LEVEL: root log level (default 'info')
    - APP_ENV: environment name reported at startup (default 'development')
    """

    port: int = 3001
    host: str = "0.0.0.0"
    sqlite_db_path: str = "todos.db"
    frontend_url: Optional[str] = None
    log_level: str = "info"
    environment: str = "development"
    base_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))

    @property
    def allowed_origins(self) -> List[str]:
        """Built-in origins plus FRONTEND_URL when it is configured."""
        origins = list(self.base_origins)
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    frontend_url = os.getenv("FRONTEND_URL", "").strip() or None

    return Settings(
        port=_parse_int(_get_env("PORT", "3001"), 3001),
        host=_get_env("HOST", "0.0.0.0").strip(),
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "todos.db").strip(),
        frontend_url=frontend_url,
        log_level=_get_env("LOG_LEVEL", "info").strip().lower(),
        environment=_get_env("APP_ENV", "development").strip(),
    )
