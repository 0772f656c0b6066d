"""Application configuration read from the environment and an optional .env file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Mapping, TypeVar

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PASSWORD = "password"

_T = TypeVar("_T")


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings for the database."""

    host: str = "localhost"
    port: str = "5432"
    user: str = "postgres"
    password: str = PASSWORD
    name: str = "book_rental"
    ssl_mode: str = "disable"

    def dsn(self) -> str:
        """The key=value connection string for the database driver."""
        return (
            f"host={self.host} port={self.port} user={self.user} "
            f"password={self.password} dbname={self.name} sslmode={self.ssl_mode}"
        )


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server settings."""

    port: str = "3000"


@dataclass(frozen=True)
class AdminConfig:
    """Credentials of the administrator seeded at start-up."""

    name: str = "Admin"
    email: str = "admin@example.com"
    password: str = PASSWORD


@dataclass(frozen=True)
class Config:
    """All application settings."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    admin: AdminConfig = field(default_factory=AdminConfig)


def _env(key: str, default: str) -> str:
    return os.environ.get(key) or default


def _from_env(cls: type[_T], prefix: str, renames: Mapping[str, str] | None = None) -> _T:
    """Build a settings section, each field read from PREFIX + FIELD (or its rename)."""
    renames = renames or {}
    defaults = cls()
    values = {
        f.name: _env(prefix + renames.get(f.name, f.name.upper()), getattr(defaults, f.name))
        for f in fields(cls)  # type: ignore[arg-type]
    }
    return cls(**values)


def load_config(dotenv_path: str | os.PathLike[str] | None = None) -> Config:
    """Load settings, reading a .env file first; variables already set win."""
    path = Path(dotenv_path) if dotenv_path is not None else Path(".env")
    if path.is_file():
        load_dotenv(dotenv_path=path, override=False)
        logger.info(".env file loaded successfully")
    else:
        logger.info("no .env file found at %s, default config will be used", path)

    return Config(
        database=_from_env(DatabaseConfig, "DB_", {"ssl_mode": "SSLMODE"}),
        server=_from_env(ServerConfig, "SERVER_"),
        admin=_from_env(AdminConfig, "ADMIN_"),
    )