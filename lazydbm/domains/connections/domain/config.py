"""Connection domain models and enums."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from lazydbm.shared.core.errors import ConfigError


class DatabaseType(str, Enum):
    MYSQL = "mysql"
    POSTGRES = "postgres"
    SQLITE = "sqlite"


# Accepted spellings for the ``type`` field.
DB_TYPE_ALIASES: dict[str, DatabaseType] = {
    "mysql": DatabaseType.MYSQL,
    "mariadb": DatabaseType.MYSQL,
    "postgres": DatabaseType.POSTGRES,
    "postgresql": DatabaseType.POSTGRES,
    "sqlite": DatabaseType.SQLITE,
    "sqlite3": DatabaseType.SQLITE,
}

# Legacy/alternate key names mapped to field names.
KEY_ALIASES = {
    "type": "db_type",
    "username": "user",
    "server": "host",
    "file_path": "path",
}


def parse_db_type(value: Any) -> DatabaseType:
    if isinstance(value, DatabaseType):
        return value
    if isinstance(value, str):
        db_type = DB_TYPE_ALIASES.get(value.strip().lower())
        if db_type is not None:
            return db_type
    supported = ", ".join(t.value for t in DatabaseType)
    raise ConfigError(f"unknown database type {value!r} (expected one of: {supported})")


@dataclass
class ConnectionConfig:
    """Database connection configuration.

    Server backends use host/port/user/password/database; SQLite uses path.
    Missing fields are only reported when the connection is used.
    """

    name: str
    db_type: DatabaseType = DatabaseType.SQLITE
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    path: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConnectionConfig:
        """Create a ConnectionConfig from a dict, with legacy key support."""
        payload: dict[str, Any] = {}
        for key, value in data.items():
            key = KEY_ALIASES.get(key, key)
            if key in payload:
                continue
            payload[key] = value

        if "db_type" not in payload:
            raise ConfigError(f"connection {payload.get('name', '?')!r} is missing the type field")
        payload["db_type"] = parse_db_type(payload["db_type"])

        port = payload.get("port")
        if port in ("", None):
            payload["port"] = None
        else:
            try:
                payload["port"] = int(port)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"invalid port {port!r} for connection {payload.get('name', '?')!r}") from e

        base_fields = {f.name for f in fields(cls)}
        unknown = sorted(k for k in payload if k not in base_fields)
        for key in unknown:
            payload.pop(key)

        if not payload.get("name"):
            payload["name"] = _fallback_name(payload)
        for key in ("host", "user", "password", "database", "path"):
            if payload.get(key) is not None:
                payload[key] = str(payload[key])
        return cls(**payload)

    def require(self, field_name: str) -> Any:
        """Return a field's value, raising ConfigError if it is not set."""
        value = getattr(self, field_name)
        if value is None or value == "":
            raise ConfigError(f"type {self.db_type.value} needs the {field_name} field")
        return value


def _fallback_name(payload: Mapping[str, Any]) -> str:
    if payload.get("path"):
        return Path(str(payload["path"])).stem
    db_type = payload["db_type"]
    return f"{db_type.value}@{payload.get('host') or 'localhost'}"
