"""SQLite adapter using the built-in sqlite3 module."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from lazydbm.domains.connections.providers.adapters.base import (
    ColumnProperty,
    DatabaseAdapter,
    Records,
    resolve_file_path,
    stringify,
)
from lazydbm.domains.explorer.domain.tree_nodes import Database, Table
from lazydbm.shared.core.errors import DataSourceError

if TYPE_CHECKING:
    from lazydbm.domains.connections.domain.config import ConnectionConfig


def quote_identifier(name: str) -> str:
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


class SQLiteAdapter(DatabaseAdapter):
    """Adapter for SQLite database files, opened read-only."""

    @property
    def name(self) -> str:
        return "SQLite"

    @property
    def driver_module(self) -> str:
        return "sqlite3"

    @property
    def install_extra(self) -> str:
        return "sqlite"

    @property
    def install_package(self) -> str:
        return "sqlite3"

    @property
    def cli_tool_name(self) -> str:
        return "litecli"

    def file_path(self, config: ConnectionConfig) -> Path:
        return resolve_file_path(config.require("path"))

    def connection_descriptor(self, config: ConnectionConfig) -> str:
        return f"sqlite://{self.file_path(config)}"

    def cli_arguments(self, config: ConnectionConfig) -> list[str]:
        return [str(self.file_path(config))]

    def connect(self, config: ConnectionConfig) -> Any:
        """Open the database file read-only; a missing file is an error."""
        sqlite3 = self.driver()
        file_path = self.file_path(config)
        if not file_path.exists():
            raise DataSourceError(f"SQLite file not found: {file_path}")
        return sqlite3.connect(f"file:{file_path}?mode=ro", uri=True, check_same_thread=False)

    def database_name(self, config: ConnectionConfig) -> str:
        if config.name:
            return config.name
        return self.file_path(config).stem or "sqlite"

    def _list_structure(self, conn: Any, config: ConnectionConfig) -> list[Database]:
        cursor = conn.execute(
            "SELECT name FROM sqlite_master "
            "WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
        tables: list[Any] = [Table(name=row[0]) for row in cursor.fetchall()]
        return [Database(name=self.database_name(config), children=tables)]

    def _fetch_records(
        self, conn: Any, database: str, table: str, limit: int, offset: int, schema: str | None
    ) -> Records:
        cursor = conn.execute(
            f"SELECT * FROM {quote_identifier(table)} LIMIT ? OFFSET ?",
            (limit, offset),
        )
        columns = [col[0] for col in cursor.description or ()]
        rows = [[stringify(value) for value in row] for row in cursor.fetchall()]
        return Records(columns=columns, rows=rows)

    def _fetch_properties(
        self, conn: Any, database: str, table: str, schema: str | None
    ) -> list[ColumnProperty]:
        cursor = conn.execute(f"PRAGMA table_info({quote_identifier(table)})")
        # cid, name, type, notnull, dflt_value, pk
        return [
            ColumnProperty(
                name=row[1],
                declared_type=row[2] or "",
                nullable=not row[3],
                default=None if row[4] is None else str(row[4]),
                primary_key=bool(row[5]),
            )
            for row in cursor.fetchall()
        ]
