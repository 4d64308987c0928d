"""MySQL adapter using PyMySQL (pure Python)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lazydbm.domains.connections.providers.adapters.base import (
    ColumnProperty,
    NetworkAdapter,
    Records,
    stringify,
)
from lazydbm.domains.explorer.domain.tree_nodes import Database, Table

if TYPE_CHECKING:
    from lazydbm.domains.connections.domain.config import ConnectionConfig

SYSTEM_DATABASES = frozenset({"information_schema", "mysql", "performance_schema", "sys"})

TABLES_QUERY = """
    SELECT TABLE_NAME, ENGINE
    FROM information_schema.TABLES
    WHERE TABLE_SCHEMA = %s
    ORDER BY TABLE_NAME
"""

PROPERTIES_QUERY = """
    SELECT COLUMN_NAME, COLUMN_TYPE, IS_NULLABLE, COLUMN_DEFAULT, COLUMN_KEY
    FROM information_schema.COLUMNS
    WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s
    ORDER BY ORDINAL_POSITION
"""


def quote_identifier(name: str) -> str:
    escaped = name.replace("`", "``")
    return f"`{escaped}`"


class MySQLAdapter(NetworkAdapter):
    """Adapter for MySQL using PyMySQL."""

    scheme = "mysql"

    @property
    def name(self) -> str:
        return "MySQL"

    @property
    def driver_module(self) -> str:
        return "pymysql"

    @property
    def install_extra(self) -> str:
        return "mysql"

    @property
    def install_package(self) -> str:
        return "PyMySQL"

    @property
    def cli_tool_name(self) -> str:
        return "mycli"

    def connect(self, config: ConnectionConfig) -> Any:
        """Connect to MySQL database."""
        pymysql = self.driver()
        return pymysql.connect(
            host=config.require("host"),
            port=int(config.require("port")),
            database=config.database or None,
            user=config.require("user"),
            password=config.password or "",
            connect_timeout=10,
            autocommit=True,
            charset="utf8mb4",
        )

    def _list_structure(self, conn: Any, config: ConnectionConfig) -> list[Database]:
        with conn.cursor() as cursor:
            if config.database:
                names = [config.database]
            else:
                cursor.execute("SHOW DATABASES")
                names = [row[0] for row in cursor.fetchall()]

            databases = []
            for name in names:
                if name in SYSTEM_DATABASES:
                    continue
                cursor.execute(TABLES_QUERY, (name,))
                tables: list[Any] = [
                    Table(name=table, engine=engine) for table, engine in cursor.fetchall()
                ]
                databases.append(Database(name=name, children=tables))
        return databases

    def _fetch_records(
        self, conn: Any, database: str, table: str, limit: int, offset: int, schema: str | None
    ) -> Records:
        with conn.cursor() as cursor:
            cursor.execute(
                f"SELECT * FROM {quote_identifier(database)}.{quote_identifier(table)} LIMIT %s OFFSET %s",
                (limit, offset),
            )
            columns = [col[0] for col in cursor.description or ()]
            rows = [[_cell(value) for value in row] for row in cursor.fetchall()]
        return Records(columns=columns, rows=rows)

    def _fetch_properties(
        self, conn: Any, database: str, table: str, schema: str | None
    ) -> list[ColumnProperty]:
        with conn.cursor() as cursor:
            cursor.execute(PROPERTIES_QUERY, (database, table))
            rows = cursor.fetchall()
        return [
            ColumnProperty(
                name=name,
                declared_type=_cell(column_type),
                nullable=str(is_nullable).upper() == "YES",
                default=None if default is None else _cell(default),
                primary_key=column_key == "PRI",
            )
            for name, column_type, is_nullable, default, column_key in rows
        ]


def _cell(value: Any) -> str:
    # Text columns with a binary collation come back as bytes.
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            return stringify(value)
    return stringify(value)
