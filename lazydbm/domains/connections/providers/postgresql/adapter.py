"""PostgreSQL adapter using psycopg2."""

from __future__ import annotations

from itertools import groupby
from typing import TYPE_CHECKING, Any

from lazydbm.domains.connections.providers.adapters.base import (
    ColumnProperty,
    NetworkAdapter,
    Records,
    stringify,
)
from lazydbm.domains.explorer.domain.tree_nodes import Database, Schema, Table

if TYPE_CHECKING:
    from lazydbm.domains.connections.domain.config import ConnectionConfig

DEFAULT_DATABASE = "postgres"
DEFAULT_SCHEMA = "public"

STRUCTURE_QUERY = """
    SELECT table_schema, table_name
    FROM information_schema.tables
    WHERE table_type = 'BASE TABLE'
      AND table_schema NOT IN ('pg_catalog', 'information_schema')
    ORDER BY table_schema, table_name
"""

COLUMNS_QUERY = """
    SELECT column_name
    FROM information_schema.columns
    WHERE table_schema = %s AND table_name = %s
    ORDER BY ordinal_position
"""

PROPERTIES_QUERY = """
    SELECT c.column_name, c.data_type, c.is_nullable, c.column_default,
           EXISTS (
               SELECT 1
               FROM information_schema.table_constraints tc
               JOIN information_schema.key_column_usage kcu
                 ON tc.constraint_name = kcu.constraint_name
                AND tc.table_schema = kcu.table_schema
                AND tc.table_name = kcu.table_name
               WHERE tc.constraint_type = 'PRIMARY KEY'
                 AND tc.table_schema = c.table_schema
                 AND tc.table_name = c.table_name
                 AND kcu.column_name = c.column_name
           ) AS is_pk
    FROM information_schema.columns c
    WHERE c.table_schema = %s AND c.table_name = %s
    ORDER BY c.ordinal_position
"""


def quote_identifier(name: str) -> str:
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


class PostgreSQLAdapter(NetworkAdapter):
    """Adapter for PostgreSQL using psycopg2."""

    scheme = "postgres"

    @property
    def name(self) -> str:
        return "PostgreSQL"

    @property
    def driver_module(self) -> str:
        return "psycopg2"

    @property
    def install_extra(self) -> str:
        return "postgres"

    @property
    def install_package(self) -> str:
        return "psycopg2-binary"

    @property
    def cli_tool_name(self) -> str:
        return "pgcli"

    def connect(self, config: ConnectionConfig) -> Any:
        """Connect to PostgreSQL database."""
        psycopg2 = self.driver()
        conn = psycopg2.connect(
            host=config.require("host"),
            port=config.require("port"),
            dbname=config.database or DEFAULT_DATABASE,
            user=config.require("user"),
            password=config.password or "",
            connect_timeout=10,
        )
        conn.autocommit = True
        return conn

    def _list_structure(self, conn: Any, config: ConnectionConfig) -> list[Database]:
        with conn.cursor() as cursor:
            cursor.execute(STRUCTURE_QUERY)
            rows = cursor.fetchall()

        schemas: list[Any] = [
            Schema(
                name=schema_name,
                tables=[Table(name=table, schema=schema_name) for _, table in group],
            )
            for schema_name, group in groupby(rows, key=lambda row: row[0])
        ]
        return [Database(name=config.database or DEFAULT_DATABASE, children=schemas)]

    def _fetch_records(
        self, conn: Any, database: str, table: str, limit: int, offset: int, schema: str | None
    ) -> Records:
        schema = schema or DEFAULT_SCHEMA
        with conn.cursor() as cursor:
            cursor.execute(COLUMNS_QUERY, (schema, table))
            columns = [row[0] for row in cursor.fetchall()]

            # Every column is cast to text so all types display uniformly.
            select_list = ", ".join(f"{quote_identifier(c)}::text" for c in columns) or "*"
            cursor.execute(
                f"SELECT {select_list} FROM {quote_identifier(schema)}.{quote_identifier(table)} "
                "LIMIT %s OFFSET %s",
                (limit, offset),
            )
            if not columns:
                columns = [col[0] for col in cursor.description or ()]
            rows = [[stringify(value) for value in row] for row in cursor.fetchall()]
        return Records(columns=columns, rows=rows)

    def _fetch_properties(
        self, conn: Any, database: str, table: str, schema: str | None
    ) -> list[ColumnProperty]:
        with conn.cursor() as cursor:
            cursor.execute(PROPERTIES_QUERY, (schema or DEFAULT_SCHEMA, table))
            rows = cursor.fetchall()
        return [
            ColumnProperty(
                name=name,
                declared_type=data_type,
                nullable=str(is_nullable).upper() == "YES",
                default=default,
                primary_key=bool(is_pk),
            )
            for name, data_type, is_nullable, default, is_pk in rows
        ]
