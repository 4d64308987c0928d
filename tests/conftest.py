"""Shared pytest fixtures for lazydbm tests."""

from __future__ import annotations

import copy
import os
import sqlite3
import tempfile
from pathlib import Path
from typing import Any

import pytest

_TEST_CONFIG_DIR = Path(tempfile.mkdtemp(prefix="lazydbm-test-config-"))
os.environ.setdefault("LAZYDBM_CONFIG_DIR", str(_TEST_CONFIG_DIR))

from lazydbm.domains.connections.domain.config import ConnectionConfig, DatabaseType  # noqa: E402
from lazydbm.domains.connections.providers.adapters.base import ColumnProperty, Records  # noqa: E402
from lazydbm.domains.explorer.domain.tree_nodes import Database, Schema, Table  # noqa: E402
from lazydbm.shared.core.errors import DataSourceError, ExternalProcessError  # noqa: E402


class InlineSpawner:
    """Runs spawned work immediately on the calling thread."""

    def __init__(self) -> None:
        self.submitted: list[str] = []

    def __call__(self, work, name: str) -> None:
        self.submitted.append(name)
        work()


class FakeAdapter:
    """In-memory stand-in for a DatabaseAdapter."""

    cli_tool_name = "fakecli"

    def __init__(
        self,
        databases: list[Database] | None = None,
        records: Records | None = None,
        properties: list[ColumnProperty] | None = None,
    ) -> None:
        self.databases = databases if databases is not None else sample_structure()
        self.records = records or Records(
            columns=["id", "name"],
            rows=[[str(i), f"user{i}"] for i in range(1, 451)],
        )
        self.properties = properties or [
            ColumnProperty("id", "INTEGER", nullable=False, primary_key=True),
            ColumnProperty("name", "TEXT", default="'anon'"),
        ]
        self.error: str | None = None
        self.exception: Exception | None = None
        self.cli_available = True
        self.calls: list[tuple[Any, ...]] = []

    def connection_descriptor(self, config: ConnectionConfig) -> str:
        return f"fake://{config.name}"

    def list_structure(self, config: ConnectionConfig) -> list[Database]:
        self.calls.append(("list_structure", config.name))
        if self.error:
            raise DataSourceError(self.error)
        if self.exception is not None:
            raise self.exception
        return copy.deepcopy(self.databases)

    def fetch_records(self, config, database, table, limit, offset, schema=None) -> Records:
        self.calls.append(("fetch_records", database, table, limit, offset, schema))
        if self.error:
            raise DataSourceError(self.error)
        if self.exception is not None:
            raise self.exception
        return Records(self.records.columns, self.records.rows[offset : offset + limit])

    def fetch_properties(self, config, database, table, schema=None) -> list[ColumnProperty]:
        self.calls.append(("fetch_properties", database, table, schema))
        if self.error:
            raise DataSourceError(self.error)
        if self.exception is not None:
            raise self.exception
        return list(self.properties)

    def is_cli_available(self, runner: Any) -> bool:
        return self.cli_available

    def launch_cli(self, config: ConnectionConfig, runner: Any) -> int:
        self.calls.append(("launch_cli", config.name))
        status = runner.run([self.cli_tool_name, self.connection_descriptor(config)])
        if status != 0:
            raise ExternalProcessError(f"{self.cli_tool_name} exited with status {status}")
        return status


def sample_structure() -> list[Database]:
    return [
        Database("app", [Table("orders"), Table("users")]),
        Database("analytics", [Schema("public", [Table("events"), Table("sessions")])]),
    ]


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def adapter_for(fake_adapter: FakeAdapter):
    return lambda db_type: fake_adapter


@pytest.fixture
def inline_spawner() -> InlineSpawner:
    return InlineSpawner()


@pytest.fixture
def pg_connection() -> ConnectionConfig:
    return ConnectionConfig(
        name="pg",
        db_type=DatabaseType.POSTGRES,
        host="127.0.0.1",
        port=5432,
        user="postgres",
        password="secret",
        database="mydb",
    )


@pytest.fixture(scope="function")
def sqlite_db_path(tmp_path: Path) -> Path:
    """A small SQLite database with NULLs, BLOBs and a table larger than one page."""
    db_path = tmp_path / "sample.db"
    conn = sqlite3.connect(db_path)
    try:
        conn.executescript(
            """
            CREATE TABLE users (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                avatar BLOB,
                note TEXT DEFAULT 'n/a'
            );
            CREATE TABLE events (id INTEGER PRIMARY KEY, kind TEXT);
            """
        )
        conn.executemany(
            "INSERT INTO users (id, name, avatar, note) VALUES (?, ?, ?, ?)",
            [
                (1, "Alice", b"\x00\x01\x02", "first"),
                (2, "Bob", None, None),
            ],
        )
        conn.executemany(
            "INSERT INTO events (id, kind) VALUES (?, ?)",
            [(i, "click" if i % 2 else "view") for i in range(1, 251)],
        )
        conn.commit()
    finally:
        conn.close()
    return db_path


@pytest.fixture
def sqlite_connection(sqlite_db_path: Path) -> ConnectionConfig:
    return ConnectionConfig(name="local", db_type=DatabaseType.SQLITE, path=str(sqlite_db_path))
