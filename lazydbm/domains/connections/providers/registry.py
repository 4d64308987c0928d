"""Adapter lookup for the closed set of supported backends."""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from lazydbm.domains.connections.domain.config import DatabaseType

if TYPE_CHECKING:
    from lazydbm.domains.connections.providers.adapters.base import DatabaseAdapter


@lru_cache(maxsize=None)
def get_adapter(db_type: DatabaseType) -> DatabaseAdapter:
    """Return the adapter for a backend. Adapter modules are imported on first use."""
    if db_type is DatabaseType.MYSQL:
        from lazydbm.domains.connections.providers.mysql.adapter import MySQLAdapter

        return MySQLAdapter()
    if db_type is DatabaseType.POSTGRES:
        from lazydbm.domains.connections.providers.postgresql.adapter import PostgreSQLAdapter

        return PostgreSQLAdapter()
    if db_type is DatabaseType.SQLITE:
        from lazydbm.domains.connections.providers.sqlite.adapter import SQLiteAdapter

        return SQLiteAdapter()
    raise ValueError(f"unsupported database type: {db_type!r}")
