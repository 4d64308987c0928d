"""Database structure nodes shown in the explorer tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass
class Table:
    name: str
    engine: str | None = None
    schema: str | None = None


@dataclass
class Schema:
    name: str
    tables: list[Table] = field(default_factory=list)
    expanded: bool = False


Child = Union[Table, Schema]


@dataclass
class Database:
    """A database and its direct children (tables, or schemas holding tables)."""

    name: str
    children: list[Child] = field(default_factory=list)
    expanded: bool = False
