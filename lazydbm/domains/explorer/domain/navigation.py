"""Navigation and filtering over a database > schema > table tree.

The selection is stored as a structural path (indices into the current
tree). Expand state lives on the nodes, and filter visibility is computed on
demand and never stored. Every operation that can hide the selected node
relocates it to a visible one, so the selection never dangles.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Union

from lazydbm.domains.explorer.domain.tree_nodes import Child, Database, Schema, Table


@dataclass(frozen=True)
class DatabasePath:
    db: int


@dataclass(frozen=True)
class SchemaPath:
    db: int
    child: int


@dataclass(frozen=True)
class TableInDbPath:
    db: int
    child: int


@dataclass(frozen=True)
class TableInSchemaPath:
    db: int
    child: int
    table: int


NodePath = Union[DatabasePath, SchemaPath, TableInDbPath, TableInSchemaPath]
ContainerPath = Union[DatabasePath, SchemaPath]


class NodeKind(Enum):
    DATABASE = "database"
    SCHEMA = "schema"
    TABLE = "table"


@dataclass(frozen=True)
class DatabaseNode:
    """Selected database."""

    name: str


@dataclass(frozen=True)
class SchemaNode:
    """Selected schema."""

    database: str
    schema: str


@dataclass(frozen=True)
class TableNode:
    """Selected table, with the database and schema (if any) that hold it."""

    database: str
    schema: str | None
    name: str


SelectedNode = Union[DatabaseNode, SchemaNode, TableNode]


@dataclass(frozen=True)
class VisibleRow:
    path: NodePath
    depth: int
    kind: NodeKind
    name: str
    expanded: bool
    has_children: bool


def ancestors(path: NodePath) -> list[ContainerPath]:
    """Container paths above ``path``, nearest first."""
    if isinstance(path, DatabasePath):
        return []
    if isinstance(path, TableInSchemaPath):
        return [SchemaPath(path.db, path.child), DatabasePath(path.db)]
    return [DatabasePath(path.db)]


class NavigationTree:
    """Ordered databases plus a single selection and a text filter."""

    def __init__(self, databases: Iterable[Database] = ()) -> None:
        self._databases: list[Database] = []
        self._selected: NodePath | None = None
        self._query = ""
        self.load(databases)

    @property
    def databases(self) -> list[Database]:
        return self._databases

    @property
    def selected(self) -> NodePath | None:
        return self._selected

    @property
    def filter_query(self) -> str:
        return self._query

    def load(self, databases: Iterable[Database]) -> None:
        """Replace the whole structure, clear the filter and select the first node."""
        self._databases = list(databases)
        self._query = ""
        self._selected = self._first_visible()

    # -- structure access -------------------------------------------------

    def node_at(self, path: NodePath) -> Database | Schema | Table:
        database = self._databases[path.db]
        if isinstance(path, DatabasePath):
            return database
        child = database.children[path.child]
        if isinstance(path, TableInSchemaPath):
            assert isinstance(child, Schema)
            return child.tables[path.table]
        return child

    def _walk(self) -> Iterator[tuple[NodePath, int, Database | Schema | Table]]:
        """Pre-order traversal that only enters expanded containers."""
        for i, database in enumerate(self._databases):
            yield DatabasePath(i), 0, database
            if not database.expanded:
                continue
            for j, child in enumerate(database.children):
                if isinstance(child, Schema):
                    yield SchemaPath(i, j), 1, child
                    if child.expanded:
                        for k, table in enumerate(child.tables):
                            yield TableInSchemaPath(i, j, k), 2, table
                else:
                    yield TableInDbPath(i, j), 1, child

    # -- filter -----------------------------------------------------------

    def _matches(self, name: str) -> bool:
        return self._query.lower() in name.lower()

    def is_visible(self, node: Database | Child) -> bool:
        """Filter predicate: the node matches, or (containers) any descendant does."""
        if not self._query or self._matches(node.name):
            return True
        if isinstance(node, Database):
            return any(self.is_visible(child) for child in node.children)
        if isinstance(node, Schema):
            return any(self._matches(table.name) for table in node.tables)
        return False

    def push_filter(self, char: str) -> None:
        self.set_filter(self._query + char)

    def pop_filter(self) -> None:
        self.set_filter(self._query[:-1])

    def set_filter(self, query: str) -> None:
        self._query = query
        self._revalidate()

    # -- visible sequence ---------------------------------------------------

    def _visible_walk(self) -> Iterator[tuple[NodePath, int, Database | Schema | Table]]:
        hidden: list[ContainerPath] = []
        for path, depth, node in self._walk():
            # Descendants of a hidden container cannot match either.
            if any(_is_under(path, h) for h in hidden):
                continue
            if self.is_visible(node):
                yield path, depth, node
            elif isinstance(path, (DatabasePath, SchemaPath)):
                hidden.append(path)

    def visible_paths(self) -> Iterator[NodePath]:
        for path, _, _ in self._visible_walk():
            yield path

    def visible_rows(self) -> list[VisibleRow]:
        rows = []
        for path, depth, node in self._visible_walk():
            if isinstance(node, Database):
                kind = NodeKind.DATABASE
                expanded, has_children = node.expanded, bool(node.children)
            elif isinstance(node, Schema):
                kind = NodeKind.SCHEMA
                expanded, has_children = node.expanded, bool(node.tables)
            else:
                kind, expanded, has_children = NodeKind.TABLE, False, False
            rows.append(VisibleRow(path, depth, kind, node.name, expanded, has_children))
        return rows

    @property
    def selected_index(self) -> int | None:
        if self._selected is None:
            return None
        for index, path in enumerate(self.visible_paths()):
            if path == self._selected:
                return index
        return None

    def _first_visible(self) -> NodePath | None:
        return next(self.visible_paths(), None)

    def _is_shown(self, path: NodePath) -> bool:
        return any(p == path for p in self.visible_paths())

    def _revalidate(self) -> None:
        """Move a selection that is no longer shown to its nearest shown ancestor."""
        if self._selected is not None and self._is_shown(self._selected):
            return
        if self._selected is not None:
            for ancestor in ancestors(self._selected):
                if self._is_shown(ancestor):
                    self._selected = ancestor
                    return
        self._selected = self._first_visible()

    # -- movement -----------------------------------------------------------

    def move_next(self) -> None:
        if self._selected is None:
            return
        paths = self.visible_paths()
        for path in paths:
            if path == self._selected:
                break
        following = next(paths, None)
        if following is not None:
            self._selected = following

    def move_prev(self) -> None:
        if self._selected is None:
            return
        previous: NodePath | None = None
        for path in self.visible_paths():
            if path == self._selected:
                break
            previous = path
        if previous is not None:
            self._selected = previous

    def move_first(self) -> None:
        if self._selected is None:
            return
        self._selected = self._first_visible()

    def move_last(self) -> None:
        if self._selected is None:
            return
        last = None
        for last in self.visible_paths():
            pass
        self._selected = last

    # -- expand / collapse ----------------------------------------------------

    def _container(self, path: NodePath | None) -> Database | Schema | None:
        if path is None:
            return None
        node = self.node_at(path)
        if isinstance(node, Database) and node.children:
            return node
        if isinstance(node, Schema) and node.tables:
            return node
        return None

    def expand(self, path: NodePath | None = None) -> None:
        container = self._container(path or self._selected)
        if container is not None:
            container.expanded = True

    def collapse(self, path: NodePath | None = None) -> None:
        target = path or self._selected
        container = self._container(target)
        if container is None or target is None:
            return
        container.expanded = False
        if self._selected is not None and _is_under(self._selected, target):
            self._selected = target

    def toggle(self, path: NodePath | None = None) -> None:
        container = self._container(path or self._selected)
        if container is None:
            return
        if container.expanded:
            self.collapse(path)
        else:
            self.expand(path)

    # -- selection ------------------------------------------------------------

    def selected_node(self) -> SelectedNode | None:
        path = self._selected
        if path is None:
            return None
        database = self._databases[path.db]
        if isinstance(path, DatabasePath):
            return DatabaseNode(database.name)
        child = database.children[path.child]
        if isinstance(path, SchemaPath):
            return SchemaNode(database.name, child.name)
        if isinstance(path, TableInSchemaPath):
            assert isinstance(child, Schema)
            return TableNode(database.name, child.name, child.tables[path.table].name)
        assert isinstance(child, Table)
        return TableNode(database.name, child.schema, child.name)


def _is_under(path: NodePath, ancestor: NodePath) -> bool:
    return ancestor in ancestors(path)
