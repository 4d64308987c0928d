"""Database structure pane: the navigable tree plus its filter box."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Union

from rich.layout import Layout
from rich.text import Text

from lazydbm.domains.connections.domain.config import ConnectionConfig, DatabaseType
from lazydbm.domains.connections.providers.adapters.base import DatabaseAdapter
from lazydbm.domains.connections.providers.registry import get_adapter
from lazydbm.domains.explorer.domain.navigation import (
    NavigationTree,
    NodeKind,
    TableNode,
    VisibleRow,
)
from lazydbm.domains.explorer.domain.tree_nodes import Database
from lazydbm.shared.core.errors import LazyDBMError
from lazydbm.shared.runtime.channel import MessageSender
from lazydbm.shared.runtime.command import SpawnBackground, Update
from lazydbm.shared.runtime.requests import next_request_id
from lazydbm.shared.ui.keys import Key
from lazydbm.shared.ui.scroll import follow_window
from lazydbm.shared.ui.surface import HIGHLIGHT_STYLE, HIGHLIGHT_SYMBOL, Rect, bordered

logger = logging.getLogger(__name__)

FILTER_HEIGHT = 3

AdapterFactory = Callable[[DatabaseType], DatabaseAdapter]


class Step(Enum):
    PREV = "prev"
    NEXT = "next"
    FIRST = "first"
    LAST = "last"


class ExpandMode(Enum):
    EXPAND = "expand"
    COLLAPSE = "collapse"
    TOGGLE = "toggle"


class InputMode(Enum):
    TREE = "tree"
    FILTER = "filter"


@dataclass(frozen=True)
class MoveSelection:
    step: Step


@dataclass(frozen=True)
class ChangeExpansion:
    mode: ExpandMode


@dataclass(frozen=True)
class StartFilter:
    pass


@dataclass(frozen=True)
class StopFilter:
    pass


@dataclass(frozen=True)
class PushFilterChar:
    char: str


@dataclass(frozen=True)
class PopFilterChar:
    pass


@dataclass(frozen=True)
class LeaveDashboard:
    pass


@dataclass(frozen=True)
class SelectTable:
    database: str
    table: str
    schema: str | None = None


@dataclass(frozen=True)
class LoadDatabases:
    connection: ConnectionConfig


@dataclass(frozen=True)
class DatabasesLoaded:
    request_id: int
    databases: list[Database]


@dataclass(frozen=True)
class DatabasesLoadFailed:
    request_id: int
    error: str


ListMessage = Union[
    MoveSelection,
    ChangeExpansion,
    StartFilter,
    StopFilter,
    PushFilterChar,
    PopFilterChar,
    LeaveDashboard,
    SelectTable,
    LoadDatabases,
    DatabasesLoaded,
    DatabasesLoadFailed,
]

_DATABASE_ICON = "📁"
_SCHEMA_ICON = "📂"
_TABLE_ICON = "📄"


class ListView:
    """Left-hand pane of the dashboard."""

    def __init__(self, adapter_for: AdapterFactory = get_adapter) -> None:
        self._adapter_for = adapter_for
        self.tree = NavigationTree()
        self.mode = InputMode.TREE
        self.connection: ConnectionConfig | None = None
        self.loading = False
        self.error: str | None = None
        self._request_id: int | None = None

    def update(self, msg: ListMessage) -> Update[ListMessage]:
        if isinstance(msg, MoveSelection):
            self._move(msg.step)
        elif isinstance(msg, ChangeExpansion):
            if msg.mode is ExpandMode.EXPAND:
                self.tree.expand()
            elif msg.mode is ExpandMode.COLLAPSE:
                self.tree.collapse()
            else:
                self.tree.toggle()
        elif isinstance(msg, StartFilter):
            self.mode = InputMode.FILTER
        elif isinstance(msg, StopFilter):
            self.mode = InputMode.TREE
        elif isinstance(msg, PushFilterChar):
            self.tree.push_filter(msg.char)
        elif isinstance(msg, PopFilterChar):
            self.tree.pop_filter()
        elif isinstance(msg, LoadDatabases):
            return self._start_load(msg.connection)
        elif isinstance(msg, DatabasesLoaded):
            if msg.request_id != self._request_id:
                logger.debug("discarding stale structure load %d", msg.request_id)
                return Update.none()
            self.tree.load(msg.databases)
            self.mode = InputMode.TREE
            self.loading = False
            self.error = None
        elif isinstance(msg, DatabasesLoadFailed):
            if msg.request_id != self._request_id:
                logger.debug("discarding stale structure failure %d", msg.request_id)
                return Update.none()
            self.loading = False
            self.error = msg.error
        # LeaveDashboard and SelectTable are consumed by the dashboard.
        return Update.none()

    def _move(self, step: Step) -> None:
        if step is Step.PREV:
            self.tree.move_prev()
        elif step is Step.NEXT:
            self.tree.move_next()
        elif step is Step.FIRST:
            self.tree.move_first()
        else:
            self.tree.move_last()

    def _start_load(self, connection: ConnectionConfig) -> Update[ListMessage]:
        self.connection = connection
        self.loading = True
        self.error = None
        request_id = next_request_id()
        self._request_id = request_id
        adapter_for = self._adapter_for

        def task(sender: MessageSender) -> None:
            logger.info("loading databases for %s (%s)", connection.name, connection.db_type.value)
            try:
                databases = adapter_for(connection.db_type).list_structure(connection)
            except LazyDBMError as e:
                logger.error("structure load failed for %s: %s", connection.name, e)
                sender.send(DatabasesLoadFailed(request_id, str(e)))
                return
            except Exception as e:
                logger.exception("structure load crashed for %s", connection.name)
                sender.send(DatabasesLoadFailed(request_id, str(e) or type(e).__name__))
                return
            logger.info("loaded %d database(s) for %s", len(databases), connection.name)
            sender.send(DatabasesLoaded(request_id, databases))

        return Update.with_cmd(SpawnBackground(task, name="load-databases"))

    def handle_input(self, key: Key) -> Update[ListMessage]:
        if self.mode is InputMode.FILTER:
            return self._handle_filter_key(key)

        if key.is_("up", "k"):
            return Update.with_msg(MoveSelection(Step.PREV))
        if key.is_("down", "j"):
            return Update.with_msg(MoveSelection(Step.NEXT))
        if key.is_("g"):
            return Update.with_msg(MoveSelection(Step.FIRST))
        if key.is_("G"):
            return Update.with_msg(MoveSelection(Step.LAST))
        if key.is_("right", "l"):
            return Update.with_msg(ChangeExpansion(ExpandMode.EXPAND))
        if key.is_("left", "h"):
            return Update.with_msg(ChangeExpansion(ExpandMode.COLLAPSE))
        if key.is_("/"):
            return Update.with_msg(StartFilter())
        if key.is_("escape"):
            return Update.with_msg(LeaveDashboard())
        if key.is_("enter"):
            node = self.tree.selected_node()
            if node is None:
                return Update.none()
            if isinstance(node, TableNode):
                return Update.with_msg(SelectTable(node.database, node.name, node.schema))
            return Update.with_msg(ChangeExpansion(ExpandMode.TOGGLE))
        return Update.none()

    def _handle_filter_key(self, key: Key) -> Update[ListMessage]:
        if key.is_("enter", "escape"):
            return Update.with_msg(StopFilter())
        if key.is_("backspace"):
            return Update.with_msg(PopFilterChar())
        if key.printable and key.char is not None:
            return Update.with_msg(PushFilterChar(key.char))
        return Update.none()

    # -- rendering ------------------------------------------------------------

    def render(self, surface: Layout, area: Rect, focused: bool) -> None:
        tree_area, _ = area.split_rows(area.height - FILTER_HEIGHT)
        surface.split_column(
            Layout(name="tree"),
            Layout(name="filter", size=FILTER_HEIGHT),
        )
        surface["tree"].update(
            bordered(
                self._tree_text(tree_area),
                title="Database Structure",
                focused=focused and self.mode is InputMode.TREE,
                subtitle=self.error,
            )
        )
        query = self.tree.filter_query
        filter_text = Text(f"{query}_" if self.mode is InputMode.FILTER else query, no_wrap=True)
        surface["filter"].update(
            bordered(filter_text, title="Filter", focused=focused and self.mode is InputMode.FILTER)
        )

    def _tree_text(self, area: Rect) -> Text:
        rows = self.tree.visible_rows()
        if not rows:
            return Text("(loading...)" if self.loading else "(no database structure)", style="dim")

        selected = self.tree.selected_index
        start, end = follow_window(len(rows), area.inner_height, selected or 0)
        text = Text(no_wrap=True, overflow="ellipsis")
        for index in range(start, end):
            if index > start:
                text.append("\n")
            label = row_label(rows[index])
            if index == selected:
                text.append(HIGHLIGHT_SYMBOL + label, style=HIGHLIGHT_STYLE)
            else:
                text.append(" " * len(HIGHLIGHT_SYMBOL) + label)
        return text


def row_label(row: VisibleRow) -> str:
    indent = "  " * row.depth
    if row.kind is NodeKind.TABLE:
        return f"{indent}  {_TABLE_ICON} {row.name}"
    icon = _DATABASE_ICON if row.kind is NodeKind.DATABASE else _SCHEMA_ICON
    if row.expanded:
        marker = "▼"
    elif row.has_children:
        marker = "▶"
    else:
        marker = " "
    return f"{indent}{marker} {icon} {row.name}"
