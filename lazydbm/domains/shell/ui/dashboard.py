"""Dashboard: the structure list and the table detail side by side."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from rich.layout import Layout

from lazydbm.domains.connections.domain.config import ConnectionConfig
from lazydbm.domains.connections.providers.registry import get_adapter
from lazydbm.domains.explorer.ui import list_view
from lazydbm.domains.explorer.ui.list_view import AdapterFactory, ListMessage, ListView
from lazydbm.domains.results.ui import detail_view
from lazydbm.domains.results.ui.detail_view import DetailMessage, DetailView
from lazydbm.shared.core.processes import InteractiveProcessRunner
from lazydbm.shared.runtime.command import Update
from lazydbm.shared.ui.keys import Key
from lazydbm.shared.ui.surface import Rect

LIST_WIDTH_PERCENT = 15


class Focus(Enum):
    LIST = "list"
    DETAIL = "detail"


@dataclass(frozen=True)
class OpenConnection:
    connection: ConnectionConfig


@dataclass(frozen=True)
class OpenTable:
    database: str
    table: str
    schema: str | None = None


@dataclass(frozen=True)
class BackToList:
    pass


@dataclass(frozen=True)
class Leave:
    pass


@dataclass(frozen=True)
class ListMsg:
    msg: ListMessage


@dataclass(frozen=True)
class DetailMsg:
    msg: DetailMessage


DashboardMessage = Union[OpenConnection, OpenTable, BackToList, Leave, ListMsg, DetailMsg]


def dashboard_from_list(msg: ListMessage) -> DashboardMessage:
    """Table choice opens the detail pane; Esc leaves the dashboard."""
    if isinstance(msg, list_view.SelectTable):
        return OpenTable(msg.database, msg.table, msg.schema)
    if isinstance(msg, list_view.LeaveDashboard):
        return Leave()
    return ListMsg(msg)


def dashboard_from_detail(msg: DetailMessage) -> DashboardMessage:
    if isinstance(msg, detail_view.BackToList):
        return BackToList()
    return DetailMsg(msg)


class Dashboard:
    """Routes input and rendering to whichever pane has focus."""

    def __init__(
        self,
        adapter_for: AdapterFactory = get_adapter,
        runner: InteractiveProcessRunner | None = None,
    ) -> None:
        self.list = ListView(adapter_for)
        self.detail = DetailView(adapter_for, runner)
        self.focus = Focus.LIST
        self.connection: ConnectionConfig | None = None

    def update(self, msg: DashboardMessage) -> Update[DashboardMessage]:
        if isinstance(msg, OpenConnection):
            self.connection = msg.connection
            self.focus = Focus.LIST
            return self.list.update(list_view.LoadDatabases(msg.connection)).map(dashboard_from_list)
        if isinstance(msg, OpenTable):
            if self.connection is None:
                return Update.none()
            self.focus = Focus.DETAIL
            return self.detail.open_table(self.connection, msg.database, msg.table, msg.schema).map(
                dashboard_from_detail
            )
        if isinstance(msg, BackToList):
            self.focus = Focus.LIST
            return Update.none()
        if isinstance(msg, Leave):
            # Handled by the root.
            return Update.none()
        if isinstance(msg, ListMsg):
            return self.list.update(msg.msg).map(dashboard_from_list)
        if isinstance(msg, DetailMsg):
            return self.detail.update(msg.msg).map(dashboard_from_detail)
        raise TypeError(f"unexpected dashboard message: {msg!r}")

    def handle_input(self, key: Key) -> Update[DashboardMessage]:
        if self.focus is Focus.LIST:
            return self.list.handle_input(key).map(dashboard_from_list)
        return self.detail.handle_input(key).map(dashboard_from_detail)

    def render(self, surface: Layout, area: Rect, focused: bool) -> None:
        list_area, detail_area = area.split_columns(LIST_WIDTH_PERCENT)
        surface.split_row(
            Layout(name="list", size=list_area.width),
            Layout(name="detail"),
        )
        self.list.render(surface["list"], list_area, focused and self.focus is Focus.LIST)
        self.detail.render(surface["detail"], detail_area, focused and self.focus is Focus.DETAIL)
