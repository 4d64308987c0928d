"""Root view: switches between the connection picker and the dashboard."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Union

from rich.layout import Layout

from lazydbm.domains.connections.domain.config import ConnectionConfig
from lazydbm.domains.connections.providers.registry import get_adapter
from lazydbm.domains.connections.ui import picker
from lazydbm.domains.connections.ui.picker import ConnectionPicker, PickerMessage
from lazydbm.domains.explorer.ui.list_view import AdapterFactory
from lazydbm.domains.shell.ui import dashboard
from lazydbm.domains.shell.ui.dashboard import Dashboard, DashboardMessage
from lazydbm.shared.core.processes import InteractiveProcessRunner
from lazydbm.shared.runtime.command import Update
from lazydbm.shared.ui.keys import Key
from lazydbm.shared.ui.surface import Rect

logger = logging.getLogger(__name__)


class Route(Enum):
    CONNECTION_PICKER = "connection_picker"
    DASHBOARD = "dashboard"


@dataclass(frozen=True)
class ConnectionChosen:
    connection: ConnectionConfig


@dataclass(frozen=True)
class ReturnToPicker:
    pass


@dataclass(frozen=True)
class PickerMsg:
    msg: PickerMessage


@dataclass(frozen=True)
class DashboardMsg:
    msg: DashboardMessage


RootMessage = Union[ConnectionChosen, ReturnToPicker, PickerMsg, DashboardMsg]


def root_from_picker(msg: PickerMessage) -> RootMessage:
    if isinstance(msg, picker.ConnectionSelected):
        return ConnectionChosen(msg.connection)
    return PickerMsg(msg)


def root_from_dashboard(msg: DashboardMessage) -> RootMessage:
    if isinstance(msg, dashboard.Leave):
        return ReturnToPicker()
    return DashboardMsg(msg)


class Root:
    """Top of the view tree."""

    def __init__(
        self,
        connections: Sequence[ConnectionConfig],
        adapter_for: AdapterFactory = get_adapter,
        runner: InteractiveProcessRunner | None = None,
    ) -> None:
        self._make_dashboard: Callable[[], Dashboard] = lambda: Dashboard(adapter_for, runner)
        self.route = Route.CONNECTION_PICKER
        self.picker = ConnectionPicker(connections, adapter_for)
        self.dashboard = self._make_dashboard()

    def update(self, msg: RootMessage) -> Update[RootMessage]:
        if isinstance(msg, ConnectionChosen):
            logger.info("connection chosen: %s", msg.connection.name)
            self.route = Route.DASHBOARD
            self.dashboard = self._make_dashboard()
            return self.dashboard.update(dashboard.OpenConnection(msg.connection)).map(root_from_dashboard)
        if isinstance(msg, ReturnToPicker):
            logger.info("returning to connection picker")
            self.route = Route.CONNECTION_PICKER
            return Update.none()
        if isinstance(msg, PickerMsg):
            return self.picker.update(msg.msg).map(root_from_picker)
        if isinstance(msg, DashboardMsg):
            return self.dashboard.update(msg.msg).map(root_from_dashboard)
        raise TypeError(f"unexpected root message: {msg!r}")

    def handle_input(self, key: Key) -> Update[RootMessage]:
        if self.route is Route.CONNECTION_PICKER:
            return self.picker.handle_input(key).map(root_from_picker)
        return self.dashboard.handle_input(key).map(root_from_dashboard)

    def render(self, surface: Layout, area: Rect, focused: bool) -> None:
        if self.route is Route.CONNECTION_PICKER:
            self.picker.render(surface, area, focused)
        else:
            self.dashboard.render(surface, area, focused)
