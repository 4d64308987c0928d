"""Connection picker shown at startup and after leaving the dashboard."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Union

from rich.layout import Layout
from rich.text import Text

from lazydbm.domains.connections.domain.config import ConnectionConfig, DatabaseType
from lazydbm.domains.connections.providers.adapters.base import DatabaseAdapter
from lazydbm.domains.connections.providers.registry import get_adapter
from lazydbm.shared.core.errors import ConfigError
from lazydbm.shared.runtime.command import Update
from lazydbm.shared.ui.keys import Key
from lazydbm.shared.ui.scroll import follow_window
from lazydbm.shared.ui.surface import (
    HIGHLIGHT_STYLE,
    HIGHLIGHT_SYMBOL,
    TITLE_STYLE,
    Rect,
    bordered,
)

logger = logging.getLogger(__name__)

PAGE_STEP = 10
BOX_WIDTH_PERCENT = 60
BOX_HEIGHT_PERCENT = 30

AdapterFactory = Callable[[DatabaseType], DatabaseAdapter]


@dataclass(frozen=True)
class MoveCursor:
    delta: int


@dataclass(frozen=True)
class JumpCursor:
    to_end: bool


@dataclass(frozen=True)
class ConnectionSelected:
    connection: ConnectionConfig


PickerMessage = Union[MoveCursor, JumpCursor, ConnectionSelected]


def connection_label(connection: ConnectionConfig, adapter_for: AdapterFactory = get_adapter) -> str:
    try:
        descriptor = adapter_for(connection.db_type).connection_descriptor(connection)
    except ConfigError as e:
        logger.warning("connection %s: %s", connection.name, e)
        descriptor = "invalid config"
    return f"{connection.name} ({descriptor})"


class ConnectionPicker:
    """A centred list of configured connections."""

    def __init__(
        self,
        connections: Sequence[ConnectionConfig],
        adapter_for: AdapterFactory = get_adapter,
    ) -> None:
        self.connections = list(connections)
        self.labels = [connection_label(c, adapter_for) for c in self.connections]
        self.cursor = 0

    @property
    def selected_connection(self) -> ConnectionConfig | None:
        if not self.connections:
            return None
        return self.connections[self.cursor]

    def update(self, msg: PickerMessage) -> Update[PickerMessage]:
        if not self.connections:
            return Update.none()
        last = len(self.connections) - 1
        if isinstance(msg, MoveCursor):
            self.cursor = min(max(0, self.cursor + msg.delta), last)
        elif isinstance(msg, JumpCursor):
            self.cursor = last if msg.to_end else 0
        # ConnectionSelected is consumed by the root.
        return Update.none()

    def handle_input(self, key: Key) -> Update[PickerMessage]:
        if key.is_("enter"):
            connection = self.selected_connection
            if connection is None:
                return Update.none()
            return Update.with_msg(ConnectionSelected(connection))
        if key.is_("up", "k"):
            return Update.with_msg(MoveCursor(-1))
        if key.is_("down", "j"):
            return Update.with_msg(MoveCursor(1))
        if key.is_("pageup"):
            return Update.with_msg(MoveCursor(-PAGE_STEP))
        if key.is_("pagedown"):
            return Update.with_msg(MoveCursor(PAGE_STEP))
        if key.is_("home"):
            return Update.with_msg(JumpCursor(to_end=False))
        if key.is_("end"):
            return Update.with_msg(JumpCursor(to_end=True))
        return Update.none()

    def render(self, surface: Layout, area: Rect, focused: bool) -> None:
        box = area.centered(BOX_WIDTH_PERCENT, BOX_HEIGHT_PERCENT)
        side = (100 - BOX_WIDTH_PERCENT) // 2
        edge = (100 - BOX_HEIGHT_PERCENT) // 2
        surface.split_column(
            Layout(Text(""), name="top", ratio=edge),
            Layout(name="middle", ratio=BOX_HEIGHT_PERCENT),
            Layout(Text(""), name="bottom", ratio=edge),
        )
        surface["middle"].split_row(
            Layout(Text(""), name="left", ratio=side),
            Layout(name="box", ratio=BOX_WIDTH_PERCENT),
            Layout(Text(""), name="right", ratio=side),
        )
        panel = bordered(self._items(box), title="Connections", focused=focused)
        panel.title = Text("Connections", style=TITLE_STYLE)
        surface["box"].update(panel)

    def _items(self, box: Rect) -> Text:
        if not self.connections:
            return Text("(no connections found)", style="dim")
        start, end = follow_window(len(self.labels), max(1, box.inner_height), self.cursor)
        text = Text(no_wrap=True, overflow="ellipsis")
        for index in range(start, end):
            if index > start:
                text.append("\n")
            if index == self.cursor:
                text.append(HIGHLIGHT_SYMBOL + self.labels[index], style=HIGHLIGHT_STYLE)
            else:
                text.append(" " * len(HIGHLIGHT_SYMBOL) + self.labels[index])
        return text
