"""Table detail pane: paginated records, the SQL CLI launcher and column properties."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Union

from rich.console import RenderableType
from rich.layout import Layout
from rich.table import Table as RichTable
from rich.text import Text

from lazydbm.domains.connections.domain.config import ConnectionConfig, DatabaseType
from lazydbm.domains.connections.providers.adapters.base import (
    ColumnProperty,
    DatabaseAdapter,
    Records,
)
from lazydbm.domains.connections.providers.registry import get_adapter
from lazydbm.shared.core.errors import LazyDBMError
from lazydbm.shared.core.processes import InteractiveProcessRunner, SubprocessRunner
from lazydbm.shared.runtime.channel import MessageSender
from lazydbm.shared.runtime.command import SpawnBackground, SuspendForExternalProcess, Update, batch
from lazydbm.shared.runtime.requests import next_request_id
from lazydbm.shared.ui.keys import Key
from lazydbm.shared.ui.scroll import ScrollState, fit_widths, window
from lazydbm.shared.ui.surface import HIGHLIGHT_STYLE, Rect, bordered

logger = logging.getLogger(__name__)

PAGE_SIZE = 200
ROW_PAGE_STEP = 10
COLUMN_JUMP = 5
COLUMN_WIDTH = 16
TAB_BAR_HEIGHT = 3
HEADER_ROWS = 1

PROPERTY_HEADERS = ("Column", "Type", "N", "Def", "PK")
PROPERTY_WIDTHS = (20, 14, 3, 20, 3)

AdapterFactory = Callable[[DatabaseType], DatabaseAdapter]


class Tab(Enum):
    RECORDS = "Records [1]"
    SQL = "SQL [2]"
    PROPERTIES = "Properties [3]"


class Edge(Enum):
    START = "start"
    END = "end"


@dataclass(frozen=True)
class TableRef:
    database: str
    table: str
    schema: str | None = None

    @property
    def title(self) -> str:
        return f"{self.database}.{self.table}"


@dataclass(frozen=True)
class SwitchTab:
    tab: Tab


@dataclass(frozen=True)
class BackToList:
    pass


@dataclass(frozen=True)
class ScrollRows:
    delta: int


@dataclass(frozen=True)
class JumpRows:
    edge: Edge


@dataclass(frozen=True)
class ScrollColumns:
    delta: int


@dataclass(frozen=True)
class JumpColumns:
    edge: Edge


@dataclass(frozen=True)
class ChangePage:
    delta: int


@dataclass(frozen=True)
class LaunchCli:
    pass


@dataclass(frozen=True)
class RecordsLoaded:
    request_id: int
    records: Records
    offset: int


@dataclass(frozen=True)
class RecordsLoadFailed:
    request_id: int
    error: str


@dataclass(frozen=True)
class CliChecked:
    request_id: int
    available: bool


@dataclass(frozen=True)
class PropertiesLoaded:
    request_id: int
    properties: list[ColumnProperty]


@dataclass(frozen=True)
class PropertiesLoadFailed:
    request_id: int
    error: str


DetailMessage = Union[
    SwitchTab,
    BackToList,
    ScrollRows,
    JumpRows,
    ScrollColumns,
    JumpColumns,
    ChangePage,
    LaunchCli,
    RecordsLoaded,
    RecordsLoadFailed,
    PropertiesLoaded,
    PropertiesLoadFailed,
    CliChecked,
]


class DetailView:
    """Right-hand pane of the dashboard."""

    def __init__(
        self,
        adapter_for: AdapterFactory = get_adapter,
        runner: InteractiveProcessRunner | None = None,
    ) -> None:
        self._adapter_for = adapter_for
        self._runner = runner or SubprocessRunner()
        self.connection: ConnectionConfig | None = None
        self.table: TableRef | None = None
        self.tab = Tab.RECORDS
        self.records: Records | None = None
        self.records_offset = 0
        self.records_error: str | None = None
        self.properties: list[ColumnProperty] | None = None
        self.properties_error: str | None = None
        self.records_scroll = ScrollState()
        self.properties_scroll = ScrollState()
        self.cli_tool: str | None = None
        # None until the background check reports.
        self.cli_available: bool | None = None
        self._cli_request: int | None = None
        self._records_request: int | None = None
        self._properties_request: int | None = None

    def open_table(
        self,
        connection: ConnectionConfig,
        database: str,
        table: str,
        schema: str | None = None,
    ) -> Update[DetailMessage]:
        """Show a new table: reset every pane and start loading its first page."""
        self.connection = connection
        self.table = TableRef(database, table, schema)
        self.tab = Tab.RECORDS
        self.records = None
        self.records_offset = 0
        self.records_error = None
        self.properties = None
        self.properties_error = None
        self.records_scroll.reset()
        self.properties_scroll.reset()
        self._properties_request = None

        adapter = self._adapter_for(connection.db_type)
        self.cli_tool = adapter.cli_tool_name
        self.cli_available = None
        records = self._load_records(0)
        return Update.with_cmd(batch([records.cmd, self._check_cli(adapter).cmd]))

    # -- loads ----------------------------------------------------------------

    def _load_records(self, offset: int) -> Update[DetailMessage]:
        connection, ref = self.connection, self.table
        if connection is None or ref is None:
            return Update.none()
        request_id = next_request_id()
        self._records_request = request_id
        adapter_for = self._adapter_for

        def task(sender: MessageSender) -> None:
            logger.info("loading records %s offset=%d", ref.title, offset)
            try:
                records = adapter_for(connection.db_type).fetch_records(
                    connection, ref.database, ref.table, PAGE_SIZE, offset, schema=ref.schema
                )
            except LazyDBMError as e:
                logger.error("records load failed for %s: %s", ref.title, e)
                sender.send(RecordsLoadFailed(request_id, str(e)))
                return
            except Exception as e:
                logger.exception("records load crashed for %s", ref.title)
                sender.send(RecordsLoadFailed(request_id, str(e) or type(e).__name__))
                return
            sender.send(RecordsLoaded(request_id, records, offset))

        return Update.with_cmd(SpawnBackground(task, name="load-records"))

    def _load_properties(self) -> Update[DetailMessage]:
        connection, ref = self.connection, self.table
        if connection is None or ref is None:
            return Update.none()
        request_id = next_request_id()
        self._properties_request = request_id
        adapter_for = self._adapter_for

        def task(sender: MessageSender) -> None:
            logger.info("loading properties %s", ref.title)
            try:
                properties = adapter_for(connection.db_type).fetch_properties(
                    connection, ref.database, ref.table, schema=ref.schema
                )
            except LazyDBMError as e:
                logger.error("properties load failed for %s: %s", ref.title, e)
                sender.send(PropertiesLoadFailed(request_id, str(e)))
                return
            except Exception as e:
                logger.exception("properties load crashed for %s", ref.title)
                sender.send(PropertiesLoadFailed(request_id, str(e) or type(e).__name__))
                return
            sender.send(PropertiesLoaded(request_id, properties))

        return Update.with_cmd(SpawnBackground(task, name="load-properties"))

    def _check_cli(self, adapter: DatabaseAdapter) -> Update[DetailMessage]:
        request_id = next_request_id()
        self._cli_request = request_id
        runner = self._runner

        def task(sender: MessageSender) -> None:
            try:
                available = adapter.is_cli_available(runner)
            except Exception:
                logger.exception("checking for %s failed", adapter.cli_tool_name)
                available = False
            logger.debug("%s available: %s", adapter.cli_tool_name, available)
            sender.send(CliChecked(request_id, available))

        return Update.with_cmd(SpawnBackground(task, name="check-cli"))

    # -- update ---------------------------------------------------------------

    def update(self, msg: DetailMessage) -> Update[DetailMessage]:
        if isinstance(msg, SwitchTab):
            self.tab = msg.tab
            if msg.tab is Tab.PROPERTIES and self.properties is None and self._properties_request is None:
                return self._load_properties()
        elif isinstance(msg, ScrollRows):
            pane = self._active_scroll()
            if pane is not None:
                pane.scroll_rows(msg.delta, total=self._row_count())
        elif isinstance(msg, JumpRows):
            pane = self._active_scroll()
            if pane is not None:
                pane.jump_rows(msg.edge is Edge.END)
        elif isinstance(msg, ScrollColumns):
            pane = self._active_scroll()
            if pane is not None:
                pane.scroll_columns(msg.delta, total=self._column_count())
        elif isinstance(msg, JumpColumns):
            pane = self._active_scroll()
            if pane is not None:
                pane.jump_columns(msg.edge is Edge.END)
        elif isinstance(msg, ChangePage):
            return self._change_page(msg.delta)
        elif isinstance(msg, LaunchCli):
            return self._launch_cli()
        elif isinstance(msg, RecordsLoaded):
            if msg.request_id != self._records_request:
                logger.debug("discarding stale records load %d", msg.request_id)
                return Update.none()
            if msg.offset > 0 and not msg.records.rows:
                logger.debug("page at offset %d is empty, keeping offset %d", msg.offset, self.records_offset)
                self._records_request = None
                return Update.none()
            self.records = msg.records
            self.records_offset = msg.offset
            self.records_error = None
            self.records_scroll.reset()
        elif isinstance(msg, RecordsLoadFailed):
            if msg.request_id == self._records_request:
                self.records_error = msg.error
        elif isinstance(msg, PropertiesLoaded):
            if msg.request_id != self._properties_request:
                logger.debug("discarding stale properties load %d", msg.request_id)
                return Update.none()
            self.properties = msg.properties
            self.properties_error = None
            self.properties_scroll.reset()
        elif isinstance(msg, PropertiesLoadFailed):
            if msg.request_id == self._properties_request:
                self.properties_error = msg.error
                # Allow a retry by switching back to the tab.
                self._properties_request = None
        elif isinstance(msg, CliChecked):
            if msg.request_id == self._cli_request:
                self.cli_available = msg.available
        # BackToList is consumed by the dashboard.
        return Update.none()

    def _active_scroll(self) -> ScrollState | None:
        if self.tab is Tab.RECORDS:
            return self.records_scroll
        if self.tab is Tab.PROPERTIES:
            return self.properties_scroll
        return None

    def _row_count(self) -> int:
        if self.tab is Tab.RECORDS:
            return len(self.records.rows) if self.records else 0
        return len(self.properties or ())

    def _column_count(self) -> int:
        if self.tab is Tab.RECORDS:
            return len(self.records.columns) if self.records else 0
        return len(PROPERTY_HEADERS)

    def _change_page(self, delta: int) -> Update[DetailMessage]:
        if self.table is None or delta == 0:
            return Update.none()
        offset = self.records_offset + delta * PAGE_SIZE
        if offset < 0:
            return Update.none()
        if delta > 0 and self.records is not None and len(self.records.rows) < PAGE_SIZE:
            # The current page is the last one.
            return Update.none()
        return self._load_records(offset)

    def _launch_cli(self) -> Update[DetailMessage]:
        connection = self.connection
        if connection is None:
            return Update.none()
        adapter = self._adapter_for(connection.db_type)
        runner = self._runner

        def task() -> int:
            return adapter.launch_cli(connection, runner)

        return Update.with_cmd(
            SuspendForExternalProcess(task, description=f"{adapter.cli_tool_name} ({connection.name})")
        )

    # -- input ----------------------------------------------------------------

    def handle_input(self, key: Key) -> Update[DetailMessage]:
        if key.is_("1"):
            return Update.with_msg(SwitchTab(Tab.RECORDS))
        if key.is_("2"):
            return Update.with_msg(SwitchTab(Tab.SQL))
        if key.is_("3"):
            return Update.with_msg(SwitchTab(Tab.PROPERTIES))
        if key.is_("tab", "escape"):
            return Update.with_msg(BackToList())
        if self.table is None:
            return Update.none()

        if key.is_("up", "k"):
            return Update.with_msg(ScrollRows(-1))
        if key.is_("down", "j"):
            return Update.with_msg(ScrollRows(1))
        if key.is_("pageup"):
            return Update.with_msg(ScrollRows(-ROW_PAGE_STEP))
        if key.is_("pagedown"):
            return Update.with_msg(ScrollRows(ROW_PAGE_STEP))
        if key.is_("home"):
            return Update.with_msg(JumpRows(Edge.START))
        if key.is_("end"):
            return Update.with_msg(JumpRows(Edge.END))
        if key.is_("left", "h"):
            return Update.with_msg(ScrollColumns(-1))
        if key.is_("right", "l"):
            return Update.with_msg(ScrollColumns(1))
        if key.is_("["):
            return Update.with_msg(ScrollColumns(-COLUMN_JUMP))
        if key.is_("]"):
            return Update.with_msg(ScrollColumns(COLUMN_JUMP))
        if key.is_("ctrl+a"):
            return Update.with_msg(JumpColumns(Edge.START))
        if key.is_("ctrl+e"):
            return Update.with_msg(JumpColumns(Edge.END))
        if self.tab is Tab.RECORDS and key.is_("n"):
            return Update.with_msg(ChangePage(1))
        if self.tab is Tab.RECORDS and key.is_("p"):
            return Update.with_msg(ChangePage(-1))
        if self.tab is Tab.SQL and key.is_("enter"):
            return Update.with_msg(LaunchCli())
        return Update.none()

    # -- rendering ------------------------------------------------------------

    def render(self, surface: Layout, area: Rect, focused: bool) -> None:
        if self.table is None:
            surface.update(
                bordered(
                    Text("No table selected\n\nSelect a table from the database structure on the left."),
                    title="Table View",
                    focused=False,
                )
            )
            return

        _, content_area = area.split_rows(TAB_BAR_HEIGHT)
        surface.split_column(
            Layout(name="tabs", size=TAB_BAR_HEIGHT),
            Layout(name="content"),
        )
        surface["tabs"].update(bordered(self._tab_bar(), title=self.table.title, focused=focused))
        if self.tab is Tab.RECORDS:
            content = self._records_panel(content_area, focused)
        elif self.tab is Tab.SQL:
            content = self._sql_panel(focused)
        else:
            content = self._properties_panel(content_area, focused)
        surface["content"].update(content)

    def _tab_bar(self) -> Text:
        text = Text(no_wrap=True)
        for index, tab in enumerate(Tab):
            if index:
                text.append(" │ ")
            text.append(tab.value, style=HIGHLIGHT_STYLE if tab is self.tab else None)
        return text

    def _records_panel(self, area: Rect, focused: bool) -> RenderableType:
        records = self.records
        if records is None:
            return bordered(
                Text("Loading records..."), title="Records", focused=focused, subtitle=self.records_error
            )

        visible_columns = max(1, area.inner_width // COLUMN_WIDTH)
        col_start, col_end = window(len(records.columns), visible_columns, self.records_scroll.column)
        viewport = max(0, area.inner_height - HEADER_ROWS)
        start, end = window(len(records.rows), viewport, self.records_scroll.row)

        table = _grid()
        for name in records.columns[col_start:col_end]:
            table.add_column(Text(name, style="bold"), width=COLUMN_WIDTH - 1, no_wrap=True, overflow="ellipsis")
        for row in records.rows[start:end]:
            table.add_row(*(Text(cell) for cell in row[col_start:col_end]))

        title = "Records"
        if records.rows and viewport > 0:
            page = self.records_offset // PAGE_SIZE + 1
            title = (
                f"Records  rows [{start + 1}-{end} / {len(records.rows)}], "
                f"cols [{col_start + 1}-{col_end} / {len(records.columns)}]  page {page}  "
                "(↑/↓, PgUp/PgDn, Home/End; ←/→, [/], Ctrl-A/E; n/p)"
            )
        return bordered(table, title=title, focused=focused, subtitle=self.records_error)

    def _sql_panel(self, focused: bool) -> RenderableType:
        tool = self.cli_tool or "?"
        if self.cli_available is None:
            body = f"External CLI tool: {tool} (checking...)"
        elif self.cli_available:
            body = (
                f"External CLI tool: {tool} (available)\n\n"
                "Press [Enter] to launch external SQL CLI\n\n"
                "This will open the appropriate CLI tool:\n"
                "• PostgreSQL: pgcli\n• MySQL: mycli\n• SQLite: litecli"
            )
        else:
            body = (
                f"External CLI tool: {tool} (NOT INSTALLED)\n\n"
                f"Please install {tool} to use SQL functionality:\n\npip install {tool}"
            )
        return bordered(Text(body), title="SQL", focused=focused)

    def _properties_panel(self, area: Rect, focused: bool) -> RenderableType:
        properties = self.properties
        if properties is None:
            return bordered(
                Text("Loading properties..."),
                title="Properties",
                focused=focused,
                subtitle=self.properties_error,
            )

        col_start, col_end = fit_widths(PROPERTY_WIDTHS, area.inner_width, self.properties_scroll.column)
        viewport = max(0, area.inner_height - HEADER_ROWS)
        start, end = window(len(properties), viewport, self.properties_scroll.row)

        table = _grid()
        for header, width in zip(PROPERTY_HEADERS[col_start:col_end], PROPERTY_WIDTHS[col_start:col_end]):
            table.add_column(Text(header, style="bold"), width=width, no_wrap=True, overflow="ellipsis")
        for prop in properties[start:end]:
            cells = property_cells(prop)[col_start:col_end]
            table.add_row(*(Text(cell) for cell in cells))

        title = "Properties"
        if properties and viewport > 0:
            title = (
                f"Properties  rows [{start + 1}-{end} / {len(properties)}], "
                f"cols [{col_start + 1}-{col_end} / {len(PROPERTY_HEADERS)}]  (↑/↓, PgUp/PgDn, Home/End; ←/→)"
            )
        return bordered(table, title=title, focused=focused, subtitle=self.properties_error)


def property_cells(prop: ColumnProperty) -> list[str]:
    return [
        prop.name,
        prop.declared_type,
        "YES" if prop.nullable else "NO",
        prop.default or "",
        "✔" if prop.primary_key else "",
    ]


def _grid() -> RichTable:
    return RichTable(box=None, show_edge=False, pad_edge=False, padding=(0, 1, 0, 0), expand=False)
