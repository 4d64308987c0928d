"""Main Textual application for lazydbm.

Textual owns the terminal: raw mode, key events, the frame timer and
suspending for external processes. All application state lives in the view
tree driven by :class:`~lazydbm.shared.runtime.dispatch.Runtime`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager

from textual import events
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import Static

from lazydbm.domains.connections.domain.config import ConnectionConfig
from lazydbm.domains.connections.providers.registry import get_adapter
from lazydbm.domains.explorer.ui.list_view import AdapterFactory
from lazydbm.domains.shell.ui.root import Root
from lazydbm.shared.core.errors import ExternalProcessError
from lazydbm.shared.core.processes import InteractiveProcessRunner
from lazydbm.shared.runtime.dispatch import POLL_INTERVAL_S, Runtime, Spawner
from lazydbm.shared.ui.keys import Key
from lazydbm.shared.ui.surface import Rect

logger = logging.getLogger(__name__)


class FrameScreen(Screen):
    """The only screen: one widget showing the rendered view tree.

    Screen focus bindings (Tab/Shift+Tab) are not inherited so those keys
    reach the views.
    """

    inherit_bindings = False

    DEFAULT_CSS = """
    FrameScreen {
        overflow: hidden;
    }

    #frame {
        width: 100%;
        height: 100%;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static(id="frame")


class LazyDBMApp(App):
    """Terminal host for the view tree."""

    TITLE = "lazydbm"
    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        connections: Sequence[ConnectionConfig],
        *,
        adapter_for: AdapterFactory = get_adapter,
        runner: InteractiveProcessRunner | None = None,
        spawn: Spawner | None = None,
    ) -> None:
        super().__init__()
        self.root_view = Root(connections, adapter_for, runner)
        self.runtime = Runtime(self.root_view, spawn=spawn or self._spawn_worker, suspend=self._suspended)

    def get_default_screen(self) -> Screen:
        return FrameScreen()

    def on_mount(self) -> None:
        self.set_interval(POLL_INTERVAL_S, self._refresh_frame)
        self.call_after_refresh(self._refresh_frame)

    def on_resize(self, event: events.Resize) -> None:
        self._refresh_frame()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        key = Key(name=event.key, char=event.character if event.is_printable else None)
        if not self.runtime.handle_key(key):
            self.exit()
            return
        self._refresh_frame()

    def _refresh_frame(self) -> None:
        self.runtime.drain()
        width, height = self.size
        frame = self.runtime.render(Rect(0, 0, width, height))
        try:
            widget = self.screen.query_one("#frame", Static)
        except NoMatches:
            # The frame screen has not been composed yet.
            return
        widget.update(frame)

    @contextmanager
    def _suspended(self) -> Iterator[None]:
        """Hand the terminal back to the user for the duration of the block."""
        try:
            with self.suspend():
                yield
        except SuspendNotSupported as e:
            raise ExternalProcessError(f"cannot suspend the terminal: {e}") from e

    def _spawn_worker(self, work: Callable[[], None], name: str) -> None:
        """Run background work as a Textual thread worker."""
        self.run_worker(work, name=name, group="lazydbm", thread=True, exit_on_error=False)
