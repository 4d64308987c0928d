"""Dispatch runtime: owns the root view, the message queue and command execution.

The runtime is host-agnostic. A host (the Textual app) feeds it key events,
calls :meth:`Runtime.drain` on every tick, displays :meth:`Runtime.render`
and supplies the spawner that runs background work.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from queue import SimpleQueue
from typing import Any

from rich.layout import Layout

from lazydbm.shared.core.errors import ExternalProcessError
from lazydbm.shared.runtime.channel import MessageSender, drain_nowait
from lazydbm.shared.runtime.command import (
    Batch,
    Command,
    Nothing,
    SpawnBackground,
    SuspendForExternalProcess,
    Update,
)
from lazydbm.shared.ui.keys import QUIT_KEY, Key
from lazydbm.shared.ui.protocols import View
from lazydbm.shared.ui.surface import Frame, Rect

logger = logging.getLogger(__name__)

POLL_INTERVAL_S = 0.25

SuspendContext = Callable[[], AbstractContextManager[Any]]
# Runs ``work`` off the dispatch thread; ``name`` identifies it in logs.
Spawner = Callable[[Callable[[], None], str], None]


class Runtime:
    """Single-threaded message loop core around a root view.

    All view state is touched only from the thread that calls ``handle_key``,
    ``drain`` and ``render``. Workers reach it solely through the queue.
    """

    def __init__(
        self,
        root: View,
        *,
        spawn: Spawner,
        suspend: SuspendContext | None = None,
    ) -> None:
        self.root = root
        self._queue: SimpleQueue[Any] = SimpleQueue()
        self._sender = MessageSender(self._queue)
        self._spawner = spawn
        self._suspend: SuspendContext = suspend or nullcontext

    @property
    def sender(self) -> MessageSender:
        return self._sender

    def post(self, msg: Any) -> None:
        """Queue a root-level message for the next drain."""
        self._sender.send(msg)

    def handle_key(self, key: Key) -> bool:
        """Route a key press to the root view. Returns False on the quit chord."""
        if key.name == QUIT_KEY:
            logger.info("quit requested")
            return False
        self.dispatch(self.root.handle_input(key))
        return True

    def drain(self) -> int:
        """Apply every message queued so far. Returns how many were applied.

        Messages posted by workers while this drain runs wait for the next one.
        """
        messages = drain_nowait(self._queue)
        for msg in messages:
            self.apply(msg)
        return len(messages)

    def apply(self, msg: Any) -> None:
        self.dispatch(self.root.update(msg))

    def dispatch(self, update: Update[Any]) -> None:
        """Resolve a bubbled message fully, then run the command that came with it."""
        if update.msg is not None:
            self.apply(update.msg)
        self.run_command(update.cmd)

    def run_command(self, cmd: Command) -> None:
        if isinstance(cmd, Nothing):
            return
        if isinstance(cmd, Batch):
            for entry in cmd.commands:
                self.run_command(entry)
            return
        if isinstance(cmd, SpawnBackground):
            self._spawn(cmd)
            return
        if isinstance(cmd, SuspendForExternalProcess):
            self._run_suspended(cmd)
            return
        raise TypeError(f"unknown command: {cmd!r}")

    def _spawn(self, cmd: SpawnBackground) -> None:
        logger.debug("spawning %s", cmd.name)
        sender = self._sender.clone()
        task = cmd.task

        def work() -> None:
            try:
                task(sender)
            except Exception:
                logger.exception("worker %s raised", cmd.name)

        self._spawner(work, cmd.name)

    def _run_suspended(self, cmd: SuspendForExternalProcess) -> None:
        logger.info("suspending terminal: %s", cmd.description or "external process")
        try:
            with self._suspend():
                cmd.task()
        except ExternalProcessError as e:
            logger.error("external process failed: %s", e)
        except OSError:
            logger.exception("external process could not be started")
        except Exception:
            logger.exception("external process failed")
        logger.info("terminal restored")

    def render(self, area: Rect) -> Frame:
        surface = Layout(name="root")
        self.root.render(surface, area, True)
        return Frame(surface, area)
