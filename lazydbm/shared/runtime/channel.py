"""The message-sending handle given to background workers."""

from __future__ import annotations

from collections.abc import Callable
from queue import Empty, SimpleQueue
from typing import Any


class MessageSender:
    """Cloneable, thread-safe handle that posts messages to the runtime queue.

    A sender may carry a wrap function so that a worker spawned deep in the
    view tree posts its child message and the runtime receives it already
    boxed in every ancestor's message type.
    """

    def __init__(self, queue: SimpleQueue[Any], wrap: Callable[[Any], Any] | None = None) -> None:
        self._queue = queue
        self._wrap = wrap

    def send(self, msg: Any) -> None:
        self._queue.put(self._wrap(msg) if self._wrap is not None else msg)

    def clone(self) -> MessageSender:
        return MessageSender(self._queue, self._wrap)

    def map(self, wrap: Callable[[Any], Any]) -> MessageSender:
        """Return a sender that applies ``wrap`` before this sender's own wrap."""
        outer = self._wrap
        if outer is None:
            return MessageSender(self._queue, wrap)
        return MessageSender(self._queue, lambda msg: outer(wrap(msg)))


def drain_nowait(queue: SimpleQueue[Any]) -> list[Any]:
    """Pop every message currently queued without blocking."""
    messages = []
    while True:
        try:
            messages.append(queue.get_nowait())
        except Empty:
            return messages
