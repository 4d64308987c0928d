"""Command algebra and the Update pair returned by every view transition.

A command describes an effect; only the dispatch runtime executes it.

- ``Nothing``: no effect.
- ``Batch``: run the contained commands in order.
- ``SpawnBackground``: run ``task(sender)`` on a worker thread. The task
  posts zero or one completion message through ``sender``.
- ``SuspendForExternalProcess``: run a blocking ``task()`` with the terminal
  handed back to the user (e.g. an interactive SQL CLI).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from lazydbm.shared.runtime.channel import MessageSender

M = TypeVar("M")
P = TypeVar("P")


@dataclass(frozen=True)
class Nothing:
    pass


@dataclass(frozen=True)
class Batch:
    commands: tuple[Command, ...] = ()


@dataclass(frozen=True)
class SpawnBackground:
    task: Callable[[MessageSender], None]
    name: str = "worker"


@dataclass(frozen=True)
class SuspendForExternalProcess:
    task: Callable[[], Any]
    description: str = ""


Command = Union[Nothing, Batch, SpawnBackground, SuspendForExternalProcess]

NOTHING = Nothing()


def batch(commands: Iterable[Command]) -> Command:
    """Build a batch, dropping no-ops. An empty batch collapses to ``NOTHING``."""
    kept = tuple(cmd for cmd in commands if not is_noop(cmd))
    if not kept:
        return NOTHING
    if len(kept) == 1:
        return kept[0]
    return Batch(kept)


def is_noop(cmd: Command) -> bool:
    if isinstance(cmd, Nothing):
        return True
    if isinstance(cmd, Batch):
        return all(is_noop(c) for c in cmd.commands)
    return False


def map_command(cmd: Command, wrap: Callable[[Any], Any]) -> Command:
    """Re-target a command so that messages posted by its workers are wrapped."""
    if isinstance(cmd, SpawnBackground):
        task = cmd.task
        return SpawnBackground(task=lambda sender: task(sender.map(wrap)), name=cmd.name)
    if isinstance(cmd, Batch):
        return Batch(tuple(map_command(c, wrap) for c in cmd.commands))
    # Nothing and SuspendForExternalProcess post no messages.
    return cmd


@dataclass(frozen=True)
class Update(Generic[M]):
    """Optional bubbled message plus a command."""

    msg: M | None = None
    cmd: Command = field(default=NOTHING)

    @classmethod
    def none(cls) -> Update[Any]:
        return cls()

    @classmethod
    def with_msg(cls, msg: M) -> Update[M]:
        return cls(msg=msg)

    @classmethod
    def with_cmd(cls, cmd: Command) -> Update[Any]:
        return cls(cmd=cmd)

    def map(self, wrap: Callable[[M], P]) -> Update[P]:
        """Convert the bubbled message (and worker completions) for the parent."""
        return Update(
            msg=wrap(self.msg) if self.msg is not None else None,
            cmd=map_command(self.cmd, wrap),
        )
