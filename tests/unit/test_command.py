"""Unit tests for the command algebra and Update."""

from __future__ import annotations

from queue import SimpleQueue

from lazydbm.shared.runtime.channel import MessageSender, drain_nowait
from lazydbm.shared.runtime.command import (
    NOTHING,
    Batch,
    Nothing,
    SpawnBackground,
    SuspendForExternalProcess,
    Update,
    batch,
    is_noop,
    map_command,
)


def _spawn(msg: object) -> SpawnBackground:
    return SpawnBackground(lambda sender: sender.send(msg))


class TestBatch:
    def test_empty_batch_is_nothing(self) -> None:
        assert batch([]) is NOTHING

    def test_batch_of_noops_is_nothing(self) -> None:
        assert batch([Nothing(), Batch(()), Batch((Nothing(),))]) is NOTHING

    def test_single_command_is_unwrapped(self) -> None:
        spawn = _spawn("x")
        assert batch([NOTHING, spawn]) is spawn

    def test_noops_are_dropped(self) -> None:
        first, second = _spawn(1), _spawn(2)
        assert batch([first, NOTHING, second]) == Batch((first, second))

    def test_is_noop(self) -> None:
        assert is_noop(Batch(()))
        assert not is_noop(_spawn(1))
        assert not is_noop(SuspendForExternalProcess(lambda: None))


class TestMapping:
    def test_spawned_worker_messages_are_wrapped(self) -> None:
        queue: SimpleQueue[object] = SimpleQueue()
        cmd = map_command(_spawn("done"), lambda m: ("outer", m))
        assert isinstance(cmd, SpawnBackground)
        cmd.task(MessageSender(queue))
        assert drain_nowait(queue) == [("outer", "done")]

    def test_nested_maps_compose_inside_out(self) -> None:
        queue: SimpleQueue[object] = SimpleQueue()
        update = Update.with_cmd(_spawn("leaf")).map(lambda m: ("mid", m)).map(lambda m: ("root", m))
        assert isinstance(update.cmd, SpawnBackground)
        update.cmd.task(MessageSender(queue))
        assert drain_nowait(queue) == [("root", ("mid", "leaf"))]

    def test_batch_entries_are_mapped(self) -> None:
        queue: SimpleQueue[object] = SimpleQueue()
        cmd = map_command(Batch((_spawn(1), _spawn(2))), lambda m: m * 10)
        assert isinstance(cmd, Batch)
        for entry in cmd.commands:
            assert isinstance(entry, SpawnBackground)
            entry.task(MessageSender(queue))
        assert drain_nowait(queue) == [10, 20]

    def test_update_map_wraps_message(self) -> None:
        update = Update.with_msg("child").map(lambda m: ("parent", m))
        assert update.msg == ("parent", "child")
        assert update.cmd is NOTHING

    def test_update_map_keeps_empty_message(self) -> None:
        update = Update.none().map(lambda m: ("parent", m))
        assert update.msg is None


class TestMessageSender:
    def test_clone_shares_queue_and_wrap(self) -> None:
        queue: SimpleQueue[object] = SimpleQueue()
        sender = MessageSender(queue).map(lambda m: [m])
        sender.clone().send("a")
        assert drain_nowait(queue) == [["a"]]
