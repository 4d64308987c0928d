"""Protocol shared by every view in the composition tree."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rich.layout import Layout

    from lazydbm.shared.runtime.command import Update
    from lazydbm.shared.ui.keys import Key
    from lazydbm.shared.ui.surface import Rect


@runtime_checkable
class View(Protocol):
    """A state machine that turns messages and keys into updates and draws itself."""

    def update(self, msg: Any) -> Update[Any]: ...

    def handle_input(self, key: Key) -> Update[Any]: ...

    def render(self, surface: Layout, area: Rect, focused: bool) -> None: ...
