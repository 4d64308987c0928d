"""Scroll-window math shared by list and table panes.

Offsets are stored unclamped and only clamped when a window is computed, so
scrolling past either end any number of times is harmless.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# Large offset meaning "as far as possible"; clamped by ``window``.
SCROLL_END = 1 << 30


def window(total: int, viewport: int, offset: int) -> tuple[int, int]:
    """Return the ``[start, end)`` slice of ``total`` items shown in ``viewport`` rows."""
    viewport = max(0, viewport)
    offset = max(0, offset)
    start = min(offset, max(0, total - viewport))
    end = min(start + viewport, total)
    return start, end


def follow_window(total: int, viewport: int, selected: int) -> tuple[int, int]:
    """Window for a cursor list: the selection stays on screen, pinned to the bottom row."""
    if viewport <= 0:
        return 0, 0
    offset = selected - viewport + 1 if selected >= viewport else 0
    return window(total, viewport, offset)


def scroll_by(offset: int, delta: int) -> int:
    if delta < 0:
        return max(0, offset + delta)
    return offset + delta


def _step(offset: int, delta: int, total: int | None) -> int:
    # With a known item count, an offset parked past the end (e.g. SCROLL_END)
    # is pulled back to the last item first so a reverse step moves at once.
    if total is not None:
        offset = min(offset, max(0, total - 1))
    return scroll_by(offset, delta)


def fit_widths(widths: Sequence[int], available: int, start: int) -> tuple[int, int]:
    """Pick which fixed-width columns fit, starting at ``start``.

    The start is clamped so the last column can still be reached, and at
    least one column is always shown.
    """
    count = len(widths)
    if count == 0:
        return 0, 0
    # Furthest start that still fills the width with the trailing columns.
    last_start = count - 1
    used = widths[-1]
    while last_start > 0 and used + widths[last_start - 1] + 1 <= available:
        last_start -= 1
        used += widths[last_start] + 1
    start = min(max(0, start), last_start)

    end = start + 1
    used = widths[start]
    while end < count and used + widths[end] + 1 <= available:
        used += widths[end] + 1
        end += 1
    return start, end


@dataclass
class ScrollState:
    """Row and column offsets for a two-axis pane."""

    row: int = 0
    column: int = 0

    def scroll_rows(self, delta: int, total: int | None = None) -> None:
        self.row = _step(self.row, delta, total)

    def scroll_columns(self, delta: int, total: int | None = None) -> None:
        self.column = _step(self.column, delta, total)

    def jump_rows(self, to_end: bool) -> None:
        self.row = SCROLL_END if to_end else 0

    def jump_columns(self, to_end: bool) -> None:
        self.column = SCROLL_END if to_end else 0

    def reset(self) -> None:
        self.row = 0
        self.column = 0
