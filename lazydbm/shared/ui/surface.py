"""Drawing surface, geometry and shared styles for views.

Views draw into a ``rich.layout.Layout`` node (the surface) and receive the
``Rect`` that node will occupy so they can size their scroll windows.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console, ConsoleOptions, RenderableType, RenderResult
from rich.layout import Layout
from rich.markup import escape as escape_markup
from rich.panel import Panel

FOCUSED_BORDER = "yellow"
UNFOCUSED_BORDER = "white"
TITLE_STYLE = "bold yellow"
HIGHLIGHT_STYLE = "bold cyan"
HIGHLIGHT_SYMBOL = "▶ "
ERROR_STYLE = "red"

# Rows/columns taken by a panel's border.
BORDER_ROWS = 2
BORDER_COLS = 2


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def inner_width(self) -> int:
        return max(0, self.width - BORDER_COLS)

    @property
    def inner_height(self) -> int:
        return max(0, self.height - BORDER_ROWS)

    def split_columns(self, left_percent: int) -> tuple[Rect, Rect]:
        left_width = self.width * left_percent // 100
        left = Rect(self.x, self.y, left_width, self.height)
        right = Rect(self.x + left_width, self.y, self.width - left_width, self.height)
        return left, right

    def split_rows(self, top_height: int) -> tuple[Rect, Rect]:
        top_height = min(max(0, top_height), self.height)
        top = Rect(self.x, self.y, self.width, top_height)
        bottom = Rect(self.x, self.y + top_height, self.width, self.height - top_height)
        return top, bottom

    def centered(self, width_percent: int, height_percent: int) -> Rect:
        width = self.width * width_percent // 100
        height = self.height * height_percent // 100
        return Rect(
            self.x + (self.width - width) // 2,
            self.y + (self.height - height) // 2,
            width,
            height,
        )


def bordered(
    renderable: RenderableType,
    *,
    title: str,
    focused: bool,
    subtitle: str | None = None,
) -> Panel:
    """Wrap content in a titled panel whose border shows focus."""
    return Panel(
        renderable,
        title=escape_markup(title),
        title_align="left",
        subtitle=f"[{ERROR_STYLE}]{escape_markup(subtitle)}[/]" if subtitle else None,
        subtitle_align="left",
        border_style=FOCUSED_BORDER if focused else UNFOCUSED_BORDER,
    )


class Frame:
    """A rendered view tree, pinned to the size it was laid out for."""

    def __init__(self, layout: Layout, area: Rect) -> None:
        self.layout = layout
        self.area = area

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        yield from self.layout.__rich_console__(
            console, options.update(width=self.area.width, height=self.area.height)
        )
