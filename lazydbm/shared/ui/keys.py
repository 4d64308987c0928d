"""Keyboard events as seen by views."""

from __future__ import annotations

from dataclasses import dataclass

QUIT_KEY = "ctrl+c"


@dataclass(frozen=True)
class Key:
    """A key press.

    ``name`` follows Textual's key naming ("up", "enter", "ctrl+a", "j").
    ``char`` is the printable character, when there is one.
    """

    name: str
    char: str | None = None

    @classmethod
    def of(cls, name: str) -> Key:
        """Build a key from its name; single characters are printable."""
        if len(name) == 1:
            return cls(name=name, char=name)
        if name == "space":
            return cls(name=name, char=" ")
        return cls(name=name)

    def is_(self, *names: str) -> bool:
        """True if the key name, or its character, is one of ``names``."""
        return self.name in names or (self.char is not None and self.char in names)

    @property
    def printable(self) -> bool:
        return self.char is not None and self.char.isprintable()
