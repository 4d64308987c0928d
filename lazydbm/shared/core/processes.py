"""Process runner protocols and default implementations."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@runtime_checkable
class InteractiveProcessRunner(Protocol):
    """Protocol for running a foreground process that owns the terminal."""

    def which(self, program: str) -> str | None:
        ...

    def run(self, command: list[str]) -> int:
        ...


@dataclass
class SubprocessRunner(InteractiveProcessRunner):
    """Default runner: inherits stdio and blocks until the process exits."""

    def which(self, program: str) -> str | None:
        return shutil.which(program)

    def run(self, command: list[str]) -> int:
        return subprocess.run(command, check=False).returncode


@dataclass
class FixedResultRunner(InteractiveProcessRunner):
    """Runner that records commands and returns a fixed exit code."""

    returncode: int = 0
    available: bool = True
    commands: list[list[str]] = field(default_factory=list)

    def which(self, program: str) -> str | None:
        return f"/usr/bin/{program}" if self.available else None

    def run(self, command: list[str]) -> int:
        self.commands.append(list(command))
        return self.returncode
