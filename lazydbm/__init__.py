"""lazydbm - A terminal UI for browsing SQL databases."""

import logging
from typing import TYPE_CHECKING, Any

__all__ = [
    "__version__",
    "main",
    "LazyDBMApp",
    "ConnectionConfig",
    "DatabaseType",
]

__version__ = "0.1.0"

# Library modules log under the "lazydbm" logger; the CLI installs the file handler.
logging.getLogger(__name__).addHandler(logging.NullHandler())

if TYPE_CHECKING:
    from .cli import main
    from lazydbm.domains.connections.domain.config import ConnectionConfig, DatabaseType
    from lazydbm.domains.shell.app.main import LazyDBMApp


def __getattr__(name: str) -> Any:
    """Lazy import for heavy modules to keep package import side-effect free."""
    if name == "main":
        from .cli import main

        return main
    if name == "LazyDBMApp":
        from lazydbm.domains.shell.app.main import LazyDBMApp

        return LazyDBMApp
    if name == "ConnectionConfig":
        from lazydbm.domains.connections.domain.config import ConnectionConfig

        return ConnectionConfig
    if name == "DatabaseType":
        from lazydbm.domains.connections.domain.config import DatabaseType

        return DatabaseType
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
