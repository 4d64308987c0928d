"""Driver import helpers."""

from __future__ import annotations

import importlib
from collections.abc import Callable
from typing import Any

from lazydbm.domains.connections.providers.exceptions import MissingDriverError


def import_driver_module(
    module_name: str,
    *,
    driver_name: str,
    extra_name: str,
    package_name: str,
    loader: Callable[[str], Any] = importlib.import_module,
) -> Any:
    """Import a driver module, raising MissingDriverError with detail if it fails."""
    try:
        return loader(module_name)
    except ImportError as e:
        raise MissingDriverError(
            driver_name,
            extra_name,
            package_name,
            module_name=module_name,
            import_error=str(e),
        ) from e
