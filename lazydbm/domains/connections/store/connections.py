"""Connection store: reads saved database connections from JSON files."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from lazydbm.domains.connections.domain.config import ConnectionConfig
from lazydbm.shared.core.errors import ConfigError
from lazydbm.shared.core.store import CONFIG_DIR, JSONFileStore

logger = logging.getLogger(__name__)

CONNECTIONS_FILENAME = "connections.json"
LOCAL_CONFIG_FILENAME = ".lazydbm.json"
CONFIG_ENV_VAR = "LAZYDBM_CONFIG"

CONFIG_SAMPLE = """\
{
  "connections": [
    {"type": "postgres", "name": "pg", "user": "postgres", "password": "secret",
     "host": "127.0.0.1", "port": 5432, "database": "mydb"},
    {"type": "mysql", "name": "my", "user": "root", "password": "secret",
     "host": "127.0.0.1", "port": 3306},
    {"type": "sqlite", "name": "local", "path": "~/data/app.db"}
  ]
}"""


class ConnectionStore(JSONFileStore):
    """A single JSON file of connections.

    The file holds either ``{"connections": [...]}`` or a bare list.
    """

    def __init__(self, file_path: Path | None = None) -> None:
        super().__init__(file_path or CONFIG_DIR / CONNECTIONS_FILENAME)

    def load_all(self) -> list[ConnectionConfig]:
        """Load all connections in file order.

        Returns:
            List of ConnectionConfig objects, or empty list if the file doesn't exist.

        Raises:
            ConfigError: If the file is unreadable or has the wrong shape.
        """
        data = self._read_json()
        if data is None:
            return []
        if isinstance(data, dict):
            data = data.get("connections", [])
        if not isinstance(data, list):
            raise ConfigError(self._shape_error("expected a list of connections"))

        configs = []
        for entry in data:
            if not isinstance(entry, dict):
                raise ConfigError(self._shape_error(f"connection entries must be objects, got {entry!r}"))
            configs.append(ConnectionConfig.from_dict(entry))
        logger.debug("loaded %d connection(s) from %s", len(configs), self.file_path)
        return configs

    def _format_parse_error(self, error: json.JSONDecodeError) -> str:
        return f"{super()._format_parse_error(error)}\n\nExample config:\n{CONFIG_SAMPLE}"

    def _shape_error(self, detail: str) -> str:
        return f"invalid config at {self.file_path}: {detail}\n\nExample config:\n{CONFIG_SAMPLE}"


def config_sources(extra_path: Path | None = None) -> list[Path]:
    """Config files in the order their connections are listed."""
    sources = [CONFIG_DIR / CONNECTIONS_FILENAME, Path.cwd() / LOCAL_CONFIG_FILENAME]
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        sources.append(Path(env_path).expanduser())
    if extra_path is not None:
        sources.append(extra_path.expanduser())
    return sources


def load_connections(extra_path: Path | None = None) -> list[ConnectionConfig]:
    """Collect connections from every config source that exists.

    An explicitly requested file (``extra_path``) must exist.
    """
    if extra_path is not None and not extra_path.expanduser().exists():
        raise ConfigError(f"config file not found: {extra_path}")

    connections: list[ConnectionConfig] = []
    seen: set[Path] = set()
    for path in config_sources(extra_path):
        resolved = path.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        connections.extend(ConnectionStore(path).load_all())
    logger.info("%d connection(s) configured", len(connections))
    return connections
