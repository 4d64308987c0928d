"""Base store class with common JSON file operations."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from lazydbm.shared.core.errors import ConfigError

APP_NAME = "lazydbm"

# Shared config directory - can be overridden via environment variable for testing
CONFIG_DIR = Path(os.environ.get("LAZYDBM_CONFIG_DIR", user_config_dir(APP_NAME)))


class JSONFileStore:
    """Base class for read-only JSON file-backed stores.

    A missing file is not an error; an unreadable or malformed one is.
    """

    def __init__(self, file_path: Path):
        self._file_path = file_path

    @property
    def file_path(self) -> Path:
        """Get the store's file path."""
        return self._file_path

    def _read_json(self) -> Any:
        """Read and parse JSON from file.

        Returns:
            Parsed JSON data, or None if the file doesn't exist.

        Raises:
            ConfigError: If the file cannot be read or is not valid JSON.
        """
        if not self._file_path.exists():
            return None
        try:
            with open(self._file_path, encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            raise ConfigError(f"failed to read {self._file_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(self._format_parse_error(e)) from e

    def _format_parse_error(self, error: json.JSONDecodeError) -> str:
        return f"failed to parse JSON at {self._file_path}\n\nError: {error}"

    def exists(self) -> bool:
        """Check if the store file exists."""
        return self._file_path.exists()
