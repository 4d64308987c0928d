"""Unit tests for connection configs and the JSON connection store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from lazydbm.domains.connections.domain.config import ConnectionConfig, DatabaseType, parse_db_type
from lazydbm.domains.connections.store import connections as store_module
from lazydbm.domains.connections.store.connections import (
    CONFIG_ENV_VAR,
    CONFIG_SAMPLE,
    LOCAL_CONFIG_FILENAME,
    ConnectionStore,
    config_sources,
    load_connections,
)
from lazydbm.shared.core.errors import ConfigError


@pytest.fixture
def isolated_sources(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every config source at an empty temporary layout."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.setattr(store_module, "CONFIG_DIR", config_dir)
    monkeypatch.chdir(workdir)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    return tmp_path


def write_json(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestConnectionConfig:
    def test_from_dict_with_aliases(self) -> None:
        config = ConnectionConfig.from_dict(
            {
                "type": "postgresql",
                "name": "pg",
                "username": "postgres",
                "server": "db.internal",
                "port": "5433",
                "extra": "ignored",
            }
        )
        assert config.db_type is DatabaseType.POSTGRES
        assert config.user == "postgres"
        assert config.host == "db.internal"
        assert config.port == 5433
        assert config.password is None

    def test_sqlite_file_path_alias_and_fallback_name(self) -> None:
        config = ConnectionConfig.from_dict({"type": "sqlite3", "file_path": "/tmp/app.db"})
        assert config.db_type is DatabaseType.SQLITE
        assert config.path == "/tmp/app.db"
        assert config.name == "app"

    def test_missing_type(self) -> None:
        with pytest.raises(ConfigError, match="missing the type field"):
            ConnectionConfig.from_dict({"name": "x"})

    def test_unknown_type(self) -> None:
        with pytest.raises(ConfigError, match="unknown database type"):
            parse_db_type("oracle")

    def test_invalid_port(self) -> None:
        with pytest.raises(ConfigError, match="invalid port"):
            ConnectionConfig.from_dict({"type": "mysql", "name": "m", "port": "abc"})

    def test_require_reports_missing_field(self) -> None:
        config = ConnectionConfig(name="m", db_type=DatabaseType.MYSQL)
        with pytest.raises(ConfigError, match="type mysql needs the host field"):
            config.require("host")


class TestConnectionStore:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert ConnectionStore(tmp_path / "absent.json").load_all() == []

    def test_wrapped_list(self, tmp_path: Path) -> None:
        path = write_json(
            tmp_path / "c.json",
            {"connections": [{"type": "sqlite", "name": "a", "path": "a.db"}, {"type": "mysql", "name": "b"}]},
        )
        names = [c.name for c in ConnectionStore(path).load_all()]
        assert names == ["a", "b"]

    def test_bare_list(self, tmp_path: Path) -> None:
        path = write_json(tmp_path / "c.json", [{"type": "postgres", "name": "pg"}])
        assert ConnectionStore(path).load_all()[0].db_type is DatabaseType.POSTGRES

    def test_parse_error_includes_sample(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            ConnectionStore(path).load_all()
        message = str(exc_info.value)
        assert "failed to parse JSON" in message
        assert CONFIG_SAMPLE in message

    def test_wrong_shape(self, tmp_path: Path) -> None:
        path = write_json(tmp_path / "c.json", {"connections": "nope"})
        with pytest.raises(ConfigError, match="expected a list of connections"):
            ConnectionStore(path).load_all()

    def test_non_object_entry(self, tmp_path: Path) -> None:
        path = write_json(tmp_path / "c.json", ["pg"])
        with pytest.raises(ConfigError, match="must be objects"):
            ConnectionStore(path).load_all()


class TestLoadConnections:
    def test_no_sources_yields_empty_list(self, isolated_sources: Path) -> None:
        assert load_connections() == []

    def test_sources_are_layered_in_order(self, isolated_sources: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        write_json(isolated_sources / "config" / "connections.json", [{"type": "sqlite", "name": "global"}])
        write_json(isolated_sources / "work" / LOCAL_CONFIG_FILENAME, [{"type": "sqlite", "name": "local"}])
        env_file = write_json(isolated_sources / "env.json", [{"type": "sqlite", "name": "env"}])
        extra = write_json(isolated_sources / "extra.json", [{"type": "sqlite", "name": "extra"}])
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_file))

        assert [c.name for c in load_connections(extra)] == ["global", "local", "env", "extra"]

    def test_same_file_is_read_once(self, isolated_sources: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        extra = write_json(isolated_sources / "extra.json", [{"type": "sqlite", "name": "only"}])
        monkeypatch.setenv(CONFIG_ENV_VAR, str(extra))
        assert [c.name for c in load_connections(extra)] == ["only"]

    def test_missing_explicit_file(self, isolated_sources: Path) -> None:
        with pytest.raises(ConfigError, match="config file not found"):
            load_connections(isolated_sources / "nope.json")

    def test_config_sources_without_overrides(self, isolated_sources: Path) -> None:
        sources = config_sources()
        assert sources == [
            isolated_sources / "config" / "connections.json",
            Path.cwd() / LOCAL_CONFIG_FILENAME,
        ]
