"""Unit tests for MongoSettings and the settings loaders."""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, field
from typing import ClassVar

import pytest

from mongo_repository.config import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)
from mongo_repository.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    MongoSettings,
    Settings,
)
from mongo_repository.kernel.errors import ApplicationError


@dataclass
class PoolSettings(Settings):
    _prefix: ClassVar[str] = "POOL"
    max_size: int = 100
    ratio: float = 0.5
    retry_writes: bool = True
    hosts: list[str] = field(default_factory=list)
    label: str | None = None


# ---------------------------------------------------------------------------
# MongoSettings
# ---------------------------------------------------------------------------


class TestMongoSettings:
    def test_defaults(self) -> None:
        settings = MongoSettings(connection_string="mongodb://localhost", database_name="shop")
        assert settings.server_selection_timeout_ms == 30_000
        assert settings.uuid_representation == "standard"
        assert settings.app_name is None

    def test_client_options(self) -> None:
        settings = MongoSettings(
            connection_string="mongodb+srv://cluster.example.net",
            database_name="shop",
            app_name="orders-svc",
            server_selection_timeout_ms=2000,
        )
        assert settings.client_options() == {
            "serverSelectionTimeoutMS": 2000,
            "uuidRepresentation": "standard",
            "appname": "orders-svc",
        }

    @pytest.mark.parametrize(
        ("overrides", "setting"),
        [
            ({"connection_string": "postgres://db"}, "connection_string"),
            ({"database_name": ""}, "database_name"),
            ({"server_selection_timeout_ms": 0}, "server_selection_timeout_ms"),
            ({"uuid_representation": "binary"}, "uuid_representation"),
        ],
    )
    def test_invalid_values(self, overrides: dict[str, object], setting: str) -> None:
        values: dict[str, object] = {"connection_string": "mongodb://localhost", "database_name": "shop"}
        values.update(overrides)
        with pytest.raises(InvalidSettingValueError) as info:
            MongoSettings(**values)  # type: ignore[arg-type]
        assert info.value.setting_name == setting


# ---------------------------------------------------------------------------
# EnvSettingsLoader
# ---------------------------------------------------------------------------


class TestEnvSettingsLoader:
    def test_loads_mongo_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MONGO_CONNECTION_STRING", "mongodb://db:27017")
        monkeypatch.setenv("MONGO_DATABASE_NAME", "shop")
        monkeypatch.setenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "1500")
        settings = EnvSettingsLoader().load(MongoSettings)
        assert settings.connection_string == "mongodb://db:27017"
        assert settings.server_selection_timeout_ms == 1500

    def test_explicit_environ(self) -> None:
        environ = {"MONGO_CONNECTION_STRING": "mongodb://x", "MONGO_DATABASE_NAME": "d", "MONGO_APP_NAME": "a"}
        settings = EnvSettingsLoader(environ).load(MongoSettings)
        assert settings.app_name == "a"

    def test_missing_required_raises(self) -> None:
        with pytest.raises(MissingRequiredSettingError) as info:
            EnvSettingsLoader({"MONGO_DATABASE_NAME": "d"}).load(MongoSettings)
        assert info.value.setting_name == "MONGO_CONNECTION_STRING"

    def test_coerces_scalars_and_lists(self) -> None:
        environ = {
            "POOL_MAX_SIZE": "10",
            "POOL_RATIO": "0.25",
            "POOL_RETRY_WRITES": "no",
            "POOL_HOSTS": "a:27017, b:27017,",
            "POOL_LABEL": "primary",
        }
        settings = EnvSettingsLoader(environ).load(PoolSettings)
        assert settings.max_size == 10
        assert settings.ratio == 0.25
        assert settings.retry_writes is False
        assert settings.hosts == ["a:27017", "b:27017"]
        assert settings.label == "primary"

    def test_defaults_preserved_when_absent(self) -> None:
        settings = EnvSettingsLoader({}).load(PoolSettings)
        assert settings.max_size == 100
        assert settings.hosts == []

    @pytest.mark.parametrize(("key", "value"), [("POOL_MAX_SIZE", "many"), ("POOL_RETRY_WRITES", "maybe")])
    def test_bad_value_raises(self, key: str, value: str) -> None:
        with pytest.raises(InvalidSettingValueError) as info:
            EnvSettingsLoader({key: value}).load(PoolSettings)
        assert info.value.setting_name == key

    def test_validation_error_propagates(self) -> None:
        environ = {"MONGO_CONNECTION_STRING": "mongodb://x", "MONGO_DATABASE_NAME": "d",
                   "MONGO_SERVER_SELECTION_TIMEOUT_MS": "-1"}
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader(environ).load(MongoSettings)


# ---------------------------------------------------------------------------
# DotenvSettingsLoader
# ---------------------------------------------------------------------------


class TestDotenvSettingsLoader:
    def _write(self, tmp_path: pathlib.Path, content: str) -> str:
        env_file = tmp_path / ".env"
        env_file.write_text(content)
        return str(env_file)

    def test_reads_file(self, tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MONGO_CONNECTION_STRING", raising=False)
        monkeypatch.delenv("MONGO_DATABASE_NAME", raising=False)
        env_file = self._write(tmp_path, "MONGO_CONNECTION_STRING=mongodb://file\nMONGO_DATABASE_NAME=filedb\n")
        settings = DotenvSettingsLoader(env_file).load(MongoSettings)
        assert settings.database_name == "filedb"

    def test_environment_wins(self, tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MONGO_DATABASE_NAME", "envdb")
        env_file = self._write(tmp_path, "MONGO_CONNECTION_STRING=mongodb://file\nMONGO_DATABASE_NAME=filedb\n")
        assert DotenvSettingsLoader(env_file).load(MongoSettings).database_name == "envdb"

    def test_override_lets_file_win(self, tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MONGO_DATABASE_NAME", "envdb")
        env_file = self._write(tmp_path, "MONGO_CONNECTION_STRING=mongodb://file\nMONGO_DATABASE_NAME=filedb\n")
        settings = DotenvSettingsLoader(env_file, override=True).load(MongoSettings)
        assert settings.database_name == "filedb"

    def test_missing_file_falls_back_to_environment(
        self, tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MONGO_CONNECTION_STRING", "mongodb://env")
        monkeypatch.setenv("MONGO_DATABASE_NAME", "envdb")
        settings = DotenvSettingsLoader(str(tmp_path / "absent.env")).load(MongoSettings)
        assert settings.connection_string == "mongodb://env"


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class TestConfigErrors:
    def test_config_error_is_application_error(self) -> None:
        assert isinstance(ConfigError("bad"), ApplicationError)
        assert ConfigError("bad").code == "config_error"

    def test_missing_required_setting(self) -> None:
        err = MissingRequiredSettingError("MONGO_DATABASE_NAME")
        assert err.code == "missing_required_setting"
        assert "MONGO_DATABASE_NAME" in err.message

    def test_invalid_setting_value(self) -> None:
        err = InvalidSettingValueError("MONGO_X", "v", "nope")
        assert (err.setting_name, err.value, err.reason) == ("MONGO_X", "v", "nope")
        assert err.detail == {"setting": "MONGO_X", "value": "v", "reason": "nope"}
        assert err.code == "invalid_setting_value"

    def test_invalid_connection_string_is_masked(self) -> None:
        err = InvalidSettingValueError("connection_string", "mongodb://app:s3cret@db", "bad host")
        assert "s3cret" not in err.message
        assert "s3cret" not in str(err)
        assert err.value == "mongodb://app:s3cret@db"

    def test_missing_required_detail(self) -> None:
        assert MissingRequiredSettingError("database_name").detail == {"setting": "database_name"}


class TestEnvVarNames:
    def test_prefixed(self) -> None:
        assert MongoSettings.env_var("connection_string") == "MONGO_CONNECTION_STRING"

    def test_without_prefix(self) -> None:
        assert Settings.env_var("debug") == "DEBUG"
