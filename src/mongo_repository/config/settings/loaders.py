"""Config settings – EnvSettingsLoader, DotenvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
from typing import Any, Mapping, TypeVar

from dotenv import dotenv_values

from mongo_repository.config.settings.base import Settings
from mongo_repository.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


def _is_required(field: dataclasses.Field[Any]) -> bool:
    return (
        field.default is dataclasses.MISSING
        and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
    )


def _type_name(type_hint: Any) -> str:
    # annotations are strings under ``from __future__ import annotations``
    name = type_hint if isinstance(type_hint, str) else getattr(type_hint, "__name__", str(type_hint))
    return name.replace(" ", "").removesuffix("|None").removeprefix("None|")


def coerce(key: str, value: str, type_hint: Any) -> Any:
    """Convert a raw string into the field's declared scalar/list type."""
    name = _type_name(type_hint)
    try:
        if name == "bool":
            lowered = value.strip().lower()
            if lowered not in _TRUTHY | _FALSY:
                raise ValueError("expected a boolean")
            return lowered in _TRUTHY
        if name == "int":
            return int(value)
        if name == "float":
            return float(value)
    except ValueError as exc:
        raise InvalidSettingValueError(key, value, str(exc)) from exc
    if name.startswith("list"):
        return [v.strip() for v in value.split(",") if v.strip()]
    return value


class EnvSettingsLoader(SettingsLoader):
    """Load settings from environment variables named ``<PREFIX>_<FIELD>``."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def load(self, settings_class: type[T]) -> T:
        environ = self._environ if self._environ is not None else os.environ
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            key = settings_class.env_var(field.name)
            raw = environ.get(key)
            if raw is None:
                if _is_required(field):
                    raise MissingRequiredSettingError(key)
                continue
            kwargs[field.name] = coerce(key, raw, field.type)
        try:
            return settings_class(**kwargs)
        except ConfigError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Failed to load {settings_class.__name__}: {exc}", cause=exc) from exc


class DotenvSettingsLoader(SettingsLoader):
    """Read a ``.env`` file; real environment variables win unless *override* is set."""

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        file_values = {k: v for k, v in dotenv_values(self._env_file).items() if v is not None}
        if self._override:
            merged = {**os.environ, **file_values}
        else:
            merged = {**file_values, **os.environ}
        return EnvSettingsLoader(merged).load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader", "coerce"]
