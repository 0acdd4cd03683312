"""Config settings – SettingsFactory."""
from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Sequence, TypeVar

from mongo_repository.config.settings.base import Settings
from mongo_repository.config.settings.loaders import SettingsLoader
from mongo_repository.config.validation.errors import ConfigError, MissingRequiredSettingError
from mongo_repository.observability.logging import get_logger

T = TypeVar("T", bound=Settings)

_log = get_logger(__name__)


class SettingsFactory:
    """Build one settings instance out of several sources.

    Sources are consulted in order and later ones win field by field.  A
    source that lacks a required value on its own is skipped, so the value
    may still come from another source or from *overrides*.

    Usage::

        settings = SettingsFactory.create(
            MongoSettings,
            [DotenvSettingsLoader(".env"), EnvSettingsLoader()],
            overrides={"database_name": "shop_test"},
        )
    """

    @staticmethod
    def create(
        settings_cls: type[T],
        loaders: Sequence[SettingsLoader] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> T:
        """Merge *loaders* then *overrides* and construct *settings_cls*.

        Raises :class:`MissingRequiredSettingError` (with the field name) when
        no source supplies a required field, and :class:`ConfigError` when the
        merged values do not fit the class.
        """
        values = _collect(settings_cls, loaders or ())
        values.update(overrides or {})

        missing = [name for name in _required_fields(settings_cls) if name not in values]
        if missing:
            raise MissingRequiredSettingError(missing[0])

        try:
            return settings_cls(**values)
        except ConfigError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigError(
                f"Cannot build {settings_cls.__name__}: {exc}",
                detail={"settings": settings_cls.__name__},
                cause=exc,
            ) from exc


def _collect(settings_cls: type[Settings], loaders: Iterable[SettingsLoader]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for loader in loaders:
        try:
            instance = loader.load(settings_cls)
        except MissingRequiredSettingError as exc:
            _log.debug("settings_source_skipped", source=type(loader).__name__, missing=exc.setting_name)
            continue
        values.update({f.name: getattr(instance, f.name) for f in dataclasses.fields(instance)})
    return values


def _required_fields(settings_cls: type[Settings]) -> list[str]:
    return [
        f.name
        for f in dataclasses.fields(settings_cls)
        if f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING  # type: ignore[misc]
    ]


__all__ = ["SettingsFactory"]
