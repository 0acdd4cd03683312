"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import ClassVar


@dataclasses.dataclass
class Settings:
    """Base class for settings read from the environment.

    ``_prefix`` namespaces the variables of a subclass: with ``MONGO`` the
    field ``connection_string`` is read from ``MONGO_CONNECTION_STRING``.
    Subclasses check their values in :meth:`_validate`, which runs on every
    construction whatever the source.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Raise :class:`InvalidSettingValueError` for unusable values."""

    @classmethod
    def env_var(cls, field_name: str) -> str:
        """Name of the environment variable holding *field_name*."""
        return f"{cls._prefix}_{field_name}".upper().lstrip("_")


__all__ = ["Settings"]
