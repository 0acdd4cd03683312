"""Configuration errors raised while loading or validating settings."""
from __future__ import annotations

from typing import Any

from mongo_repository.kernel.errors import ApplicationError
from mongo_repository.observability.logging.filters import mask_credentials


class ConfigError(ApplicationError):
    """Settings could not be loaded or built."""

    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """No source supplied a value for a required setting.

    ``setting_name`` is the environment variable when raised by a loader
    (``MONGO_CONNECTION_STRING``) and the field name when raised while
    merging sources (``connection_string``).
    """

    default_code = "missing_required_setting"

    def __init__(self, setting_name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Required setting '{setting_name}' is missing",
            detail={"setting": setting_name},
            **kwargs,
        )
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting is present but its value is unusable.

    Connection strings are masked in the message and the detail so that
    credentials never reach the logs; ``value`` keeps the raw input.
    """

    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: Any, reason: str, **kwargs: Any) -> None:
        shown = mask_credentials(value) if isinstance(value, str) else value
        super().__init__(
            f"Setting '{setting_name}' has invalid value {shown!r}: {reason}",
            detail={"setting": setting_name, "value": shown, "reason": reason},
            **kwargs,
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
