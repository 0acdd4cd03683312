"""Application-layer errors – invalid calls detected before reaching the store."""

from __future__ import annotations

from typing import Any

from mongo_repository.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """The caller used the repository incorrectly."""

    default_code = "application_error"


class ArgumentNullError(ApplicationError, ValueError):
    """A required document, filter or sequence argument was ``None``."""

    default_code = "argument_null"

    def __init__(self, argument: str, **kwargs: Any) -> None:
        super().__init__(f"Argument '{argument}' must not be None", **kwargs)
        self.argument = argument


class EmptyFieldSetError(ApplicationError, ValueError):
    """An operation that needs at least one field received none."""

    default_code = "empty_field_set"

    def __init__(self, message: str = "At least one field is required", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class UnsupportedIdentifierTypeError(ApplicationError, TypeError):
    """No identifier generation policy is registered for a key type."""

    default_code = "unsupported_identifier_type"

    def __init__(self, key_type: Any, **kwargs: Any) -> None:
        name = getattr(key_type, "__name__", repr(key_type))
        super().__init__(
            f"{name} is not a supported Id type, the Id of the document cannot be set",
            **kwargs,
        )
        self.key_type = key_type


__all__ = [
    "ApplicationError",
    "ArgumentNullError",
    "EmptyFieldSetError",
    "UnsupportedIdentifierTypeError",
]
