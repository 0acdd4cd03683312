"""Root of the error hierarchy raised by the repository layer."""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Every error raised by this package derives from this class.

    ``code`` is a stable slug for programmatic handling, ``detail`` holds
    context such as the collection involved, and ``cause`` is the driver
    exception that was translated (also chained as ``__cause__``).

    ``str(err)`` is a single JSON line, ready to be logged as is.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def collection(self) -> str | None:
        """Name of the collection the failing operation targeted, if known."""
        return self.detail.get("collection")

    @property
    def store_code(self) -> int | None:
        """Numeric error code the server attached to the cause, if any."""
        return getattr(self.cause, "code", None)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            cause: dict[str, Any] = {"type": type(self.cause).__name__, "message": str(self.cause)}
            if self.store_code is not None:
                cause["store_code"] = self.store_code
            payload["cause"] = cause
        return payload

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


__all__ = ["BaseError"]
