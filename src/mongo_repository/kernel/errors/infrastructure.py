"""Infrastructure errors – I/O failures talking to the store."""

from __future__ import annotations

from typing import Any

from mongo_repository.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """The store could not serve the request, whatever the data."""

    default_code = "infrastructure_error"


class ConnectionError(InfrastructureError):  # noqa: A001
    """The store is unreachable (server selection failed, network error).

    No retry is attempted by the repository; ``timed_out`` tells callers
    whether the driver gave up waiting rather than being refused.
    """

    default_code = "connection_error"

    def __init__(self, resource: str, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"Could not connect to '{resource}'", **kwargs)
        self.resource = resource

    @property
    def timed_out(self) -> bool:
        return bool(getattr(self.cause, "timeout", False))


__all__ = ["ConnectionError", "InfrastructureError"]
