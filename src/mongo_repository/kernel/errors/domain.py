"""Domain errors – writes the store rejected and targets that do not exist."""

from __future__ import annotations

from typing import Any

from mongo_repository.kernel.errors.base import BaseError


class DomainError(BaseError):
    """The store refused an operation because of the data involved."""

    default_code = "domain_error"


class WriteRejectedError(DomainError):
    """A write the store refused; ``errors`` lists the write errors it reported."""

    default_code = "write_rejected"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = list(errors or [])

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["errors"] = self.errors
        return payload


class ValidationError(WriteRejectedError):
    """A document failed the collection's validation rules (server code 121)."""

    default_code = "validation_error"


class NotFoundError(DomainError):
    """The targeted resource does not exist."""

    default_code = "not_found"

    def __init__(self, resource: str, identifier: Any = None, **kwargs: Any) -> None:
        label = resource if identifier is None else f"{resource} '{identifier}'"
        super().__init__(f"{label} not found", **kwargs)
        self.resource = resource
        self.identifier = identifier


class IndexNotFoundError(NotFoundError):
    """An index drop targeted an index that does not exist.

    Recoverable: the collection is left exactly as it was.
    """

    default_code = "index_not_found"

    def __init__(self, index_name: str, collection: str, **kwargs: Any) -> None:
        super().__init__("Index", index_name, detail={"collection": collection}, **kwargs)
        self.index_name = index_name


class ConflictError(DomainError):
    """The operation conflicts with state already in the store."""

    default_code = "conflict"


class WriteConflictError(WriteRejectedError, ConflictError):
    """A write violated a unique index (server code 11000)."""

    default_code = "write_conflict"

    @property
    def duplicate_keys(self) -> list[dict[str, Any]]:
        """The ``keyValue`` documents of the offending writes, when reported."""
        return [e["keyValue"] for e in self.errors if e.get("keyValue")]


__all__ = [
    "ConflictError",
    "DomainError",
    "IndexNotFoundError",
    "NotFoundError",
    "ValidationError",
    "WriteConflictError",
    "WriteRejectedError",
]
