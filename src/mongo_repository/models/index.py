"""Index descriptors and creation options."""

from __future__ import annotations

import dataclasses
from datetime import timedelta
from enum import Enum
from typing import Any, Sequence

import pymongo

from mongo_repository.kernel.errors import EmptyFieldSetError
from mongo_repository.models.codec import field_path


class IndexKind(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"
    TEXT = "text"
    HASHED = "hashed"
    COMBINED_TEXT = "combined_text"

    @property
    def direction(self) -> Any:
        return _DIRECTIONS[self]


_DIRECTIONS: dict[IndexKind, Any] = {
    IndexKind.ASCENDING: pymongo.ASCENDING,
    IndexKind.DESCENDING: pymongo.DESCENDING,
    IndexKind.TEXT: pymongo.TEXT,
    IndexKind.HASHED: pymongo.HASHED,
    IndexKind.COMBINED_TEXT: pymongo.TEXT,
}


@dataclasses.dataclass(frozen=True)
class IndexCreationOptions:
    """Options for creating an index; ``None`` means "store default"."""

    unique: bool | None = None
    text_index_version: int | None = None
    sphere_index_version: int | None = None
    sparse: bool | None = None
    name: str | None = None
    min: float | None = None
    max: float | None = None
    language_override: str | None = None
    expire_after: timedelta | None = None
    default_language: str | None = None
    bucket_size: float | None = None
    bits: int | None = None
    background: bool | None = None
    version: int | None = None

    def to_kwargs(self) -> dict[str, Any]:
        """Return the options as keyword arguments for ``create_index``."""
        mapped = {
            "unique": self.unique,
            "textIndexVersion": self.text_index_version,
            "2dsphereIndexVersion": self.sphere_index_version,
            "sparse": self.sparse,
            "name": self.name,
            "min": self.min,
            "max": self.max,
            "language_override": self.language_override,
            "expireAfterSeconds": (
                int(self.expire_after.total_seconds()) if self.expire_after is not None else None
            ),
            "default_language": self.default_language,
            "bucketSize": self.bucket_size,
            "bits": self.bits,
            "background": self.background,
            "v": self.version,
        }
        return {k: v for k, v in mapped.items() if v is not None}


@dataclasses.dataclass(frozen=True)
class IndexDescriptor:
    """One index: an ordered set of fields, a kind, and optional options."""

    fields: tuple[str, ...]
    kind: IndexKind
    options: IndexCreationOptions | None = None

    def __post_init__(self) -> None:
        if not self.fields:
            raise EmptyFieldSetError("An index needs at least one field")

    @classmethod
    def of(
        cls,
        fields: str | Sequence[str],
        kind: IndexKind,
        options: IndexCreationOptions | None = None,
    ) -> "IndexDescriptor":
        if isinstance(fields, str):
            fields = (fields,)
        return cls(tuple(fields), kind, options)

    def keys(self) -> list[tuple[str, Any]]:
        """The key specification understood by ``create_index``."""
        return [(field_path(name), self.kind.direction) for name in self.fields]

    def create_kwargs(self) -> dict[str, Any]:
        return self.options.to_kwargs() if self.options is not None else {}


__all__ = ["IndexCreationOptions", "IndexDescriptor", "IndexKind"]
