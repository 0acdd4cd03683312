"""Document base classes.

A document is a dataclass exposing an ``id`` attribute of some identifier
type ``TKey``.  Subclass :class:`Document` for ``uuid.UUID`` identifiers or
``KeyedDocument[TKey]`` for any other registered key type::

    @dataclass(kw_only=True)
    class Invoice(KeyedDocument[int]):
        number: str = ""

Documents that live in partitioned collections expose a non-persisted
``partition_key`` (see :class:`PartitionedDocument`).
"""

from __future__ import annotations

import dataclasses
import uuid
from datetime import UTC, datetime
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from mongo_repository.models.codec import transient

TKey = TypeVar("TKey")


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclasses.dataclass(kw_only=True)
class KeyedDocument(Generic[TKey]):
    """Base document with an identifier of type ``TKey``.

    ``id`` starts unset (``None``); the repository assigns one on insertion.
    """

    id: Any = None
    added_at_utc: datetime = dataclasses.field(default_factory=_utcnow)
    version: int = 0


@dataclasses.dataclass(kw_only=True)
class Document(KeyedDocument[uuid.UUID]):
    """Base document keyed by ``uuid.UUID``; a new id is generated on construction."""

    id: uuid.UUID = dataclasses.field(default_factory=uuid.uuid4)


@runtime_checkable
class Partitioned(Protocol):
    """Anything carrying the partition key that selects its collection."""

    partition_key: str | None


@dataclasses.dataclass(kw_only=True)
class PartitionedDocument(Document):
    """A :class:`Document` stored in the collection selected by ``partition_key``.

    The partition key is prepended to the collection name and is not inserted
    into the document itself.
    """

    partition_key: str | None = transient(default=None)


def partition_key_of(document: Any) -> str | None:
    """Return the document's partition key, or ``None`` for unpartitioned documents."""
    if isinstance(document, Partitioned):
        return document.partition_key or None
    return None


__all__ = [
    "Document",
    "KeyedDocument",
    "Partitioned",
    "PartitionedDocument",
    "partition_key_of",
]
