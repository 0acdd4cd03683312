"""DataAccessBase – collection resolution, document formatting and store-error translation.

Every data-access component (creator, eraser, updater, reader, index handler)
derives from :class:`DataAccessBase`, so they all resolve collections, assign
identifiers and translate driver failures the same way.
"""

from __future__ import annotations

import contextlib
import dataclasses
from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any, TypeVar

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.collection import Collection
from pymongo.errors import BulkWriteError, ConnectionFailure, DuplicateKeyError, WriteError

from mongo_repository.context import MongoDbContext
from mongo_repository.kernel.errors import (
    ArgumentNullError,
    ConnectionError,
    ValidationError,
    WriteConflictError,
)
from mongo_repository.kernel.types import IdGenerator
from mongo_repository.models.codec import ID_ATTRIBUTE, ID_FIELD, field_path, from_bson
from mongo_repository.models.document import partition_key_of
from mongo_repository.observability.logging import get_logger

T = TypeVar("T")

DUPLICATE_KEY = 11000
DOCUMENT_VALIDATION_FAILURE = 121


@contextlib.contextmanager
def store_errors(collection: str | None = None) -> Iterator[None]:
    """Translate driver exceptions raised inside the block.

    * duplicate key (11000) -> :class:`WriteConflictError`
    * document validation failure (121) -> :class:`ValidationError`
    * ``ConnectionFailure`` and subclasses -> :class:`ConnectionError`

    Anything else propagates unchanged.  The driver exception is kept as
    ``cause``.  Works around ``await`` expressions as well.
    """
    detail = {"collection": collection} if collection else {}
    try:
        yield
    except BulkWriteError as exc:
        errors = list((exc.details or {}).get("writeErrors", []))
        codes = {e.get("code") for e in errors}
        if DUPLICATE_KEY in codes:
            raise WriteConflictError(
                "Bulk write violated a unique index", errors=errors, detail=detail, cause=exc
            ) from exc
        if DOCUMENT_VALIDATION_FAILURE in codes:
            raise ValidationError(
                "Document failed validation", errors=errors, detail=detail, cause=exc
            ) from exc
        raise
    except DuplicateKeyError as exc:
        raise WriteConflictError(
            "Write violated a unique index", errors=[exc.details or {}], detail=detail, cause=exc
        ) from exc
    except WriteError as exc:
        if exc.code == DOCUMENT_VALIDATION_FAILURE:
            raise ValidationError(
                "Document failed validation", errors=[exc.details or {}], detail=detail, cause=exc
            ) from exc
        raise
    except ConnectionFailure as exc:
        raise ConnectionError("mongodb", str(exc), detail=detail, cause=exc) from exc


LOGICAL_OPERATORS = frozenset({"$and", "$or", "$nor"})


def normalize_filter(filter: Mapping[str, Any]) -> dict[str, Any]:
    """Rename ``id`` / ``id.x`` keys to their stored paths.

    Clauses under ``$and``, ``$or`` and ``$nor`` address the same document, so
    they are renamed too.  Embedded documents keep their ``id`` keys when
    stored, hence ``$elemMatch`` and other field operators are left alone.
    """
    query: dict[str, Any] = {}
    for key, value in filter.items():
        if key in LOGICAL_OPERATORS and isinstance(value, (list, tuple)):
            query[key] = [normalize_filter(clause) if isinstance(clause, Mapping) else clause for clause in value]
        else:
            query[field_path(key)] = value
    return query


class DataAccessBase:
    """Shared plumbing of the data-access components.

    Parameters
    ----------
    context:
        The :class:`MongoDbContext` handing out collection handles.
    id_generator:
        Identifier policies; defaults to :meth:`IdGenerator.default`.
    """

    def __init__(self, context: MongoDbContext, id_generator: IdGenerator | None = None) -> None:
        self.context = context
        self.id_generator = id_generator or IdGenerator.default()
        self._log = get_logger(type(self).__module__, component=type(self).__name__)

    # ------------------------------------------------------------------
    # Collection resolution
    # ------------------------------------------------------------------

    def get_collection(self, document_type: type, partition_key: str | None = None) -> Collection:
        return self.context.get_collection(document_type, partition_key or None)

    def get_async_collection(
        self, document_type: type, partition_key: str | None = None
    ) -> AsyncIOMotorCollection:
        return self.context.get_async_collection(document_type, partition_key or None)

    def handle_partitioned(self, document: Any) -> Collection:
        """Return the collection a document instance belongs to."""
        return self.get_collection(type(document), partition_key_of(document))

    def handle_partitioned_async(self, document: Any) -> AsyncIOMotorCollection:
        return self.get_async_collection(type(document), partition_key_of(document))

    # ------------------------------------------------------------------
    # Document formatting
    # ------------------------------------------------------------------

    def format_document(self, document: Any, key_type: type) -> None:
        """Assign a new identifier to *document* when it has none.

        A document "has none" when its id is ``None`` or equal to the zero
        value of *key_type* (``UUID(int=0)``, ``0``...).  A caller who sets
        the zero value on purpose therefore gets a generated id.  Existing
        identifiers are never overwritten, so formatting twice is a no-op.
        """
        if document is None:
            raise ArgumentNullError("document")
        current = self.get_id(document)
        if not self.id_generator.is_default(current, key_type):
            return
        new = self.id_generator.new_id(key_type)
        if isinstance(document, MutableMapping):
            document[ID_FIELD] = new
        else:
            setattr(document, ID_ATTRIBUTE, new)

    @staticmethod
    def get_id(document: Any) -> Any:
        if isinstance(document, Mapping):
            return document.get(ID_FIELD)
        return getattr(document, ID_ATTRIBUTE, None)

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    @staticmethod
    def require(value: T | None, argument: str) -> T:
        if value is None:
            raise ArgumentNullError(argument)
        return value

    @staticmethod
    def id_filter(document: Any) -> dict[str, Any]:
        """Filter matching *document* on identifier equality only."""
        return {ID_FIELD: DataAccessBase.get_id(document)}

    @staticmethod
    def decode(document_type: type[T], raw: Mapping[str, Any] | None, partition_key: str | None) -> T | None:
        """Rebuild a document, restoring the partition key it was read from."""
        extra: dict[str, Any] = {}
        if partition_key and dataclasses.is_dataclass(document_type):
            if any(f.name == "partition_key" for f in dataclasses.fields(document_type)):
                extra["partition_key"] = partition_key
        return from_bson(document_type, raw, **extra)

    @staticmethod
    def group_by_partition(documents: list[Any]) -> dict[tuple[type, str | None], list[Any]]:
        """Group document instances by (document type, partition key), keeping input order."""
        groups: dict[tuple[type, str | None], list[Any]] = {}
        for document in documents:
            groups.setdefault((type(document), partition_key_of(document)), []).append(document)
        return groups


__all__ = ["DataAccessBase", "normalize_filter", "store_errors"]
