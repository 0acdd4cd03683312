"""MongoDbUpdater – replaces and updates documents."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from motor.motor_asyncio import AsyncIOMotorClientSession
from pymongo import ReturnDocument
from pymongo.client_session import ClientSession

from mongo_repository.data_access.base import DataAccessBase, normalize_filter, store_errors
from mongo_repository.models.codec import field_path, to_bson

T = TypeVar("T")

# An update document ({"$set": ...}) or an aggregation pipeline
Update = Mapping[str, Any] | Sequence[Mapping[str, Any]]


class MongoDbUpdater(DataAccessBase):
    """Apply updates to documents matched by identifier or by filter.

    Single-document operations return ``True`` when exactly one document was
    modified; many-document operations return the modified count.  Matching
    nothing is not an error.

    Every operation takes an optional ``session``.  It is handed to the driver
    as is: starting, committing and aborting the transaction stay with the
    caller who owns the session.
    """

    # ------------------------------------------------------------------
    # Replace
    # ------------------------------------------------------------------

    def update_one(self, modified_document: Any, *, session: ClientSession | None = None) -> bool:
        """Replace the stored document having the same ``id``."""
        self.require(modified_document, "modified_document")
        collection = self.handle_partitioned(modified_document)
        with store_errors(collection.name):
            result = collection.replace_one(
                self.id_filter(modified_document), to_bson(modified_document), session=session
            )
        self._log.debug("documents_updated", collection=collection.name, count=result.modified_count)
        return result.modified_count == 1

    async def update_one_async(
        self, modified_document: Any, *, session: AsyncIOMotorClientSession | None = None
    ) -> bool:
        self.require(modified_document, "modified_document")
        collection = self.handle_partitioned_async(modified_document)
        with store_errors(collection.name):
            result = await collection.replace_one(
                self.id_filter(modified_document), to_bson(modified_document), session=session
            )
        self._log.debug("documents_updated", collection=collection.name, count=result.modified_count)
        return result.modified_count == 1

    # ------------------------------------------------------------------
    # Update one
    # ------------------------------------------------------------------

    def update_one_with(self, document: Any, update: Update, *, session: ClientSession | None = None) -> bool:
        """Apply *update* to the stored document with the same ``id`` as *document*."""
        self.require(document, "document")
        self.require(update, "update")
        collection = self.handle_partitioned(document)
        with store_errors(collection.name):
            result = collection.update_one(self.id_filter(document), update, session=session)
        self._log.debug("documents_updated", collection=collection.name, count=result.modified_count)
        return result.modified_count == 1

    async def update_one_with_async(
        self, document: Any, update: Update, *, session: AsyncIOMotorClientSession | None = None
    ) -> bool:
        self.require(document, "document")
        self.require(update, "update")
        collection = self.handle_partitioned_async(document)
        with store_errors(collection.name):
            result = await collection.update_one(self.id_filter(document), update, session=session)
        self._log.debug("documents_updated", collection=collection.name, count=result.modified_count)
        return result.modified_count == 1

    def update_one_where(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        update: Update,
        partition_key: str | None = None,
        *,
        session: ClientSession | None = None,
    ) -> bool:
        query = normalize_filter(self.require(filter, "filter"))
        self.require(update, "update")
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            result = collection.update_one(query, update, session=session)
        self._log.debug("documents_updated", collection=collection.name, count=result.modified_count)
        return result.modified_count == 1

    async def update_one_where_async(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        update: Update,
        partition_key: str | None = None,
        *,
        session: AsyncIOMotorClientSession | None = None,
    ) -> bool:
        query = normalize_filter(self.require(filter, "filter"))
        self.require(update, "update")
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            result = await collection.update_one(query, update, session=session)
        self._log.debug("documents_updated", collection=collection.name, count=result.modified_count)
        return result.modified_count == 1

    def update_one_field(
        self, document: Any, field: str, value: Any, *, session: ClientSession | None = None
    ) -> bool:
        """``$set`` a single field on the stored copy of *document*."""
        return self.update_one_with(document, _set(field, value), session=session)

    async def update_one_field_async(
        self, document: Any, field: str, value: Any, *, session: AsyncIOMotorClientSession | None = None
    ) -> bool:
        return await self.update_one_with_async(document, _set(field, value), session=session)

    def update_one_field_where(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        field: str,
        value: Any,
        partition_key: str | None = None,
        *,
        session: ClientSession | None = None,
    ) -> bool:
        return self.update_one_where(document_type, filter, _set(field, value), partition_key, session=session)

    async def update_one_field_where_async(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        field: str,
        value: Any,
        partition_key: str | None = None,
        *,
        session: AsyncIOMotorClientSession | None = None,
    ) -> bool:
        return await self.update_one_where_async(
            document_type, filter, _set(field, value), partition_key, session=session
        )

    # ------------------------------------------------------------------
    # Update many
    # ------------------------------------------------------------------

    def update_many(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        update: Update,
        partition_key: str | None = None,
        *,
        session: ClientSession | None = None,
    ) -> int:
        query = normalize_filter(self.require(filter, "filter"))
        self.require(update, "update")
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            result = collection.update_many(query, update, session=session)
        self._log.debug("documents_updated", collection=collection.name, count=result.modified_count)
        return result.modified_count

    async def update_many_async(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        update: Update,
        partition_key: str | None = None,
        *,
        session: AsyncIOMotorClientSession | None = None,
    ) -> int:
        query = normalize_filter(self.require(filter, "filter"))
        self.require(update, "update")
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            result = await collection.update_many(query, update, session=session)
        self._log.debug("documents_updated", collection=collection.name, count=result.modified_count)
        return result.modified_count

    def update_many_field(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        field: str,
        value: Any,
        partition_key: str | None = None,
        *,
        session: ClientSession | None = None,
    ) -> int:
        return self.update_many(document_type, filter, _set(field, value), partition_key, session=session)

    async def update_many_field_async(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        field: str,
        value: Any,
        partition_key: str | None = None,
        *,
        session: AsyncIOMotorClientSession | None = None,
    ) -> int:
        return await self.update_many_async(
            document_type, filter, _set(field, value), partition_key, session=session
        )

    # ------------------------------------------------------------------
    # Find and update
    # ------------------------------------------------------------------

    def get_and_update_one(
        self,
        document_type: type[T],
        filter: Mapping[str, Any],
        update: Update,
        *,
        return_document: ReturnDocument = ReturnDocument.AFTER,
        partition_key: str | None = None,
        session: ClientSession | None = None,
    ) -> T | None:
        """Atomically update one document and return it.

        *return_document* selects the state returned: ``ReturnDocument.BEFORE``
        or ``ReturnDocument.AFTER`` the update.  ``None`` when nothing matched.
        """
        query = normalize_filter(self.require(filter, "filter"))
        self.require(update, "update")
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            raw = collection.find_one_and_update(
                query, update, return_document=return_document, session=session
            )
        self._log.debug("document_found_and_updated", collection=collection.name, matched=raw is not None)
        return self.decode(document_type, raw, partition_key)

    async def get_and_update_one_async(
        self,
        document_type: type[T],
        filter: Mapping[str, Any],
        update: Update,
        *,
        return_document: ReturnDocument = ReturnDocument.AFTER,
        partition_key: str | None = None,
        session: AsyncIOMotorClientSession | None = None,
    ) -> T | None:
        query = normalize_filter(self.require(filter, "filter"))
        self.require(update, "update")
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            raw = await collection.find_one_and_update(
                query, update, return_document=return_document, session=session
            )
        self._log.debug("document_found_and_updated", collection=collection.name, matched=raw is not None)
        return self.decode(document_type, raw, partition_key)


def _set(field: str, value: Any) -> dict[str, Any]:
    return {"$set": {field_path(field): value}}


__all__ = ["MongoDbUpdater", "Update"]
