"""MongoDbEraser – deletes documents by instance or by filter."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from mongo_repository.data_access.base import DataAccessBase, normalize_filter, store_errors
from mongo_repository.models.codec import ID_FIELD


class MongoDbEraser(DataAccessBase):
    """Delete documents and report how many were removed.

    Deleting by instance matches on the identifier only; every other field of
    the instance is ignored.  Matching nothing is not an error: the count is 0.
    """

    # ------------------------------------------------------------------
    # By instance
    # ------------------------------------------------------------------

    def delete_one(self, document: Any) -> int:
        self.require(document, "document")
        collection = self.handle_partitioned(document)
        with store_errors(collection.name):
            result = collection.delete_one(self.id_filter(document))
        self._log.debug("documents_deleted", collection=collection.name, count=result.deleted_count)
        return result.deleted_count

    async def delete_one_async(self, document: Any) -> int:
        self.require(document, "document")
        collection = self.handle_partitioned_async(document)
        with store_errors(collection.name):
            result = await collection.delete_one(self.id_filter(document))
        self._log.debug("documents_deleted", collection=collection.name, count=result.deleted_count)
        return result.deleted_count

    def delete_many(self, documents: Sequence[Any]) -> int:
        """Delete the given instances, one ``$in`` query per (document type, partition key)."""
        documents = list(self.require(documents, "documents"))
        deleted = 0
        for (document_type, partition_key), group in self.group_by_partition(documents).items():
            collection = self.get_collection(document_type, partition_key)
            with store_errors(collection.name):
                result = collection.delete_many(_ids_filter(group))
            deleted += result.deleted_count
            self._log.debug("documents_deleted", collection=collection.name, count=result.deleted_count)
        return deleted

    async def delete_many_async(self, documents: Sequence[Any]) -> int:
        documents = list(self.require(documents, "documents"))
        deleted = 0
        for (document_type, partition_key), group in self.group_by_partition(documents).items():
            collection = self.get_async_collection(document_type, partition_key)
            with store_errors(collection.name):
                result = await collection.delete_many(_ids_filter(group))
            deleted += result.deleted_count
            self._log.debug("documents_deleted", collection=collection.name, count=result.deleted_count)
        return deleted

    # ------------------------------------------------------------------
    # By filter
    # ------------------------------------------------------------------

    def delete_one_where(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        partition_key: str | None = None,
    ) -> int:
        query = normalize_filter(self.require(filter, "filter"))
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            result = collection.delete_one(query)
        self._log.debug("documents_deleted", collection=collection.name, count=result.deleted_count)
        return result.deleted_count

    async def delete_one_where_async(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        partition_key: str | None = None,
    ) -> int:
        query = normalize_filter(self.require(filter, "filter"))
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            result = await collection.delete_one(query)
        self._log.debug("documents_deleted", collection=collection.name, count=result.deleted_count)
        return result.deleted_count

    def delete_many_where(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        partition_key: str | None = None,
    ) -> int:
        query = normalize_filter(self.require(filter, "filter"))
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            result = collection.delete_many(query)
        self._log.debug("documents_deleted", collection=collection.name, count=result.deleted_count)
        return result.deleted_count

    async def delete_many_where_async(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        partition_key: str | None = None,
    ) -> int:
        query = normalize_filter(self.require(filter, "filter"))
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            result = await collection.delete_many(query)
        self._log.debug("documents_deleted", collection=collection.name, count=result.deleted_count)
        return result.deleted_count


def _ids_filter(documents: list[Any]) -> dict[str, Any]:
    return {ID_FIELD: {"$in": [DataAccessBase.get_id(d) for d in documents]}}


__all__ = ["MongoDbEraser"]
