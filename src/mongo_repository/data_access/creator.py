"""MongoDbCreator – inserts documents after assigning missing identifiers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from mongo_repository.data_access.base import DataAccessBase, store_errors
from mongo_repository.models.codec import to_bson


class MongoDbCreator(DataAccessBase):
    """Insert one or many documents.

    Each document goes through :meth:`format_document` first, so it has a
    ``insert_many`` per (document type, partition key) present in the batch.
    ``insert_many`` per partition key present in the batch.
    """

    def add_one(self, document: Any, key_type: type) -> None:
        self.format_document(document, key_type)
        collection = self.handle_partitioned(document)
        with store_errors(collection.name):
            collection.insert_one(to_bson(document))
        self._log.debug("document_added", collection=collection.name)

    async def add_one_async(self, document: Any, key_type: type) -> None:
        self.format_document(document, key_type)
        collection = self.handle_partitioned_async(document)
        with store_errors(collection.name):
            await collection.insert_one(to_bson(document))
        self._log.debug("document_added", collection=collection.name)

    def add_many(self, documents: Sequence[Any], key_type: type) -> None:
        """Insert *documents*; an empty sequence returns without contacting the store."""
        documents = list(self.require(documents, "documents"))
        if not documents:
            return
        for document in documents:
            self.format_document(document, key_type)
        for (document_type, partition_key), group in self.group_by_partition(documents).items():
            collection = self.get_collection(document_type, partition_key)
            with store_errors(collection.name):
                collection.insert_many([to_bson(d) for d in group])
            self._log.debug("documents_added", collection=collection.name, count=len(group))

    async def add_many_async(self, documents: Sequence[Any], key_type: type) -> None:
        documents = list(self.require(documents, "documents"))
        if not documents:
            return
        for document in documents:
            self.format_document(document, key_type)
        for (document_type, partition_key), group in self.group_by_partition(documents).items():
            collection = self.get_async_collection(document_type, partition_key)
            with store_errors(collection.name):
                await collection.insert_many([to_bson(d) for d in group])
            self._log.debug("documents_added", collection=collection.name, count=len(group))


__all__ = ["MongoDbCreator"]
