"""KeyTypedMongoRepository – the repository facade, generic over the identifier type."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from motor.motor_asyncio import AsyncIOMotorClientSession
from pymongo import ReturnDocument
from pymongo.client_session import ClientSession

from mongo_repository.data_access import (
    MongoDbCreator,
    MongoDbEraser,
    MongoDbIndexHandler,
    MongoDbUpdater,
    Update,
)
from mongo_repository.models.index import IndexCreationOptions, IndexDescriptor
from mongo_repository.repository.lazy import LazyComponent
from mongo_repository.repository.readonly import KeyTypedReadOnlyMongoRepository

TKey = TypeVar("TKey")
T = TypeVar("T")


class KeyTypedMongoRepository(KeyTypedReadOnlyMongoRepository[TKey]):
    """Repository for documents whose ``id`` is of type ``TKey``.

    Every operation resolves the collection from the document type (or the
    document instance) and the optional partition key, assigns identifiers
    on insertion, and delegates to a data-access component.  The components
    are built lazily, once per repository, and are safe to share between
    threads and tasks.

    Usage::

        repo = KeyTypedMongoRepository[int](MongoDbContext(url, "shop"), int)
        repo.add_one(invoice)                      # invoice.id is now set
        repo.get_by_id(Invoice, invoice.id)
        repo.delete_many_where(Invoice, {"paid": True}, partition_key="tenantA")

    Each operation also exists as a coroutine with an ``_async`` suffix.
    Update operations accept a caller-owned ``session`` so they can take part
    in the caller's transaction.
    """

    creator: LazyComponent[MongoDbCreator] = LazyComponent(
        lambda repo: MongoDbCreator(repo.context, repo.id_generator)
    )
    eraser: LazyComponent[MongoDbEraser] = LazyComponent(
        lambda repo: MongoDbEraser(repo.context, repo.id_generator)
    )
    updater: LazyComponent[MongoDbUpdater] = LazyComponent(
        lambda repo: MongoDbUpdater(repo.context, repo.id_generator)
    )
    index_handler: LazyComponent[MongoDbIndexHandler] = LazyComponent(
        lambda repo: MongoDbIndexHandler(repo.context, repo.id_generator)
    )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def add_one(self, document: Any) -> None:
        """Insert *document*, generating its ``id`` when unset."""
        self.creator.add_one(document, self.key_type)

    async def add_one_async(self, document: Any) -> None:
        await self.creator.add_one_async(document, self.key_type)

    def add_many(self, documents: Sequence[Any]) -> None:
        """Insert *documents*; an empty sequence is a no-op."""
        self.creator.add_many(documents, self.key_type)

    async def add_many_async(self, documents: Sequence[Any]) -> None:
        await self.creator.add_many_async(documents, self.key_type)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_one(self, document: Any) -> int:
        return self.eraser.delete_one(document)

    async def delete_one_async(self, document: Any) -> int:
        return await self.eraser.delete_one_async(document)

    def delete_one_where(
        self, document_type: type, filter: Mapping[str, Any], partition_key: str | None = None
    ) -> int:
        return self.eraser.delete_one_where(document_type, filter, partition_key)

    async def delete_one_where_async(
        self, document_type: type, filter: Mapping[str, Any], partition_key: str | None = None
    ) -> int:
        return await self.eraser.delete_one_where_async(document_type, filter, partition_key)

    def delete_many(self, documents: Sequence[Any]) -> int:
        return self.eraser.delete_many(documents)

    async def delete_many_async(self, documents: Sequence[Any]) -> int:
        return await self.eraser.delete_many_async(documents)

    def delete_many_where(
        self, document_type: type, filter: Mapping[str, Any], partition_key: str | None = None
    ) -> int:
        return self.eraser.delete_many_where(document_type, filter, partition_key)

    async def delete_many_where_async(
        self, document_type: type, filter: Mapping[str, Any], partition_key: str | None = None
    ) -> int:
        return await self.eraser.delete_many_where_async(document_type, filter, partition_key)


    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_one(self, modified_document: Any, *, session: ClientSession | None = None) -> bool:
        return self.updater.update_one(modified_document, session=session)

    async def update_one_async(
        self, modified_document: Any, *, session: AsyncIOMotorClientSession | None = None
    ) -> bool:
        return await self.updater.update_one_async(modified_document, session=session)

    def update_one_with(self, document: Any, update: Update, *, session: ClientSession | None = None) -> bool:
        return self.updater.update_one_with(document, update, session=session)

    async def update_one_with_async(
        self, document: Any, update: Update, *, session: AsyncIOMotorClientSession | None = None
    ) -> bool:
        return await self.updater.update_one_with_async(document, update, session=session)

    def update_one_where(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        update: Update,
        partition_key: str | None = None,
        *,
        session: ClientSession | None = None,
    ) -> bool:
        return self.updater.update_one_where(document_type, filter, update, partition_key, session=session)

    async def update_one_where_async(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        update: Update,
        partition_key: str | None = None,
        *,
        session: AsyncIOMotorClientSession | None = None,
    ) -> bool:
        return await self.updater.update_one_where_async(
            document_type, filter, update, partition_key, session=session
        )

    def update_one_field(
        self, document: Any, field: str, value: Any, *, session: ClientSession | None = None
    ) -> bool:
        return self.updater.update_one_field(document, field, value, session=session)

    async def update_one_field_async(
        self, document: Any, field: str, value: Any, *, session: AsyncIOMotorClientSession | None = None
    ) -> bool:
        return await self.updater.update_one_field_async(document, field, value, session=session)

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
        return self.updater.update_one_field_where(
            document_type, filter, field, value, partition_key, session=session
        )

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
        return await self.updater.update_one_field_where_async(
            document_type, filter, field, value, partition_key, session=session
        )

    def update_many(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        update: Update,
        partition_key: str | None = None,
        *,
        session: ClientSession | None = None,
    ) -> int:
        return self.updater.update_many(document_type, filter, update, partition_key, session=session)

    async def update_many_async(
        self,
        document_type: type,
        filter: Mapping[str, Any],
        update: Update,
        partition_key: str | None = None,
        *,
        session: AsyncIOMotorClientSession | None = None,
    ) -> int:
        return await self.updater.update_many_async(
            document_type, filter, update, partition_key, session=session
        )

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
        return self.updater.update_many_field(document_type, filter, field, value, partition_key, session=session)

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
        return await self.updater.update_many_field_async(
            document_type, filter, field, value, partition_key, session=session
        )

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
        """Find-and-update: atomically update one match and return it."""
        return self.updater.get_and_update_one(
            document_type,
            filter,
            update,
            return_document=return_document,
            partition_key=partition_key,
            session=session,
        )

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
        return await self.updater.get_and_update_one_async(
            document_type,
            filter,
            update,
            return_document=return_document,
            partition_key=partition_key,
            session=session,
        )

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------

    def create_index(
        self, document_type: type, descriptor: IndexDescriptor, partition_key: str | None = None
    ) -> str:
        return self.index_handler.create_index(document_type, descriptor, partition_key)

    async def create_index_async(
        self, document_type: type, descriptor: IndexDescriptor, partition_key: str | None = None
    ) -> str:
        return await self.index_handler.create_index_async(document_type, descriptor, partition_key)

    def create_text_index(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return self.index_handler.create_text_index(document_type, field, options, partition_key)

    async def create_text_index_async(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return await self.index_handler.create_text_index_async(document_type, field, options, partition_key)

    def create_ascending_index(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return self.index_handler.create_ascending_index(document_type, field, options, partition_key)

    async def create_ascending_index_async(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return await self.index_handler.create_ascending_index_async(
            document_type, field, options, partition_key
        )

    def create_descending_index(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return self.index_handler.create_descending_index(document_type, field, options, partition_key)

    async def create_descending_index_async(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return await self.index_handler.create_descending_index_async(
            document_type, field, options, partition_key
        )

    def create_hashed_index(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return self.index_handler.create_hashed_index(document_type, field, options, partition_key)

    async def create_hashed_index_async(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return await self.index_handler.create_hashed_index_async(document_type, field, options, partition_key)

    def create_combined_text_index(
        self,
        document_type: type,
        fields: Sequence[str],
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return self.index_handler.create_combined_text_index(document_type, fields, options, partition_key)

    async def create_combined_text_index_async(
        self,
        document_type: type,
        fields: Sequence[str],
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return await self.index_handler.create_combined_text_index_async(
            document_type, fields, options, partition_key
        )

    def drop_index(self, document_type: type, index_name: str, partition_key: str | None = None) -> None:
        self.index_handler.drop_index(document_type, index_name, partition_key)

    async def drop_index_async(
        self, document_type: type, index_name: str, partition_key: str | None = None
    ) -> None:
        await self.index_handler.drop_index_async(document_type, index_name, partition_key)

    def get_index_names(self, document_type: type, partition_key: str | None = None) -> list[str]:
        return self.index_handler.get_index_names(document_type, partition_key)

    async def get_index_names_async(self, document_type: type, partition_key: str | None = None) -> list[str]:
        return await self.index_handler.get_index_names_async(document_type, partition_key)

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def drop_collection(self, document_type: type, partition_key: str | None = None) -> None:
        self.context.drop_collection(document_type, partition_key or None)

    async def drop_collection_async(self, document_type: type, partition_key: str | None = None) -> None:
        await self.context.drop_collection_async(document_type, partition_key or None)


__all__ = ["KeyTypedMongoRepository"]
