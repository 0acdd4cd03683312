"""MongoDbIndexHandler – creates, drops and lists indexes."""

from __future__ import annotations

from collections.abc import Sequence

from pymongo.errors import OperationFailure

from mongo_repository.data_access.base import DataAccessBase, store_errors
from mongo_repository.kernel.errors import EmptyFieldSetError, IndexNotFoundError
from mongo_repository.models.index import IndexCreationOptions, IndexDescriptor, IndexKind

INDEX_NOT_FOUND = 27


def _is_index_not_found(exc: OperationFailure) -> bool:
    return exc.code == INDEX_NOT_FOUND or "index not found" in str(exc).lower()


class MongoDbIndexHandler(DataAccessBase):
    """Index administration against the collection of a document type.

    Every ``create_*`` method returns the name of the index.  Creating an
    index that already exists with the same definition is a no-op on the
    store side and returns the same name.
    """

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_index(
        self, document_type: type, descriptor: IndexDescriptor, partition_key: str | None = None
    ) -> str:
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            name = collection.create_index(descriptor.keys(), **descriptor.create_kwargs())
        self._log.info("index_created", collection=collection.name, index=name, kind=descriptor.kind.value)
        return name

    async def create_index_async(
        self, document_type: type, descriptor: IndexDescriptor, partition_key: str | None = None
    ) -> str:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            name = await collection.create_index(descriptor.keys(), **descriptor.create_kwargs())
        self._log.info("index_created", collection=collection.name, index=name, kind=descriptor.kind.value)
        return name

    def create_text_index(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return self.create_index(document_type, IndexDescriptor.of(field, IndexKind.TEXT, options), partition_key)

    async def create_text_index_async(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return await self.create_index_async(
            document_type, IndexDescriptor.of(field, IndexKind.TEXT, options), partition_key
        )

    def create_ascending_index(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return self.create_index(document_type, IndexDescriptor.of(field, IndexKind.ASCENDING, options), partition_key)

    async def create_ascending_index_async(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return await self.create_index_async(
            document_type, IndexDescriptor.of(field, IndexKind.ASCENDING, options), partition_key
        )

    def create_descending_index(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return self.create_index(document_type, IndexDescriptor.of(field, IndexKind.DESCENDING, options), partition_key)

    async def create_descending_index_async(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return await self.create_index_async(
            document_type, IndexDescriptor.of(field, IndexKind.DESCENDING, options), partition_key
        )

    def create_hashed_index(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return self.create_index(document_type, IndexDescriptor.of(field, IndexKind.HASHED, options), partition_key)

    async def create_hashed_index_async(
        self,
        document_type: type,
        field: str,
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return await self.create_index_async(
            document_type, IndexDescriptor.of(field, IndexKind.HASHED, options), partition_key
        )

    def create_combined_text_index(
        self,
        document_type: type,
        fields: Sequence[str],
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        """One text index spanning every field in *fields*.

        Raises :class:`EmptyFieldSetError` before touching the store when
        *fields* is empty.
        """
        return self.create_index(document_type, _combined(fields, options), partition_key)

    async def create_combined_text_index_async(
        self,
        document_type: type,
        fields: Sequence[str],
        options: IndexCreationOptions | None = None,
        partition_key: str | None = None,
    ) -> str:
        return await self.create_index_async(document_type, _combined(fields, options), partition_key)

    # ------------------------------------------------------------------
    # Drop / list
    # ------------------------------------------------------------------

    def drop_index(self, document_type: type, index_name: str, partition_key: str | None = None) -> None:
        """Drop *index_name*; raise :class:`IndexNotFoundError` when it does not exist."""
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            try:
                collection.drop_index(index_name)
            except OperationFailure as exc:
                if not _is_index_not_found(exc):
                    raise
                self._log.warning("index_not_found", collection=collection.name, index=index_name)
                raise IndexNotFoundError(index_name, collection.name, cause=exc) from exc
        self._log.info("index_dropped", collection=collection.name, index=index_name)

    async def drop_index_async(
        self, document_type: type, index_name: str, partition_key: str | None = None
    ) -> None:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            try:
                await collection.drop_index(index_name)
            except OperationFailure as exc:
                if not _is_index_not_found(exc):
                    raise
                self._log.warning("index_not_found", collection=collection.name, index=index_name)
                raise IndexNotFoundError(index_name, collection.name, cause=exc) from exc
        self._log.info("index_dropped", collection=collection.name, index=index_name)

    def get_index_names(self, document_type: type, partition_key: str | None = None) -> list[str]:
        """Index names in the order the store reports them."""
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            return [index["name"] for index in collection.list_indexes()]

    async def get_index_names_async(self, document_type: type, partition_key: str | None = None) -> list[str]:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            return [index["name"] async for index in collection.list_indexes()]


def _combined(fields: Sequence[str], options: IndexCreationOptions | None) -> IndexDescriptor:
    if not fields:
        raise EmptyFieldSetError("A combined text index needs at least one field")
    return IndexDescriptor.of(list(fields), IndexKind.COMBINED_TEXT, options)


__all__ = ["MongoDbIndexHandler"]
