"""KeyTypedReadOnlyMongoRepository – the query-only repository facade."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from motor.motor_asyncio import AsyncIOMotorCursor
from pymongo.cursor import Cursor

from mongo_repository.config.settings import MongoSettings
from mongo_repository.context import MongoDbContext
from mongo_repository.data_access import MongoDbReader
from mongo_repository.data_access.reader import DEFAULT_PAGE_SIZE, Projection
from mongo_repository.kernel.types import IdGenerator
from mongo_repository.models.pagination import Page, PageRequest
from mongo_repository.repository.lazy import LazyComponent

TKey = TypeVar("TKey")
T = TypeVar("T")


class KeyTypedReadOnlyMongoRepository(Generic[TKey]):
    """Read access to documents whose ``id`` is of type ``TKey``.

    Exposes the queries, projections, aggregations and pagination of
    :class:`KeyTypedMongoRepository` and nothing that writes.  Hand it to code
    that must not modify the store.

    Usage::

        reports = KeyTypedReadOnlyMongoRepository[int](MongoDbContext(url, "shop"), int)
        reports.count(Invoice, {"paid": False})
    """

    reader: LazyComponent[MongoDbReader] = LazyComponent(
        lambda repo: MongoDbReader(repo.context, repo.id_generator)
    )

    def __init__(
        self,
        context: MongoDbContext,
        key_type: type[TKey],
        *,
        id_generator: IdGenerator | None = None,
    ) -> None:
        self.context = context
        self.key_type = key_type
        self.id_generator = id_generator or IdGenerator.default()

    @classmethod
    def from_connection_string(cls, connection_string: str, database_name: str, **kwargs: Any) -> Any:
        return cls(MongoDbContext(connection_string, database_name), **kwargs)

    @classmethod
    def from_settings(cls, settings: MongoSettings, **kwargs: Any) -> Any:
        return cls(MongoDbContext.from_settings(settings), **kwargs)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, document_type: type[T], id: TKey, partition_key: str | None = None) -> T | None:
        return self.reader.get_by_id(document_type, id, partition_key)

    async def get_by_id_async(
        self, document_type: type[T], id: TKey, partition_key: str | None = None
    ) -> T | None:
        return await self.reader.get_by_id_async(document_type, id, partition_key)

    def get_one(
        self, document_type: type[T], filter: Mapping[str, Any] | None = None, partition_key: str | None = None
    ) -> T | None:
        return self.reader.get_one(document_type, filter, partition_key)

    async def get_one_async(
        self, document_type: type[T], filter: Mapping[str, Any] | None = None, partition_key: str | None = None
    ) -> T | None:
        return await self.reader.get_one_async(document_type, filter, partition_key)

    def get_cursor(
        self, document_type: type, filter: Mapping[str, Any] | None = None, partition_key: str | None = None
    ) -> Cursor:
        return self.reader.get_cursor(document_type, filter, partition_key)

    def get_async_cursor(
        self, document_type: type, filter: Mapping[str, Any] | None = None, partition_key: str | None = None
    ) -> AsyncIOMotorCursor:
        return self.reader.get_async_cursor(document_type, filter, partition_key)

    def any(
        self, document_type: type, filter: Mapping[str, Any] | None = None, partition_key: str | None = None
    ) -> bool:
        return self.reader.any(document_type, filter, partition_key)

    async def any_async(
        self, document_type: type, filter: Mapping[str, Any] | None = None, partition_key: str | None = None
    ) -> bool:
        return await self.reader.any_async(document_type, filter, partition_key)

    def get_all(
        self, document_type: type[T], filter: Mapping[str, Any] | None = None, partition_key: str | None = None
    ) -> list[T]:
        return self.reader.get_all(document_type, filter, partition_key)

    async def get_all_async(
        self, document_type: type[T], filter: Mapping[str, Any] | None = None, partition_key: str | None = None
    ) -> list[T]:
        return await self.reader.get_all_async(document_type, filter, partition_key)

    def count(
        self, document_type: type, filter: Mapping[str, Any] | None = None, partition_key: str | None = None
    ) -> int:
        return self.reader.count(document_type, filter, partition_key)

    async def count_async(
        self, document_type: type, filter: Mapping[str, Any] | None = None, partition_key: str | None = None
    ) -> int:
        return await self.reader.count_async(document_type, filter, partition_key)

    def get_by_max(
        self,
        document_type: type[T],
        field: str,
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> T | None:
        return self.reader.get_by_max(document_type, field, filter, partition_key)

    async def get_by_max_async(
        self,
        document_type: type[T],
        field: str,
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> T | None:
        return await self.reader.get_by_max_async(document_type, field, filter, partition_key)

    def get_by_min(
        self,
        document_type: type[T],
        field: str,
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> T | None:
        return self.reader.get_by_min(document_type, field, filter, partition_key)

    async def get_by_min_async(
        self,
        document_type: type[T],
        field: str,
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> T | None:
        return await self.reader.get_by_min_async(document_type, field, filter, partition_key)

    def get_max_value(
        self,
        document_type: type,
        field: str,
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> Any:
        return self.reader.get_max_value(document_type, field, filter, partition_key)

    async def get_max_value_async(
        self,
        document_type: type,
        field: str,
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> Any:
        return await self.reader.get_max_value_async(document_type, field, filter, partition_key)

    def get_min_value(
        self,
        document_type: type,
        field: str,
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> Any:
        return self.reader.get_min_value(document_type, field, filter, partition_key)

    async def get_min_value_async(
        self,
        document_type: type,
        field: str,
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> Any:
        return await self.reader.get_min_value_async(document_type, field, filter, partition_key)

    def sum_by(
        self,
        document_type: type,
        field: str,
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> int | float:
        return self.reader.sum_by(document_type, field, filter, partition_key)

    async def sum_by_async(
        self,
        document_type: type,
        field: str,
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> int | float:
        return await self.reader.sum_by_async(document_type, field, filter, partition_key)

    def project_one(
        self,
        document_type: type,
        filter: Mapping[str, Any] | None,
        projection: Projection,
        partition_key: str | None = None,
        projection_type: type | None = None,
    ) -> Any:
        return self.reader.project_one(document_type, filter, projection, partition_key, projection_type)

    async def project_one_async(
        self,
        document_type: type,
        filter: Mapping[str, Any] | None,
        projection: Projection,
        partition_key: str | None = None,
        projection_type: type | None = None,
    ) -> Any:
        return await self.reader.project_one_async(
            document_type, filter, projection, partition_key, projection_type
        )

    def project_many(
        self,
        document_type: type,
        filter: Mapping[str, Any] | None,
        projection: Projection,
        partition_key: str | None = None,
        projection_type: type | None = None,
    ) -> list[Any]:
        return self.reader.project_many(document_type, filter, projection, partition_key, projection_type)

    async def project_many_async(
        self,
        document_type: type,
        filter: Mapping[str, Any] | None,
        projection: Projection,
        partition_key: str | None = None,
        projection_type: type | None = None,
    ) -> list[Any]:
        return await self.reader.project_many_async(
            document_type, filter, projection, partition_key, projection_type
        )

    def group_by(
        self,
        document_type: type,
        group_key: str,
        accumulators: Mapping[str, Any],
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> list[dict[str, Any]]:
        return self.reader.group_by(document_type, group_key, accumulators, filter, partition_key)

    async def group_by_async(
        self,
        document_type: type,
        group_key: str,
        accumulators: Mapping[str, Any],
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self.reader.group_by_async(document_type, group_key, accumulators, filter, partition_key)

    def aggregate(
        self, document_type: type, pipeline: Sequence[Mapping[str, Any]], partition_key: str | None = None
    ) -> list[dict[str, Any]]:
        return self.reader.aggregate(document_type, pipeline, partition_key)

    async def aggregate_async(
        self, document_type: type, pipeline: Sequence[Mapping[str, Any]], partition_key: str | None = None
    ) -> list[dict[str, Any]]:
        return await self.reader.aggregate_async(document_type, pipeline, partition_key)

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def get_paginated(
        self,
        document_type: type[T],
        filter: Mapping[str, Any] | None = None,
        skip: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        partition_key: str | None = None,
    ) -> list[T]:
        return self.reader.get_paginated(document_type, filter, skip, limit, partition_key)

    async def get_paginated_async(
        self,
        document_type: type[T],
        filter: Mapping[str, Any] | None = None,
        skip: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        partition_key: str | None = None,
    ) -> list[T]:
        return await self.reader.get_paginated_async(document_type, filter, skip, limit, partition_key)

    def get_sorted_paginated(
        self,
        document_type: type[T],
        sort_field: str,
        filter: Mapping[str, Any] | None = None,
        ascending: bool = True,
        skip: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        partition_key: str | None = None,
    ) -> list[T]:
        return self.reader.get_sorted_paginated(
            document_type, sort_field, filter, ascending, skip, limit, partition_key
        )

    async def get_sorted_paginated_async(
        self,
        document_type: type[T],
        sort_field: str,
        filter: Mapping[str, Any] | None = None,
        ascending: bool = True,
        skip: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        partition_key: str | None = None,
    ) -> list[T]:
        return await self.reader.get_sorted_paginated_async(
            document_type, sort_field, filter, ascending, skip, limit, partition_key
        )

    def get_page(
        self,
        document_type: type[T],
        request: PageRequest,
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> Page[T]:
        return self.reader.get_page(document_type, request, filter, partition_key)

    async def get_page_async(
        self,
        document_type: type[T],
        request: PageRequest,
        filter: Mapping[str, Any] | None = None,
        partition_key: str | None = None,
    ) -> Page[T]:
        return await self.reader.get_page_async(document_type, request, filter, partition_key)


__all__ = ["KeyTypedReadOnlyMongoRepository"]
