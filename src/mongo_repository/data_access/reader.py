"""MongoDbReader – read-only queries, projections, grouping and pagination."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from motor.motor_asyncio import AsyncIOMotorCursor
from pymongo.cursor import Cursor

from mongo_repository.data_access.base import DataAccessBase, normalize_filter, store_errors
from mongo_repository.models.codec import ID_FIELD, field_path, from_bson
from mongo_repository.models.pagination import Page, PageRequest

T = TypeVar("T")

Filter = Mapping[str, Any] | None
Projection = Mapping[str, Any] | Sequence[str]

DEFAULT_PAGE_SIZE = 50


class MongoDbReader(DataAccessBase):
    """Queries over one resolved collection.

    A ``filter`` of ``None`` matches every document.  Documents read from a
    partitioned collection get their ``partition_key`` attribute restored.
    """

    # ------------------------------------------------------------------
    # Single documents
    # ------------------------------------------------------------------

    def get_by_id(self, document_type: type[T], id: Any, partition_key: str | None = None) -> T | None:
        return self.get_one(document_type, {ID_FIELD: id}, partition_key)

    async def get_by_id_async(
        self, document_type: type[T], id: Any, partition_key: str | None = None
    ) -> T | None:
        return await self.get_one_async(document_type, {ID_FIELD: id}, partition_key)

    def get_one(self, document_type: type[T], filter: Filter = None, partition_key: str | None = None) -> T | None:
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            raw = collection.find_one(_query(filter))
        return self.decode(document_type, raw, partition_key)

    async def get_one_async(
        self, document_type: type[T], filter: Filter = None, partition_key: str | None = None
    ) -> T | None:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            raw = await collection.find_one(_query(filter))
        return self.decode(document_type, raw, partition_key)

    def get_cursor(self, document_type: type, filter: Filter = None, partition_key: str | None = None) -> Cursor:
        """Return the raw driver cursor; documents are yielded as stored dicts.

        The cursor is lazy and talks to the server while it is iterated, after
        this call has returned.  Failures during iteration are therefore raised
        as pymongo exceptions.  Iterate inside :func:`store_errors` to get the
        translated errors instead.
        """
        return self.get_collection(document_type, partition_key).find(_query(filter))

    def get_async_cursor(
        self, document_type: type, filter: Filter = None, partition_key: str | None = None
    ) -> AsyncIOMotorCursor:
        """Motor counterpart of :meth:`get_cursor`, with the same error behaviour."""
        return self.get_async_collection(document_type, partition_key).find(_query(filter))

    def any(self, document_type: type, filter: Filter = None, partition_key: str | None = None) -> bool:
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            return collection.count_documents(_query(filter), limit=1) > 0

    async def any_async(self, document_type: type, filter: Filter = None, partition_key: str | None = None) -> bool:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            return await collection.count_documents(_query(filter), limit=1) > 0

    # ------------------------------------------------------------------
    # Many documents
    # ------------------------------------------------------------------

    def get_all(self, document_type: type[T], filter: Filter = None, partition_key: str | None = None) -> list[T]:
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            return [self.decode(document_type, raw, partition_key) for raw in collection.find(_query(filter))]

    async def get_all_async(
        self, document_type: type[T], filter: Filter = None, partition_key: str | None = None
    ) -> list[T]:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            return [
                self.decode(document_type, raw, partition_key)
                async for raw in collection.find(_query(filter))
            ]

    def count(self, document_type: type, filter: Filter = None, partition_key: str | None = None) -> int:
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            return collection.count_documents(_query(filter))

    async def count_async(self, document_type: type, filter: Filter = None, partition_key: str | None = None) -> int:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            return await collection.count_documents(_query(filter))

    # ------------------------------------------------------------------
    # Min / max / sum
    # ------------------------------------------------------------------

    def get_by_max(
        self, document_type: type[T], field: str, filter: Filter = None, partition_key: str | None = None
    ) -> T | None:
        """Return the matching document with the greatest *field* value."""
        return self._get_sorted_one(document_type, field, -1, filter, partition_key)

    async def get_by_max_async(
        self, document_type: type[T], field: str, filter: Filter = None, partition_key: str | None = None
    ) -> T | None:
        return await self._get_sorted_one_async(document_type, field, -1, filter, partition_key)

    def get_by_min(
        self, document_type: type[T], field: str, filter: Filter = None, partition_key: str | None = None
    ) -> T | None:
        return self._get_sorted_one(document_type, field, 1, filter, partition_key)

    async def get_by_min_async(
        self, document_type: type[T], field: str, filter: Filter = None, partition_key: str | None = None
    ) -> T | None:
        return await self._get_sorted_one_async(document_type, field, 1, filter, partition_key)

    def get_max_value(
        self, document_type: type, field: str, filter: Filter = None, partition_key: str | None = None
    ) -> Any:
        """Return the greatest *field* value among matches, ``None`` when nothing matches."""
        return self._get_extreme_value(document_type, field, -1, filter, partition_key)

    async def get_max_value_async(
        self, document_type: type, field: str, filter: Filter = None, partition_key: str | None = None
    ) -> Any:
        return await self._get_extreme_value_async(document_type, field, -1, filter, partition_key)

    def get_min_value(
        self, document_type: type, field: str, filter: Filter = None, partition_key: str | None = None
    ) -> Any:
        return self._get_extreme_value(document_type, field, 1, filter, partition_key)

    async def get_min_value_async(
        self, document_type: type, field: str, filter: Filter = None, partition_key: str | None = None
    ) -> Any:
        return await self._get_extreme_value_async(document_type, field, 1, filter, partition_key)

    def sum_by(
        self, document_type: type, field: str, filter: Filter = None, partition_key: str | None = None
    ) -> int | float:
        """Sum *field* over the matching documents (0 when nothing matches)."""
        rows = self.aggregate(document_type, _sum_pipeline(field, filter), partition_key)
        return rows[0]["total"] if rows else 0

    async def sum_by_async(
        self, document_type: type, field: str, filter: Filter = None, partition_key: str | None = None
    ) -> int | float:
        rows = await self.aggregate_async(document_type, _sum_pipeline(field, filter), partition_key)
        return rows[0]["total"] if rows else 0

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def project_one(
        self,
        document_type: type,
        filter: Filter,
        projection: Projection,
        partition_key: str | None = None,
        projection_type: type[T] | None = None,
    ) -> T | dict[str, Any] | None:
        """Return the projected fields of the first match.

        With *projection_type* (a dataclass) the projection is decoded into it;
        otherwise the stored dict is returned.
        """
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            raw = collection.find_one(_query(filter), _projection(projection))
        return _project(raw, projection_type)

    async def project_one_async(
        self,
        document_type: type,
        filter: Filter,
        projection: Projection,
        partition_key: str | None = None,
        projection_type: type[T] | None = None,
    ) -> T | dict[str, Any] | None:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            raw = await collection.find_one(_query(filter), _projection(projection))
        return _project(raw, projection_type)

    def project_many(
        self,
        document_type: type,
        filter: Filter,
        projection: Projection,
        partition_key: str | None = None,
        projection_type: type[T] | None = None,
    ) -> list[Any]:
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            cursor = collection.find(_query(filter), _projection(projection))
            return [_project(raw, projection_type) for raw in cursor]

    async def project_many_async(
        self,
        document_type: type,
        filter: Filter,
        projection: Projection,
        partition_key: str | None = None,
        projection_type: type[T] | None = None,
    ) -> list[Any]:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            cursor = collection.find(_query(filter), _projection(projection))
            return [_project(raw, projection_type) async for raw in cursor]

    # ------------------------------------------------------------------
    # Grouping and aggregation
    # ------------------------------------------------------------------

    def group_by(
        self,
        document_type: type,
        group_key: str,
        accumulators: Mapping[str, Any],
        filter: Filter = None,
        partition_key: str | None = None,
    ) -> list[dict[str, Any]]:
        """Group matches by *group_key*.

        *accumulators* are ``$group`` accumulator expressions, e.g.
        ``{"total": {"$sum": "$amount"}}``.  Each row holds the group value
        under ``_id`` plus one key per accumulator.
        """
        return self.aggregate(document_type, _group_pipeline(group_key, accumulators, filter), partition_key)

    async def group_by_async(
        self,
        document_type: type,
        group_key: str,
        accumulators: Mapping[str, Any],
        filter: Filter = None,
        partition_key: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self.aggregate_async(
            document_type, _group_pipeline(group_key, accumulators, filter), partition_key
        )

    def aggregate(
        self, document_type: type, pipeline: Sequence[Mapping[str, Any]], partition_key: str | None = None
    ) -> list[dict[str, Any]]:
        """Run a raw aggregation pipeline and return the resulting rows."""
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            rows = list(collection.aggregate(list(pipeline)))
        self._log.debug("aggregate", collection=collection.name, stages=len(pipeline), rows=len(rows))
        return rows

    async def aggregate_async(
        self, document_type: type, pipeline: Sequence[Mapping[str, Any]], partition_key: str | None = None
    ) -> list[dict[str, Any]]:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            rows = [row async for row in collection.aggregate(list(pipeline))]
        self._log.debug("aggregate", collection=collection.name, stages=len(pipeline), rows=len(rows))
        return rows

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def get_paginated(
        self,
        document_type: type[T],
        filter: Filter = None,
        skip: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        partition_key: str | None = None,
    ) -> list[T]:
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            cursor = collection.find(_query(filter), skip=skip, limit=limit)
            return [self.decode(document_type, raw, partition_key) for raw in cursor]

    async def get_paginated_async(
        self,
        document_type: type[T],
        filter: Filter = None,
        skip: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        partition_key: str | None = None,
    ) -> list[T]:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            cursor = collection.find(_query(filter), skip=skip, limit=limit)
            return [self.decode(document_type, raw, partition_key) async for raw in cursor]

    def get_sorted_paginated(
        self,
        document_type: type[T],
        sort_field: str,
        filter: Filter = None,
        ascending: bool = True,
        skip: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        partition_key: str | None = None,
    ) -> list[T]:
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            cursor = collection.find(
                _query(filter), sort=_sort(sort_field, ascending), skip=skip, limit=limit
            )
            return [self.decode(document_type, raw, partition_key) for raw in cursor]

    async def get_sorted_paginated_async(
        self,
        document_type: type[T],
        sort_field: str,
        filter: Filter = None,
        ascending: bool = True,
        skip: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        partition_key: str | None = None,
    ) -> list[T]:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            cursor = collection.find(
                _query(filter), sort=_sort(sort_field, ascending), skip=skip, limit=limit
            )
            return [self.decode(document_type, raw, partition_key) async for raw in cursor]

    def get_page(
        self,
        document_type: type[T],
        request: PageRequest,
        filter: Filter = None,
        partition_key: str | None = None,
    ) -> Page[T]:
        """Return one :class:`Page` of matches together with the total count."""
        query = _query(filter)
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            total = collection.count_documents(query)
            cursor = collection.find(query, **request.find_options())
            items = [self.decode(document_type, raw, partition_key) for raw in cursor]
        return Page.from_request(items, total, request)

    async def get_page_async(
        self,
        document_type: type[T],
        request: PageRequest,
        filter: Filter = None,
        partition_key: str | None = None,
    ) -> Page[T]:
        query = _query(filter)
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            total = await collection.count_documents(query)
            cursor = collection.find(query, **request.find_options())
            items = [self.decode(document_type, raw, partition_key) async for raw in cursor]
        return Page.from_request(items, total, request)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_sorted_one(
        self, document_type: type[T], field: str, direction: int, filter: Filter, partition_key: str | None
    ) -> T | None:
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            raw = collection.find_one(_query(filter), sort=[(field_path(field), direction)])
        return self.decode(document_type, raw, partition_key)

    async def _get_sorted_one_async(
        self, document_type: type[T], field: str, direction: int, filter: Filter, partition_key: str | None
    ) -> T | None:
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            raw = await collection.find_one(_query(filter), sort=[(field_path(field), direction)])
        return self.decode(document_type, raw, partition_key)

    def _get_extreme_value(
        self, document_type: type, field: str, direction: int, filter: Filter, partition_key: str | None
    ) -> Any:
        path = field_path(field)
        collection = self.get_collection(document_type, partition_key)
        with store_errors(collection.name):
            raw = collection.find_one(_query(filter), {path: 1}, sort=[(path, direction)])
        return _value_at(raw, path)

    async def _get_extreme_value_async(
        self, document_type: type, field: str, direction: int, filter: Filter, partition_key: str | None
    ) -> Any:
        path = field_path(field)
        collection = self.get_async_collection(document_type, partition_key)
        with store_errors(collection.name):
            raw = await collection.find_one(_query(filter), {path: 1}, sort=[(path, direction)])
        return _value_at(raw, path)


def _query(filter: Filter) -> dict[str, Any]:
    return normalize_filter(filter) if filter else {}


def _sort(field: str, ascending: bool) -> list[tuple[str, int]]:
    return [(field_path(field), 1 if ascending else -1)]


def _projection(projection: Projection) -> dict[str, Any]:
    if isinstance(projection, Mapping):
        return {field_path(k): v for k, v in projection.items()}
    return {field_path(name): 1 for name in projection}


def _project(raw: Mapping[str, Any] | None, projection_type: type | None) -> Any:
    if raw is None or projection_type is None or not dataclasses.is_dataclass(projection_type):
        return raw
    return from_bson(projection_type, raw)


def _value_at(raw: Mapping[str, Any] | None, path: str) -> Any:
    value: Any = raw
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def _sum_pipeline(field: str, filter: Filter) -> list[dict[str, Any]]:
    return [
        {"$match": _query(filter)},
        {"$group": {"_id": None, "total": {"$sum": f"${field_path(field)}"}}},
    ]


def _group_pipeline(group_key: str, accumulators: Mapping[str, Any], filter: Filter) -> list[dict[str, Any]]:
    return [
        {"$match": _query(filter)},
        {"$group": {"_id": f"${field_path(group_key)}", **accumulators}},
    ]


__all__ = ["DEFAULT_PAGE_SIZE", "MongoDbReader"]
