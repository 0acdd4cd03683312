"""MongoDbContext – owns the live clients and hands out collection handles."""

from __future__ import annotations

from typing import Any

import pymongo
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure

from mongo_repository.config.settings import MongoSettings
from mongo_repository.context.naming import resolve_collection_name
from mongo_repository.kernel.errors import ConnectionError
from mongo_repository.observability.logging import get_logger

_log = get_logger(__name__)


class MongoDbContext:
    """The database context shared by every repository component.

    Holds a synchronous (pymongo) and an asynchronous (motor) handle on the
    same database.  Collection handles are looked up, never cached: the
    drivers already make ``get_collection`` cheap.

    Usage::

        ctx = MongoDbContext("mongodb://localhost:27017", "shop")
        orders = ctx.get_collection(Order, partition_key="tenantA")
        async_orders = ctx.get_async_collection(Order)

    Clients built here use ``uuidRepresentation="standard"`` so ``uuid.UUID``
    identifiers are stored as BSON binary subtype 4, and ``tz_aware=True`` so
    datetimes come back timezone-aware.
    """

    def __init__(
        self,
        connection_string: str | None = None,
        database_name: str | None = None,
        *,
        database: Database | None = None,
        async_database: AsyncIOMotorDatabase | None = None,
        **client_options: Any,
    ) -> None:
        if database is None and async_database is None:
            if not connection_string or not database_name:
                raise ValueError("connection_string and database_name are required")
            options: dict[str, Any] = {"uuidRepresentation": "standard", "tz_aware": True}
            options.update(client_options)
            database = pymongo.MongoClient(connection_string, **options)[database_name]
            async_database = AsyncIOMotorClient(connection_string, **options)[database_name]
            _log.info("mongo_context_created", database=database_name)
        self._database = database
        self._async_database = async_database

    @classmethod
    def from_settings(cls, settings: MongoSettings) -> "MongoDbContext":
        return cls(settings.connection_string, settings.database_name, **settings.client_options())

    @property
    def database(self) -> Database:
        if self._database is None:
            raise RuntimeError("MongoDbContext has no synchronous database")
        return self._database

    @property
    def async_database(self) -> AsyncIOMotorDatabase:
        if self._async_database is None:
            raise RuntimeError("MongoDbContext has no asynchronous database")
        return self._async_database

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def get_collection(self, document_type: type, partition_key: str | None = None) -> Collection:
        """Return the synchronous handle for ``(document_type, partition_key)``."""
        return self.database.get_collection(resolve_collection_name(document_type, partition_key))

    def get_async_collection(
        self, document_type: type, partition_key: str | None = None
    ) -> AsyncIOMotorCollection:
        """Return the asyncio handle for ``(document_type, partition_key)``."""
        return self.async_database.get_collection(
            resolve_collection_name(document_type, partition_key)
        )

    def drop_collection(self, document_type: type, partition_key: str | None = None) -> None:
        """Drop a collection, use very carefully."""
        name = resolve_collection_name(document_type, partition_key)
        self.database.drop_collection(name)
        _log.info("collection_dropped", collection=name)

    async def drop_collection_async(
        self, document_type: type, partition_key: str | None = None
    ) -> None:
        name = resolve_collection_name(document_type, partition_key)
        await self.async_database.drop_collection(name)
        _log.info("collection_dropped", collection=name)

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def ping(self) -> None:
        """Round-trip to the server; raise :class:`ConnectionError` when unreachable."""
        try:
            self.database.command("ping")
        except ConnectionFailure as exc:
            raise ConnectionError("mongodb", str(exc), cause=exc) from exc

    async def ping_async(self) -> None:
        try:
            await self.async_database.command("ping")
        except ConnectionFailure as exc:
            raise ConnectionError("mongodb", str(exc), cause=exc) from exc

    def close(self) -> None:
        """Close both clients."""
        if self._database is not None:
            self._database.client.close()
        if self._async_database is not None:
            self._async_database.client.close()


__all__ = ["MongoDbContext"]
