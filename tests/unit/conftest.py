"""Shared fixtures – fake pymongo/motor databases backed by mocks."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from mongo_repository.context import MongoDbContext


class FakeDatabase:
    """Hands out one mock collection per name, like ``Database.get_collection``."""

    def __init__(self, asynchronous: bool = False) -> None:
        self.asynchronous = asynchronous
        self.collections: dict[str, Any] = {}
        self.drop_collection = AsyncMock() if asynchronous else MagicMock()
        self.command = AsyncMock() if asynchronous else MagicMock()

    def get_collection(self, name: str) -> Any:
        if name not in self.collections:
            collection = AsyncMock() if self.asynchronous else MagicMock()
            collection.name = name
            self.collections[name] = collection
        return self.collections[name]


class AsyncCursor:
    """Async iterable standing in for motor's cursors."""

    def __init__(self, documents: list[Any]) -> None:
        self._documents = list(documents)

    def __aiter__(self) -> "AsyncCursor":
        self._iter = iter(self._documents)
        return self

    async def __anext__(self) -> Any:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


@pytest.fixture()
def sync_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture()
def async_db() -> FakeDatabase:
    return FakeDatabase(asynchronous=True)


@pytest.fixture()
def context(sync_db: FakeDatabase, async_db: FakeDatabase) -> MongoDbContext:
    return MongoDbContext(database=sync_db, async_database=async_db)  # type: ignore[arg-type]


@pytest.fixture()
def async_cursor() -> type[AsyncCursor]:
    return AsyncCursor
