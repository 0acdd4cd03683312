"""Unit tests for MongoDbIndexHandler."""

from __future__ import annotations

import asyncio
import dataclasses
from datetime import timedelta
from typing import Any
from unittest.mock import MagicMock

import pymongo
import pytest
from pymongo.errors import OperationFailure

from mongo_repository.context import MongoDbContext
from mongo_repository.data_access import MongoDbIndexHandler
from mongo_repository.kernel.errors import EmptyFieldSetError, IndexNotFoundError
from mongo_repository.models import (
    Document,
    IndexCreationOptions,
    IndexDescriptor,
    IndexKind,
    PartitionedDocument,
)


@dataclasses.dataclass(kw_only=True)
class Article(Document):
    title: str = ""
    body: str = ""


@dataclasses.dataclass(kw_only=True)
class TenantArticle(PartitionedDocument):
    title: str = ""


@pytest.fixture()
def handler(context: MongoDbContext) -> MongoDbIndexHandler:
    return MongoDbIndexHandler(context)


class TestCreate:
    def test_create_index_returns_name(self, handler: MongoDbIndexHandler, sync_db: Any) -> None:
        collection = sync_db.get_collection("articles")
        collection.create_index.return_value = "title_1"
        descriptor = IndexDescriptor.of("title", IndexKind.ASCENDING, IndexCreationOptions(unique=True))
        assert handler.create_index(Article, descriptor) == "title_1"
        collection.create_index.assert_called_once_with([("title", pymongo.ASCENDING)], unique=True)

    @pytest.mark.parametrize(
        ("method", "direction"),
        [
            ("create_text_index", pymongo.TEXT),
            ("create_ascending_index", pymongo.ASCENDING),
            ("create_descending_index", pymongo.DESCENDING),
            ("create_hashed_index", pymongo.HASHED),
        ],
    )
    def test_single_field_kinds(
        self, handler: MongoDbIndexHandler, sync_db: Any, method: str, direction: Any
    ) -> None:
        collection = sync_db.get_collection("articles")
        collection.create_index.return_value = "idx"
        assert getattr(handler, method)(Article, "title") == "idx"
        collection.create_index.assert_called_once_with([("title", direction)])

    def test_options_are_forwarded(self, handler: MongoDbIndexHandler, sync_db: Any) -> None:
        collection = sync_db.get_collection("articles")
        options = IndexCreationOptions(name="ttl", expire_after=timedelta(hours=1), sparse=True)
        handler.create_ascending_index(Article, "added_at_utc", options)
        assert collection.create_index.call_args.kwargs == {
            "name": "ttl",
            "expireAfterSeconds": 3600,
            "sparse": True,
        }

    def test_partitioned_collection(self, handler: MongoDbIndexHandler, sync_db: Any) -> None:
        sync_db.get_collection("t-tenantArticles").create_index.return_value = "title_1"
        assert handler.create_ascending_index(TenantArticle, "title", partition_key="t") == "title_1"

    def test_combined_text_index(self, handler: MongoDbIndexHandler, sync_db: Any) -> None:
        collection = sync_db.get_collection("articles")
        collection.create_index.return_value = "title_text_body_text"
        assert handler.create_combined_text_index(Article, ["title", "body"]) == "title_text_body_text"
        collection.create_index.assert_called_once_with(
            [("title", pymongo.TEXT), ("body", pymongo.TEXT)]
        )

    def test_combined_text_index_without_fields(self, handler: MongoDbIndexHandler, sync_db: Any) -> None:
        with pytest.raises(EmptyFieldSetError):
            handler.create_combined_text_index(Article, [])
        assert sync_db.collections == {}

    def test_combined_text_index_without_fields_async(
        self, handler: MongoDbIndexHandler, async_db: Any
    ) -> None:
        with pytest.raises(EmptyFieldSetError):
            asyncio.run(handler.create_combined_text_index_async(Article, []))
        assert async_db.collections == {}

    def test_async(self, handler: MongoDbIndexHandler, async_db: Any) -> None:
        collection = async_db.get_collection("articles")
        collection.create_index.return_value = "title_-1"
        assert asyncio.run(handler.create_descending_index_async(Article, "title")) == "title_-1"
        collection.create_index.assert_awaited_once_with([("title", pymongo.DESCENDING)])


class TestDrop:
    def test_drop_existing(self, handler: MongoDbIndexHandler, sync_db: Any) -> None:
        collection = sync_db.get_collection("articles")
        handler.drop_index(Article, "title_1")
        collection.drop_index.assert_called_once_with("title_1")

    def test_drop_missing_index(self, handler: MongoDbIndexHandler, sync_db: Any) -> None:
        failure = OperationFailure("index not found with name [nonexistent]", code=27)
        sync_db.get_collection("articles").drop_index.side_effect = failure
        with pytest.raises(IndexNotFoundError) as info:
            handler.drop_index(Article, "nonexistent")
        assert info.value.index_name == "nonexistent"
        assert info.value.collection == "articles"
        assert info.value.__cause__ is failure

    def test_other_failures_propagate(self, handler: MongoDbIndexHandler, sync_db: Any) -> None:
        failure = OperationFailure("cannot drop _id index", code=72)
        sync_db.get_collection("articles").drop_index.side_effect = failure
        with pytest.raises(OperationFailure):
            handler.drop_index(Article, "_id_")

    def test_drop_missing_index_async(self, handler: MongoDbIndexHandler, async_db: Any) -> None:
        async_db.get_collection("articles").drop_index.side_effect = OperationFailure(
            "index not found with name [x]", code=27
        )
        with pytest.raises(IndexNotFoundError):
            asyncio.run(handler.drop_index_async(Article, "x"))


class TestList:
    def test_names_in_store_order(self, handler: MongoDbIndexHandler, sync_db: Any) -> None:
        sync_db.get_collection("articles").list_indexes.return_value = iter(
            [{"name": "_id_"}, {"name": "title_1"}, {"name": "body_text"}]
        )
        assert handler.get_index_names(Article) == ["_id_", "title_1", "body_text"]

    def test_names_async(self, handler: MongoDbIndexHandler, async_db: Any, async_cursor: type) -> None:
        collection = async_db.get_collection("articles")
        collection.list_indexes = MagicMock(return_value=async_cursor([{"name": "_id_"}]))
        assert asyncio.run(handler.get_index_names_async(Article)) == ["_id_"]
