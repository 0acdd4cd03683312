"""Unit tests for the repository facades."""

from __future__ import annotations

import asyncio
import dataclasses
import uuid
from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId

from mongo_repository.config.settings import MongoSettings
from mongo_repository.context import MongoDbContext
from mongo_repository.data_access import MongoDbCreator, MongoDbReader, MongoDbUpdater
from mongo_repository.kernel.errors import UnsupportedIdentifierTypeError
from mongo_repository.models import Document, KeyedDocument, PartitionedDocument
from mongo_repository.repository import (
    DEFAULT_KEY_TYPE,
    BaseMongoRepository,
    KeyTypedMongoRepository,
    KeyTypedReadOnlyMongoRepository,
    ReadOnlyMongoRepository,
)


@dataclasses.dataclass(kw_only=True)
class Order(Document):
    name: str = ""


@dataclasses.dataclass(kw_only=True)
class TenantOrder(PartitionedDocument):
    name: str = ""


@dataclasses.dataclass(kw_only=True)
class Invoice(KeyedDocument[int]):
    number: str = ""


@dataclasses.dataclass(kw_only=True)
class Ticket(KeyedDocument[ObjectId]):
    subject: str = ""


@dataclasses.dataclass(kw_only=True)
class Decimalish(KeyedDocument[float]):
    pass


class TestDualSurface:
    def test_default_key_type_is_uuid(self, context: MongoDbContext) -> None:
        assert DEFAULT_KEY_TYPE is uuid.UUID
        assert BaseMongoRepository(context).key_type is uuid.UUID

    def test_same_collection_and_result(self, context: MongoDbContext, sync_db: Any) -> None:
        key = uuid.uuid4()
        sync_db.get_collection("acme-tenantOrders").find_one.return_value = {
            "_id": key,
            "name": "a",
            "added_at_utc": datetime(2024, 1, 1, tzinfo=UTC),
        }
        default = BaseMongoRepository(context)
        generic = KeyTypedMongoRepository(context, uuid.UUID)

        first = default.get_by_id(TenantOrder, key, "acme")
        second = generic.get_by_id(TenantOrder, key, "acme")

        assert first == second
        assert first.partition_key == "acme"
        assert list(sync_db.collections) == ["acme-tenantOrders"]

    def test_both_surfaces_assign_uuid(self, context: MongoDbContext, sync_db: Any) -> None:
        for repo in (BaseMongoRepository(context), KeyTypedMongoRepository(context, uuid.UUID)):
            order = Order(id=uuid.UUID(int=0))
            repo.add_one(order)
            assert isinstance(order.id, uuid.UUID)
            assert order.id.int != 0
        assert sync_db.get_collection("orders").insert_one.call_count == 2


class TestKeyTypes:
    def test_int_keys(self, context: MongoDbContext, sync_db: Any) -> None:
        repo = KeyTypedMongoRepository[int](context, int)
        invoice = Invoice(id=0)
        repo.add_one(invoice)
        assert isinstance(invoice.id, int)
        assert invoice.id > 0
        inserted = sync_db.get_collection("invoices").insert_one.call_args.args[0]
        assert inserted["_id"] == invoice.id

    def test_object_id_keys(self, context: MongoDbContext) -> None:
        repo = KeyTypedMongoRepository[ObjectId](context, ObjectId)
        ticket = Ticket()
        repo.add_one(ticket)
        assert isinstance(ticket.id, ObjectId)

    def test_existing_id_is_kept(self, context: MongoDbContext) -> None:
        repo = KeyTypedMongoRepository[int](context, int)
        invoice = Invoice(id=42)
        repo.add_one(invoice)
        assert invoice.id == 42

    def test_unsupported_key_type(self, context: MongoDbContext, sync_db: Any) -> None:
        repo = KeyTypedMongoRepository[float](context, float)
        with pytest.raises(UnsupportedIdentifierTypeError):
            repo.add_one(Decimalish())
        assert sync_db.collections == {}


class TestComponents:
    def test_components_are_lazy_and_shared(self, context: MongoDbContext) -> None:
        repo = BaseMongoRepository(context)
        assert not KeyTypedMongoRepository.reader.is_built(repo)
        reader = repo.reader
        assert isinstance(reader, MongoDbReader)
        assert repo.reader is reader
        assert not KeyTypedMongoRepository.creator.is_built(repo)

    def test_components_share_context_and_generator(self, context: MongoDbContext) -> None:
        repo = BaseMongoRepository(context)
        assert repo.creator.context is context
        assert repo.creator.id_generator is repo.id_generator

    def test_injected_component(self, context: MongoDbContext) -> None:
        repo = BaseMongoRepository(context)
        creator = MagicMock(spec=MongoDbCreator)
        repo.creator = creator
        order = Order()
        repo.add_one(order)
        creator.add_one.assert_called_once_with(order, uuid.UUID)


class TestForwarding:
    def test_delete_many_where_scoped_to_partition(self, context: MongoDbContext, sync_db: Any) -> None:
        sync_db.get_collection("tenantA-tenantOrders").delete_many.return_value = MagicMock(deleted_count=2)
        repo = BaseMongoRepository(context)
        assert repo.delete_many_where(TenantOrder, {"name": "a"}, partition_key="tenantA") == 2
        assert "tenantB-tenantOrders" not in sync_db.collections

    def test_update_and_count(self, context: MongoDbContext, sync_db: Any) -> None:
        collection = sync_db.get_collection("orders")
        collection.replace_one.return_value = MagicMock(modified_count=1)
        collection.count_documents.return_value = 4
        repo = BaseMongoRepository(context)
        assert repo.update_one(Order()) is True
        assert repo.count(Order) == 4

    def test_update_forwards_session(self, context: MongoDbContext) -> None:
        repo = BaseMongoRepository(context)
        updater = MagicMock(spec=MongoDbUpdater)
        repo.updater = updater
        session = MagicMock(name="session")
        order = Order()
        repo.update_one_field(order, "name", "a", session=session)
        repo.update_many(Order, {}, {"$set": {"name": "b"}}, "acme", session=session)
        updater.update_one_field.assert_called_once_with(order, "name", "a", session=session)
        updater.update_many.assert_called_once_with(Order, {}, {"$set": {"name": "b"}}, "acme", session=session)

    def test_index_names(self, context: MongoDbContext, sync_db: Any) -> None:
        sync_db.get_collection("orders").list_indexes.return_value = iter([{"name": "_id_"}])
        assert BaseMongoRepository(context).get_index_names(Order) == ["_id_"]

    def test_drop_collection(self, context: MongoDbContext, sync_db: Any) -> None:
        BaseMongoRepository(context).drop_collection(TenantOrder, "acme")
        sync_db.drop_collection.assert_called_once_with("acme-tenantOrders")

    def test_async_forwarding(self, context: MongoDbContext, async_db: Any) -> None:
        collection = async_db.get_collection("orders")
        collection.count_documents.return_value = 1
        repo = BaseMongoRepository(context)

        async def run() -> tuple[bool, Order]:
            order = Order(id=uuid.UUID(int=0))
            await repo.add_one_async(order)
            return await repo.any_async(Order), order

        found, order = asyncio.run(run())
        assert found is True
        assert order.id.int != 0
        collection.insert_one.assert_awaited_once()


class TestConstruction:
    def test_from_connection_string(self) -> None:
        with patch("pymongo.MongoClient") as client, patch(
            "mongo_repository.context.context.AsyncIOMotorClient"
        ) as async_client:
            repo = BaseMongoRepository.from_connection_string("mongodb://localhost:27017", "shop")
        assert isinstance(repo, BaseMongoRepository)
        assert repo.key_type is uuid.UUID
        client.assert_called_once_with(
            "mongodb://localhost:27017", uuidRepresentation="standard", tz_aware=True
        )
        client.return_value.__getitem__.assert_called_once_with("shop")
        async_client.return_value.__getitem__.assert_called_once_with("shop")

    def test_generic_from_connection_string(self) -> None:
        with patch("pymongo.MongoClient"), patch("mongo_repository.context.context.AsyncIOMotorClient"):
            repo = KeyTypedMongoRepository.from_connection_string(
                "mongodb://localhost:27017", "shop", key_type=int
            )
        assert repo.key_type is int

    def test_from_settings(self) -> None:
        settings = MongoSettings(connection_string="mongodb://db:27017", database_name="shop")
        with patch("pymongo.MongoClient") as client, patch(
            "mongo_repository.context.context.AsyncIOMotorClient"
        ):
            repo = BaseMongoRepository.from_settings(settings)
        assert isinstance(repo.context, MongoDbContext)
        assert client.call_args.args[0] == "mongodb://db:27017"


WRITE_OPERATIONS = (
    "add_one",
    "add_many",
    "delete_one",
    "delete_many_where",
    "update_one",
    "update_many",
    "get_and_update_one",
    "create_index",
    "drop_index",
    "drop_collection",
)


class TestReadOnly:
    @pytest.mark.parametrize("operation", WRITE_OPERATIONS)
    def test_has_no_write_operations(self, context: MongoDbContext, operation: str) -> None:
        repo = ReadOnlyMongoRepository(context)
        assert not hasattr(repo, operation)
        assert not hasattr(repo, f"{operation}_async")
        assert hasattr(BaseMongoRepository(context), operation)

    def test_builds_only_a_reader(self, context: MongoDbContext) -> None:
        repo = KeyTypedReadOnlyMongoRepository[int](context, int)
        assert not hasattr(repo, "creator")
        assert not hasattr(repo, "updater")
        assert isinstance(repo.reader, MongoDbReader)

    def test_reads_same_collection_as_full_repository(self, context: MongoDbContext, sync_db: Any) -> None:
        key = uuid.uuid4()
        sync_db.get_collection("acme-tenantOrders").find_one.return_value = {
            "_id": key,
            "name": "a",
            "added_at_utc": datetime(2024, 1, 1, tzinfo=UTC),
        }
        found = ReadOnlyMongoRepository(context).get_by_id(TenantOrder, key, "acme")
        assert found == BaseMongoRepository(context).get_by_id(TenantOrder, key, "acme")
        assert found is not None
        assert found.partition_key == "acme"

    def test_full_repository_extends_read_only_one(self) -> None:
        assert issubclass(KeyTypedMongoRepository, KeyTypedReadOnlyMongoRepository)

    def test_from_connection_string(self) -> None:
        with patch("pymongo.MongoClient"), patch("mongo_repository.context.context.AsyncIOMotorClient"):
            repo = ReadOnlyMongoRepository.from_connection_string("mongodb://localhost:27017", "shop")
        assert isinstance(repo, ReadOnlyMongoRepository)
        assert repo.key_type is uuid.UUID
