"""BaseMongoRepository and ReadOnlyMongoRepository – the facades for ``uuid.UUID`` identifiers."""

from __future__ import annotations

import uuid
from typing import Any

from mongo_repository.context import MongoDbContext
from mongo_repository.kernel.types import IdGenerator
from mongo_repository.repository.keyed import KeyTypedMongoRepository
from mongo_repository.repository.readonly import KeyTypedReadOnlyMongoRepository

DEFAULT_KEY_TYPE = uuid.UUID


class BaseMongoRepository(KeyTypedMongoRepository[uuid.UUID]):
    """:class:`KeyTypedMongoRepository` with the key type fixed to ``uuid.UUID``.

    Adds no behaviour of its own: every operation is the generic one with
    ``key_type=uuid.UUID``, so both surfaces resolve the same collections and
    return the same results.

    Usage::

        repo = BaseMongoRepository.from_connection_string("mongodb://localhost", "shop")
        order = Order(name="a")
        repo.add_one(order)
        repo.get_by_id(Order, order.id)
    """

    def __init__(
        self,
        context: MongoDbContext,
        *,
        id_generator: IdGenerator | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(context, DEFAULT_KEY_TYPE, id_generator=id_generator, **kwargs)


class ReadOnlyMongoRepository(KeyTypedReadOnlyMongoRepository[uuid.UUID]):
    """:class:`KeyTypedReadOnlyMongoRepository` bound to ``uuid.UUID``."""

    def __init__(
        self,
        context: MongoDbContext,
        *,
        id_generator: IdGenerator | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(context, DEFAULT_KEY_TYPE, id_generator=id_generator, **kwargs)


__all__ = ["DEFAULT_KEY_TYPE", "BaseMongoRepository", "ReadOnlyMongoRepository"]
