"""Repository facades: generic over the key type, and bound to ``uuid.UUID``.

The read-only variants expose queries only.
"""
from mongo_repository.repository.base import DEFAULT_KEY_TYPE, BaseMongoRepository, ReadOnlyMongoRepository
from mongo_repository.repository.keyed import KeyTypedMongoRepository
from mongo_repository.repository.lazy import LazyComponent
from mongo_repository.repository.readonly import KeyTypedReadOnlyMongoRepository

__all__ = [
    "DEFAULT_KEY_TYPE",
    "BaseMongoRepository",
    "KeyTypedMongoRepository",
    "KeyTypedReadOnlyMongoRepository",
    "LazyComponent",
    "ReadOnlyMongoRepository",
]
