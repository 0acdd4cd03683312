"""Database context and collection naming."""
from mongo_repository.context.context import MongoDbContext
from mongo_repository.context.naming import (
    base_collection_name,
    collection_name,
    resolve_collection_name,
)

__all__ = [
    "MongoDbContext",
    "base_collection_name",
    "collection_name",
    "resolve_collection_name",
]
