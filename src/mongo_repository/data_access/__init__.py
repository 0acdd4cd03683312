"""Data-access components: one per operation family, all sharing :class:`DataAccessBase`."""
from mongo_repository.data_access.base import DataAccessBase, normalize_filter, store_errors
from mongo_repository.data_access.creator import MongoDbCreator
from mongo_repository.data_access.eraser import MongoDbEraser
from mongo_repository.data_access.index_handler import MongoDbIndexHandler
from mongo_repository.data_access.reader import MongoDbReader
from mongo_repository.data_access.updater import MongoDbUpdater, Update

__all__ = [
    "DataAccessBase",
    "MongoDbCreator",
    "MongoDbEraser",
    "MongoDbIndexHandler",
    "MongoDbReader",
    "MongoDbUpdater",
    "Update",
    "normalize_filter",
    "store_errors",
]
