"""
mongo_repository – generic MongoDB data-access layer.

Import path convention::

    from mongo_repository.models import Document, KeyedDocument
    from mongo_repository.context import MongoDbContext
    from mongo_repository.repository import BaseMongoRepository, KeyTypedMongoRepository
    from mongo_repository.kernel.errors import WriteConflictError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
