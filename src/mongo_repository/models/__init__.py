"""Document models, BSON mapping, index descriptors and pagination."""
from mongo_repository.models.codec import field_path, from_bson, to_bson, transient
from mongo_repository.models.document import (
    Document,
    KeyedDocument,
    Partitioned,
    PartitionedDocument,
    partition_key_of,
)
from mongo_repository.models.index import IndexCreationOptions, IndexDescriptor, IndexKind
from mongo_repository.models.pagination import Page, PageRequest, Sort, SortDirection

__all__ = [
    "Document",
    "IndexCreationOptions",
    "IndexDescriptor",
    "IndexKind",
    "KeyedDocument",
    "Page",
    "PageRequest",
    "Partitioned",
    "PartitionedDocument",
    "Sort",
    "SortDirection",
    "field_path",
    "from_bson",
    "partition_key_of",
    "to_bson",
    "transient",
]
