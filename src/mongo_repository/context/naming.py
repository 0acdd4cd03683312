"""Collection naming convention.

The physical collection for a document type is a pure function of the type
and an optional partition key:

* ``@collection_name("people")`` on the class fixes the base name;
* otherwise the class name is pluralised and camel-cased
  (``TestDocument`` -> ``testDocuments``);
* a non-empty partition key ``p`` yields ``"p-<base name>"``.
"""

from __future__ import annotations

from typing import Callable, TypeVar

import inflection

T = TypeVar("T", bound=type)

COLLECTION_NAME_ATTRIBUTE = "__collection_name__"
PARTITION_SEPARATOR = "-"


def collection_name(name: str) -> Callable[[T], T]:
    """Class decorator overriding the collection name of a document type."""
    if not name:
        raise ValueError("collection name must not be empty")

    def decorate(cls: T) -> T:
        setattr(cls, COLLECTION_NAME_ATTRIBUTE, name)
        return cls

    return decorate


def base_collection_name(document_type: type) -> str:
    declared = getattr(document_type, COLLECTION_NAME_ATTRIBUTE, None)
    if declared:
        return declared
    return inflection.camelize(inflection.pluralize(document_type.__name__), False)


def resolve_collection_name(document_type: type, partition_key: str | None = None) -> str:
    """Return the physical collection name for ``(document_type, partition_key)``."""
    name = base_collection_name(document_type)
    if not partition_key:
        return name
    return f"{partition_key}{PARTITION_SEPARATOR}{name}"


__all__ = [
    "base_collection_name",
    "collection_name",
    "resolve_collection_name",
]
