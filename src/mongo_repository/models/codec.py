"""Mapping between document dataclasses and BSON-compatible dicts.

* the ``id`` attribute is stored as ``_id``;
* fields declared with :func:`transient` (e.g. ``partition_key``) are never
  written to the store;
* nested dataclasses, lists of dataclasses and enums are converted both ways
  using the class' type hints.
"""

from __future__ import annotations

import dataclasses
import enum
import types
import typing
from typing import Any, Mapping, TypeVar

ID_FIELD = "_id"
ID_ATTRIBUTE = "id"
TRANSIENT = "mongo_repository.transient"

T = TypeVar("T")


def transient(**kwargs: Any) -> Any:
    """Declare a dataclass field that lives on the instance but is not persisted."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TRANSIENT] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def field_path(name: str) -> str:
    """Translate an attribute path (``"id"``, ``"address.city"``) to its stored path."""
    head, _, rest = name.partition(".")
    if head == ID_ATTRIBUTE:
        head = ID_FIELD
    return f"{head}.{rest}" if rest else head


def to_bson(document: Any) -> dict[str, Any]:
    """Return the stored representation of *document*."""
    if isinstance(document, Mapping):
        return dict(document)
    if not dataclasses.is_dataclass(document) or isinstance(document, type):
        raise TypeError(f"{type(document).__name__} is not a document dataclass")
    data: dict[str, Any] = {}
    for field in dataclasses.fields(document):
        if field.metadata.get(TRANSIENT):
            continue
        data[field_path(field.name)] = _encode(getattr(document, field.name))
    return data


def from_bson(document_type: type[T], raw: Mapping[str, Any] | None, **extra: Any) -> T | None:
    """Rebuild a *document_type* instance from a stored dict.

    Unknown stored keys are ignored.  *extra* supplies values for fields that
    are not persisted (the partition key the document was read from).
    """
    if raw is None:
        return None
    if not dataclasses.is_dataclass(document_type):
        return raw  # type: ignore[return-value]
    hints = _type_hints(document_type)
    kwargs: dict[str, Any] = {}
    for field in dataclasses.fields(document_type):
        if not field.init:
            continue
        if field.name in extra:
            kwargs[field.name] = extra[field.name]
            continue
        key = field_path(field.name)
        if key in raw:
            kwargs[field.name] = _decode(raw[key], hints.get(field.name))
    return document_type(**kwargs)


def _encode(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _encode(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if not f.metadata.get(TRANSIENT)
        }
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, Mapping):
        return {k: _encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_encode(v) for v in value]
    return value


def _decode(value: Any, hint: Any) -> Any:
    if value is None or hint is None:
        return value
    hint = _unwrap_optional(hint)
    origin = typing.get_origin(hint)
    if origin in (list, tuple, set, frozenset) and isinstance(value, list):
        args = typing.get_args(hint)
        item_hint = args[0] if args else None
        items = [_decode(v, item_hint) for v in value]
        return items if origin is list else origin(items)
    if isinstance(hint, type):
        if dataclasses.is_dataclass(hint) and isinstance(value, Mapping):
            nested = _type_hints(hint)
            return hint(**{
                f.name: _decode(value[f.name], nested.get(f.name))
                for f in dataclasses.fields(hint)
                if f.init and f.name in value
            })
        if issubclass(hint, enum.Enum) and not isinstance(value, hint):
            return hint(value)
    return value


def _unwrap_optional(hint: Any) -> Any:
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except NameError:
        # forward references that cannot be resolved are decoded as stored
        return {}


__all__ = ["ID_FIELD", "TRANSIENT", "field_path", "from_bson", "to_bson", "transient"]
