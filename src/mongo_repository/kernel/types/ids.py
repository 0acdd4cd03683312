"""Identifier generation policies, keyed by identifier type.

Each supported key type registers a *factory* producing a fresh value and a
*zero* value.  A document whose ``id`` is ``None`` or equal to the zero value
of its key type is considered to have no identifier yet.

Examples::

    new_id(uuid.UUID)                  # UUID('3f1c...')
    new_id(int)                        # 4611686018427387904
    is_default_key(0, int)             # True
    IdGenerator.default().register(MyKey, MyKey.random, zero=MyKey.EMPTY)
"""

from __future__ import annotations

import dataclasses
import secrets
import threading
import uuid
from typing import Any, Callable, TypeVar

from bson import ObjectId

from mongo_repository.kernel.errors import UnsupportedIdentifierTypeError

TKey = TypeVar("TKey")

_INT64_MAX = 2**63 - 1


@dataclasses.dataclass(frozen=True, slots=True)
class IdPolicy:
    """How to create and recognise an unset identifier of one key type."""

    factory: Callable[[], Any]
    zero: Any = None


class IdGenerator:
    """Registry of :class:`IdPolicy` objects.

    Registration never validates anything beyond storing the policy; a missing
    policy only surfaces as :class:`UnsupportedIdentifierTypeError` when an
    identifier is actually requested.
    """

    _default: "IdGenerator | None" = None
    _default_lock = threading.Lock()

    def __init__(self) -> None:
        self._policies: dict[type, IdPolicy] = {}

    @classmethod
    def default(cls) -> "IdGenerator":
        """Return the process-wide generator with the built-in policies."""
        if cls._default is None:
            with cls._default_lock:
                if cls._default is None:
                    cls._default = cls.with_builtin_policies()
        return cls._default

    @classmethod
    def with_builtin_policies(cls) -> "IdGenerator":
        generator = cls()
        generator.register(uuid.UUID, uuid.uuid4, zero=uuid.UUID(int=0))
        generator.register(str, lambda: str(uuid.uuid4()))
        generator.register(int, lambda: secrets.randbelow(_INT64_MAX) + 1, zero=0)
        generator.register(ObjectId, ObjectId, zero=ObjectId(b"\x00" * 12))
        return generator

    def register(self, key_type: type, factory: Callable[[], Any], *, zero: Any = None) -> None:
        self._policies[key_type] = IdPolicy(factory=factory, zero=zero)

    def supports(self, key_type: type) -> bool:
        return self._lookup(key_type) is not None

    def new_id(self, key_type: type[TKey]) -> TKey:
        """Return a freshly generated identifier of *key_type*."""
        policy = self._lookup(key_type)
        if policy is None:
            raise UnsupportedIdentifierTypeError(key_type)
        return policy.factory()

    def zero(self, key_type: type) -> Any:
        """Return the unset value of *key_type* (``None`` when it has none)."""
        policy = self._lookup(key_type)
        return policy.zero if policy is not None else None

    def is_default(self, value: Any, key_type: type) -> bool:
        if value is None:
            return True
        zero = self.zero(key_type)
        return zero is not None and value == zero

    def _lookup(self, key_type: type) -> IdPolicy | None:
        policy = self._policies.get(key_type)
        if policy is not None:
            return policy
        # bool is an int subclass but never a sensible key
        if key_type is bool:
            return None
        # snapshot: register() may run concurrently
        for registered, candidate in tuple(self._policies.items()):
            if isinstance(key_type, type) and issubclass(key_type, registered):
                return candidate
        return None


def new_id(key_type: type[TKey]) -> TKey:
    """Generate an identifier of *key_type* with the default generator."""
    return IdGenerator.default().new_id(key_type)


def default_key(key_type: type) -> Any:
    """Return the zero value of *key_type* with the default generator."""
    return IdGenerator.default().zero(key_type)


def is_default_key(value: Any, key_type: type) -> bool:
    """``True`` when *value* means "no identifier assigned yet"."""
    return IdGenerator.default().is_default(value, key_type)


__all__ = ["IdGenerator", "IdPolicy", "default_key", "is_default_key", "new_id"]
