"""LazyComponent – build a repository's data-access components on first use."""

from __future__ import annotations

import threading
from typing import Any, Callable, Generic, TypeVar, overload

T = TypeVar("T")

LOCK_ATTRIBUTE = "_component_lock"


class LazyComponent(Generic[T]):
    """Descriptor holding one data-access component per repository instance.

    The component is built by ``factory(instance)`` the first time it is read
    and reused afterwards.  Concurrent first reads are serialised on the
    owning instance's re-entrant lock, so exactly one component is built and every
    caller sees that same object.  A factory may read other lazy components
    of the same instance.

    Assigning the attribute replaces the component (tests inject doubles
    this way).

    Usage::

        class Repo:
            creator = LazyComponent(lambda repo: MongoDbCreator(repo.context))
    """

    def __init__(self, factory: Callable[[Any], T]) -> None:
        self._factory = factory
        self._slot = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self._slot = f"_{name}"

    @overload
    def __get__(self, instance: None, owner: type) -> "LazyComponent[T]": ...

    @overload
    def __get__(self, instance: object, owner: type) -> T: ...

    def __get__(self, instance: object | None, owner: type) -> Any:
        if instance is None:
            return self
        component = instance.__dict__.get(self._slot)
        if component is None:
            with _lock_of(instance):
                # Double-check after acquiring lock
                component = instance.__dict__.get(self._slot)
                if component is None:
                    component = self._factory(instance)
                    instance.__dict__[self._slot] = component
        return component

    def __set__(self, instance: object, value: T) -> None:
        with _lock_of(instance):
            instance.__dict__[self._slot] = value

    def is_built(self, instance: object) -> bool:
        return instance.__dict__.get(self._slot) is not None


def _lock_of(instance: object) -> threading.RLock:
    lock = instance.__dict__.get(LOCK_ATTRIBUTE)
    if lock is None:
        # setdefault is atomic for dicts, so racing callers share one lock
        lock = instance.__dict__.setdefault(LOCK_ATTRIBUTE, threading.RLock())
    return lock


__all__ = ["LazyComponent"]
