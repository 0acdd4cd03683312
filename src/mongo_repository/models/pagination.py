"""Pagination – PageRequest, Sort, SortDirection and Page."""
from __future__ import annotations

import dataclasses
import math
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

import pymongo

from mongo_repository.models.codec import field_path

T = TypeVar("T")

MAX_PAGE_SIZE = 1000


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @property
    def pymongo(self) -> int:
        return pymongo.ASCENDING if self is SortDirection.ASC else pymongo.DESCENDING


@dataclasses.dataclass(frozen=True)
class Sort:
    """Order on one document attribute (``id`` and dotted paths allowed)."""

    field: str
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def parse(cls, expression: str) -> "Sort":
        """``"-added_at_utc"`` sorts descending, ``"name"`` or ``"+name"`` ascending."""
        if expression.startswith("-"):
            return cls(expression[1:], SortDirection.DESC)
        return cls(expression.removeprefix("+"))

    def spec(self) -> tuple[str, int]:
        return field_path(self.field), self.direction.pymongo


@dataclasses.dataclass(frozen=True)
class PageRequest:
    """Which page to read; pages are numbered from 1.

    Without *sorts* the store's natural order applies, which is not stable
    across writes.
    """

    page: int = 1
    size: int = 50
    sorts: tuple[Sort, ...] = ()

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if not 1 <= self.size <= MAX_PAGE_SIZE:
            raise ValueError(f"size must be between 1 and {MAX_PAGE_SIZE}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    def sort_spec(self) -> list[tuple[str, int]]:
        """The ``sort`` argument of ``find``."""
        return [s.spec() for s in self.sorts]

    def find_options(self) -> dict[str, Any]:
        """``skip``/``limit`` (and ``sort`` when set) keyword arguments of ``find``."""
        options: dict[str, Any] = {"skip": self.offset, "limit": self.size}
        if self.sorts:
            options["sort"] = self.sort_spec()
        return options


@dataclasses.dataclass
class Page(Generic[T]):
    """The documents of one page and the number of documents matching overall."""

    items: list[T]
    total: int
    page: int
    size: int

    @classmethod
    def from_request(cls, items: list[T], total: int, request: PageRequest) -> "Page[T]":
        return cls(items=items, total=total, page=request.page, size=request.size)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.total > 0 and self.size > 0 else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def map(self, fn: Callable[[T], Any]) -> "Page[Any]":
        """Same page with every item passed through *fn* (e.g. into a DTO)."""
        return dataclasses.replace(self, items=[fn(item) for item in self.items])


__all__ = ["MAX_PAGE_SIZE", "Page", "PageRequest", "Sort", "SortDirection"]
