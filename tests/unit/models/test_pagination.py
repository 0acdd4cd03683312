"""Unit tests for pagination value objects."""

from __future__ import annotations

import pymongo
import pytest

from mongo_repository.models import Page, PageRequest, Sort, SortDirection


class TestPageRequest:
    def test_defaults(self) -> None:
        request = PageRequest()
        assert request.page == 1
        assert request.size == 50
        assert request.offset == 0

    def test_offset(self) -> None:
        assert PageRequest(page=3, size=20).offset == 40

    @pytest.mark.parametrize(("page", "size"), [(0, 10), (1, 0), (1, 1001)])
    def test_invalid_values(self, page: int, size: int) -> None:
        with pytest.raises(ValueError):
            PageRequest(page=page, size=size)

    def test_sort_spec(self) -> None:
        request = PageRequest(sorts=(Sort("id"), Sort("added_at_utc", SortDirection.DESC)))
        assert request.sort_spec() == [("_id", pymongo.ASCENDING), ("added_at_utc", pymongo.DESCENDING)]


class TestPage:
    def test_navigation(self) -> None:
        page = Page(items=[1, 2], total=5, page=2, size=2)
        assert page.total_pages == 3
        assert page.has_next
        assert page.has_previous

    def test_last_page(self) -> None:
        page = Page(items=[5], total=5, page=3, size=2)
        assert not page.has_next

    def test_empty(self) -> None:
        page: Page[int] = Page(items=[], total=0, page=1, size=10)
        assert page.total_pages == 0
        assert not page.has_next
        assert not page.has_previous

    def test_map(self) -> None:
        page = Page(items=[1, 2], total=2, page=1, size=10).map(str)
        assert page.items == ["1", "2"]
        assert page.total == 2

    def test_from_request(self) -> None:
        page = Page.from_request(["a"], 11, PageRequest(page=2, size=5))
        assert (page.page, page.size, page.total_pages) == (2, 5, 3)


class TestSort:
    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("-added_at_utc", Sort("added_at_utc", SortDirection.DESC)),
            ("+name", Sort("name")),
            ("name", Sort("name")),
        ],
    )
    def test_parse(self, expression: str, expected: Sort) -> None:
        assert Sort.parse(expression) == expected

    def test_find_options(self) -> None:
        request = PageRequest(page=2, size=10, sorts=(Sort.parse("-id"),))
        assert request.find_options() == {"skip": 10, "limit": 10, "sort": [("_id", pymongo.DESCENDING)]}
        assert PageRequest().find_options() == {"skip": 0, "limit": 50}
