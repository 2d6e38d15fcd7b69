"""Client-side pagination of the container list."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, TypeVar

T = TypeVar("T")

PAGE_WINDOW = 5


@dataclass(frozen=True, slots=True)
class PageView:
    """Derived pagination state for one render."""

    current_page: int
    page_size: int
    total_pages: int
    total_items: int

    @property
    def first_item(self) -> int:
        """1-based position of the first row on the page (0 when the page is empty)."""

        offset = (self.current_page - 1) * self.page_size
        if offset >= self.total_items:
            return 0
        return offset + 1

    @property
    def last_item(self) -> int:
        if self.first_item == 0:
            return 0
        return min(self.current_page * self.page_size, self.total_items)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def total_pages(total_items: int, page_size: int) -> int:
    _check_positive("page_size", page_size)
    return math.ceil(total_items / page_size)


def page_slice(items: Sequence[T], page: int, page_size: int) -> List[T]:
    """Returns ``items[(page-1)*size : page*size]``; pages past the end are empty."""

    _check_positive("page", page)
    _check_positive("page_size", page_size)
    start = (page - 1) * page_size
    return list(items[start : start + page_size])


def page_view(total_items: int, page: int, page_size: int) -> PageView:
    return PageView(
        current_page=page,
        page_size=page_size,
        total_pages=total_pages(total_items, page_size),
        total_items=total_items,
    )


def page_window(current_page: int, pages: int, width: int = PAGE_WINDOW) -> List[int]:
    """Page numbers for the pager buttons, centred on the current page.

    >>> page_window(1, 10)
    [1, 2, 3, 4, 5]
    >>> page_window(10, 10)
    [6, 7, 8, 9, 10]
    """

    if pages <= 0:
        return []
    start = max(current_page - width // 2, 1)
    if current_page > pages - width // 2:
        start = max(pages - width + 1, 1)
    return [number for number in range(start, start + width) if number <= pages]


def _check_positive(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
