"""
Client-side pagination over an already fetched list.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: List[T]
    page: int
    page_count: int
    total: int

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count


def page_count(total: int, page_size: int) -> int:
    """Number of pages; an empty list still has one page."""
    return max(1, math.ceil(total / max(page_size, 1)))


def clamp_page(page: int, total: int, page_size: int) -> int:
    return min(max(1, page), page_count(total, page_size))


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice ``items`` to the requested 1-based page, clamping out-of-range pages."""
    size = max(page_size, 1)
    current = clamp_page(page, len(items), size)
    start = (current - 1) * size
    return Page(
        items=list(items[start:start + size]),
        page=current,
        page_count=page_count(len(items), size),
        total=len(items),
    )
