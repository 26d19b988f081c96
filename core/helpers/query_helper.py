"""
query_helper.py

In-memory search and pagination over loaded collections. There is no
storage-level querying; every list view filters the full collection.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def matches_search(query: Optional[str], *values: Optional[str]) -> bool:
    """Case-insensitive substring match against any of *values*; blank query matches all."""
    needle = (query or "").strip().lower()
    if not needle:
        return True
    return any(needle in (v or "").lower() for v in values)


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    page: int
    page_size: int
    total_items: int

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_items / self.page_size))

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


def paginate(items: Sequence[T] | Iterable[T], page: int, page_size: int) -> Page[T]:
    """Slice *items* into a 1-based page; out-of-range pages are clamped."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    data = list(items)
    total_pages = max(1, math.ceil(len(data) / page_size))
    page = min(max(1, page), total_pages)
    start = (page - 1) * page_size
    return Page(items=data[start:start + page_size], page=page,
                page_size=page_size, total_items=len(data))
