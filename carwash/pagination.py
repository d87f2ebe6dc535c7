"""
Page slicing for in-memory lists.
"""
from dataclasses import dataclass
from math import ceil
from typing import Generic, List, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: List[T]
    page: int
    per_page: int
    total: int
    total_pages: int

    @property
    def start_index(self) -> int:
        """1-based position of the first item shown, 0 when empty."""
        if not self.items:
            return 0
        return (self.page - 1) * self.per_page + 1

    @property
    def end_index(self) -> int:
        return min(self.page * self.per_page, self.total)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def paginate(items: Sequence[T], page: int, per_page: int) -> Page[T]:
    """Return one page of items, clamping page to the available range."""
    if per_page < 1:
        raise ValueError("per_page must be positive")
    total = len(items)
    total_pages = max(1, ceil(total / per_page))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return Page(
        items=list(items[start:start + per_page]),
        page=page,
        per_page=per_page,
        total=total,
        total_pages=total_pages,
    )
