from dataclasses import dataclass, field
from math import ceil
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass
class PagedList(Generic[T]):
    """One page of a larger result set plus the totals needed to page through it."""

    items: list[T] = field(default_factory=list)
    page_index: int = 0
    page_size: int = 1
    total_count: int = 0

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError("page_size must be positive")

    @classmethod
    def empty(cls) -> "PagedList[Any]":
        return cls(items=[], page_index=0, page_size=1, total_count=0)

    @property
    def total_pages(self) -> int:
        return ceil(self.total_count / self.page_size)

    @property
    def has_previous_page(self) -> bool:
        return self.page_index > 0

    @property
    def has_next_page(self) -> bool:
        return self.page_index + 1 < self.total_pages

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
