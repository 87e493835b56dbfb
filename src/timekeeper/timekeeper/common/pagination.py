from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from .validators import require_positive_int

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int
    page_size: int

    @classmethod
    def of(cls, page, page_size) -> "PageRequest":
        return cls(
            page=require_positive_int(page, "page"),
            page_size=require_positive_int(page_size, "pageSize"),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    page_size: int

    @property
    def page_count(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0

    def meta(self) -> dict:
        return {
            "total": self.total,
            "page": self.page,
            "pageSize": self.page_size,
            "pageCount": self.page_count,
        }
