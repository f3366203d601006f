"""
Page/limit normalization and pagination metadata for list endpoints
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, Tuple

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

# OFFSET must fit a signed 64-bit SQL integer
MAX_OFFSET = 2 ** 63 - 1


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def normalize_page_params(page: Any = None, limit: Any = None) -> Tuple[int, int]:
    """
    Clean up raw page/limit inputs.

    Missing, zero, negative or non-numeric values fall back to the defaults
    instead of being rejected. ``limit`` is clamped to MAX_LIMIT, and a page
    whose offset would not fit in the database falls back to the first page.
    """
    page = _positive_int(page, DEFAULT_PAGE)
    limit = min(_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT)
    if (page - 1) * limit > MAX_OFFSET:
        page = DEFAULT_PAGE
    return page, limit


@dataclass(frozen=True)
class PageMeta:
    total: int
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    def to_dict(self, total_key: str = "totalItems") -> Dict[str, Any]:
        return {
            "totalPages": self.total_pages,
            "currentPage": self.page,
            total_key: self.total,
            "hasNextPage": self.has_next_page,
            "hasPrevPage": self.has_prev_page,
        }


def paginate(total: int, page: Any = None, limit: Any = None) -> PageMeta:
    """Build pagination metadata for ``total`` items"""
    page, limit = normalize_page_params(page, limit)
    return PageMeta(total=max(total, 0), page=page, limit=limit)
