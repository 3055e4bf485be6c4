"""
One pagination contract for every list call.

List endpoints have answered with either a ``pagination`` or a ``meta``
block, keyed ``totalPages`` or ``total_pages``. ``Pagination.from_body``
accepts all four spellings and passes the values through unchanged.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Pagination:
    page: int = 1
    limit: int = 10
    total: int = 0
    total_pages: int = 1

    @classmethod
    def from_body(cls, body: Dict[str, Any], default_count: int = 0) -> "Pagination":
        meta = body.get("pagination") or body.get("meta") or {}
        page = meta.get("page", 1)
        limit = meta.get("limit", default_count or 10)
        total = meta.get("total", default_count)

        total_pages: Optional[int] = meta.get("totalPages")
        if total_pages is None:
            total_pages = meta.get("total_pages")
        if total_pages is None:
            total_pages = math.ceil(total / limit) if limit else 0

        return cls(page=page, limit=limit, total=total, total_pages=total_pages)


@dataclass
class Page:
    """A page of records plus its pagination and any extra envelope keys."""
    items: List[dict]
    pagination: Pagination
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "Page":
        items = body.get("data") or []
        extra = {
            key: value
            for key, value in body.items()
            if key not in ("success", "data", "pagination", "meta", "message")
        }
        return cls(items=items, pagination=Pagination.from_body(body, len(items)), extra=extra)

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
