"""
services.pagination - page/pageSize handling shared by list endpoints.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from sqlalchemy.orm import Query

import config


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    page_size: int = config.DEFAULT_PAGE_SIZE

    @classmethod
    def clamp(cls, page: int | None, page_size: int | None) -> "PageRequest":
        """Out-of-range values are pulled back to page ≥ 1, 1 ≤ size ≤ max."""
        page = max(1, page or 1)
        size = page_size or config.DEFAULT_PAGE_SIZE
        size = min(max(1, size), config.MAX_PAGE_SIZE)
        return cls(page=page, page_size=size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def paginate(query: Query, req: PageRequest) -> dict:
    """Run *query* for one page; items are serialised with to_dict()."""
    total = query.order_by(None).count()
    rows = query.offset(req.offset).limit(req.page_size).all()
    return {
        "items": [r.to_dict() for r in rows],
        "pagination": {
            "page": req.page,
            "pageSize": req.page_size,
            "total": total,
            "totalPages": math.ceil(total / req.page_size),
        },
    }
