from dataclasses import dataclass
from typing import Any, List, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


@dataclass
class PageParams:
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


async def paginate(db: AsyncSession, query: Select, params: PageParams) -> Tuple[List[Any], int]:
    """Run ``query`` for one page and count the full result set."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset(params.offset).limit(params.limit))
    return list(result.scalars().unique().all()), total


def apply_updates(obj: Any, changes: dict) -> Any:
    """Copy explicitly-set fields from a partial update onto a model."""
    for field, value in changes.items():
        setattr(obj, field, value)
    return obj
