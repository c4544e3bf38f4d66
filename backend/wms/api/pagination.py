from typing import Any, List, Tuple

from fastapi import Query
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.config import settings


class PageParams:
    """limit/offset query parameters shared by list endpoints."""

    def __init__(
        self,
        limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
        offset: int = Query(0, ge=0),
    ):
        self.limit = limit
        self.offset = offset


async def fetch_page(db: AsyncSession, query: Select, page: PageParams) -> Tuple[List[Any], int]:
    """Run `query` for one page and count every row it matches."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset(page.offset).limit(page.limit))
    return list(result.scalars().unique().all()), total
