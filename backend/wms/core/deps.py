"""Database session dependency."""
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession

from wms.db.session import SessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield one session per request.
    """
    async with SessionLocal() as session:
        yield session
