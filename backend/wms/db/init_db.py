import asyncio

from wms.db.session import engine
from wms.db.base import Base

# register every model on Base.metadata
import wms.models  # noqa: F401


async def ensure_tables_exist() -> None:
    """
    Create any missing tables (called at application start).
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(ensure_tables_exist())
