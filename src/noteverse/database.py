# Database connection setup
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import get_settings
from .core import models  # noqa: F401  register all tables on the metadata
from .core.models.base import BaseModel

# Get settings
settings = get_settings()

# Create async engine using settings
engine = create_async_engine(settings.database_url, echo=settings.database_echo, pool_pre_ping=True)

# Session factory
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """One session per request."""
    async with AsyncSessionLocal() as session:
        yield session


async def create_tables():
    """Create all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)


async def dispose_engine():
    await engine.dispose()
