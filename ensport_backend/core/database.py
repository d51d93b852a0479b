from sqlmodel import SQLModel, Session
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy import create_engine as create_sync_engine

from ensport_backend.core.config import DATABASE_URL


def to_sync_url(url: str) -> str:
    """Strip the async driver from a database URL (sqlite+aiosqlite -> sqlite)."""
    for driver in ("+aiosqlite", "+asyncpg"):
        url = url.replace(driver, "")
    return url


# --- Database URLs ---
SYNC_DATABASE_URL = to_sync_url(DATABASE_URL)  # Sync engine (seeding/scripts)

# --- Engines ---
engine = create_async_engine(DATABASE_URL, future=True)             # Async
sync_engine = create_sync_engine(SYNC_DATABASE_URL, future=True)    # Sync

# --- Async session maker ---
async_session_maker = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


# --- Async DB session (used in routes) ---
async def get_db():
    async with async_session_maker() as session:
        yield session


# --- Initialize DB tables ---
async def init_db(bind=None):
    """Create tables asynchronously if they don't exist."""
    # Import models so every table is registered on SQLModel.metadata
    from ensport_backend import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


# --- Sync session for seeding/scripts ---
def get_sync_session():
    return Session(sync_engine)
