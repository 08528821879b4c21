from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool
from .config import settings


def database_url(db_path) -> str:
    return f"sqlite+aiosqlite:///{db_path}"


def make_engine(url: str) -> AsyncEngine:
    # NullPool: sync jobs run under asyncio.run() in worker threads, so a
    # pooled connection must never outlive the loop that opened it.
    return create_async_engine(
        url,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
    )


engine = make_engine(database_url(settings.db_path))

SessionLocal = async_sessionmaker(engine, expire_on_commit=False)

class Base(DeclarativeBase):
    pass

async def init_db(target: AsyncEngine | None = None):
    """Create tables and ensure WAL mode for SQLite."""
    from . import models  # noqa: F401

    target = target or engine
    if target is engine:
        settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text("PRAGMA journal_mode=WAL;"))

async def get_session() -> AsyncSession:
    async with SessionLocal() as session:
        yield session
