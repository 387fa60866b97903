import logging
from typing import AsyncGenerator
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from clinic_portal.common.config import settings
from clinic_portal.models.models import Base

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False):
    """Create the async engine; in-memory SQLite shares one connection."""
    if database_url.startswith("sqlite"):
        return create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_recycle=1800,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

async_session = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

async def create_tables(target_engine=engine) -> None:
    """Create the kv_store table if it does not exist."""
    async with target_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def connect_to_db():
    """Connect to the database and make sure the schema exists."""
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        await create_tables()
        logger.info("Database connected successfully")
    except Exception:
        logger.exception("Error connecting to the database")
        raise

async def close_db_connection():
    """Close the database connection."""
    try:
        await engine.dispose()
        logger.info("Database connection closed")
    except Exception:
        logger.exception("Error closing the database connection")
        raise

# Dependency for using a session in routes
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for use in FastAPI routes."""
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
