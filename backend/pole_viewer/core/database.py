from pole_viewer.core.settings import Settings
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine


def create_engine_from_settings() -> AsyncEngine:
    return create_async_engine(Settings.DATABASE_URL, echo=Settings.DATABASE_ECHO)


def create_session_factory(async_engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(async_engine, expire_on_commit=False)
