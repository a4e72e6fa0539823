from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from urllib.parse import urlparse, quote, urlunparse

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from .config import Settings
from classwork.services.errors import ClassworkSourceError

Base = declarative_base()


def fix_database_url(url: str) -> str:
    """Switch the URL to the psycopg driver and percent-encode the password"""
    url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    url = url.replace("postgres://", "postgresql+psycopg://", 1)

    parsed = urlparse(url)

    if '@' in parsed.netloc:
        auth_part, host_part = parsed.netloc.rsplit('@', 1)
        if ':' in auth_part:
            username, password = auth_part.split(':', 1)
            encoded_password = quote(password, safe='')
            parsed = parsed._replace(netloc=f"{username}:{encoded_password}@{host_part}")

    return urlunparse(parsed)


class Database:
    """Owns the async engine for one process.

    Created by the application lifespan (or a script) and disposed of
    explicitly; nothing connects at import time.
    """

    def __init__(self, url: str, echo: bool = False, pool_size: int = 5):
        self.url = fix_database_url(url)
        self._echo = echo
        self._pool_size = pool_size
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        if not settings.DATABASE_URL:
            raise ClassworkSourceError("DATABASE_URL is not configured")
        return cls(
            settings.DATABASE_URL,
            echo=settings.ENVIRONMENT == "development" and settings.LOG_LEVEL == "DEBUG",
            pool_size=settings.DATABASE_POOL_SIZE,
        )

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(
                self.url,
                echo=self._echo,
                pool_size=self._pool_size,
                max_overflow=10,
                pool_pre_ping=True,  # Hosted Postgres drops idle connections
                pool_recycle=300,
                connect_args={
                    "prepare_threshold": None,  # Disable prepared statements behind the pooler
                },
            )
            self._sessionmaker = async_sessionmaker(
                self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self._sessionmaker is None:
            self.engine  # builds the sessionmaker alongside the engine
        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self):
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
