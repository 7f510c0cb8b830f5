"""
asyncpg connection pool owner.

One `Database` per process. Repositories receive it at construction and ask
it for the pool on every call; the pool is created lazily on first use and
closed from the FastAPI lifespan (see `dashboard/main.py`).

SQL parameter style: asyncpg positional placeholders ($1, $2, ...).
"""

from __future__ import annotations

import asyncio
from functools import lru_cache

import asyncpg  # type: ignore[import-untyped]

from dashboard.core.config import get_settings
from dashboard.services.repository import RepositoryUnavailableError


class Database:
    def __init__(
        self,
        database_url: str | None,
        min_pool_size: int,
        max_pool_size: int,
        max_idle_seconds: float,
        connect_timeout_seconds: float,
    ) -> None:
        self.database_url = database_url
        self.min_pool_size = min_pool_size
        self.max_pool_size = max(min_pool_size, max_pool_size)
        self.max_idle_seconds = max_idle_seconds
        self.connect_timeout_seconds = connect_timeout_seconds
        self._pool: asyncpg.Pool | None = None
        self._lock = asyncio.Lock()

    async def pool(self) -> asyncpg.Pool:
        if not self.database_url:
            raise RepositoryUnavailableError("DD_DATABASE_URL is required")

        if self._pool is not None:
            return self._pool

        async with self._lock:
            if self._pool is not None:
                return self._pool
            try:
                self._pool = await asyncpg.create_pool(
                    dsn=self.database_url,
                    min_size=self.min_pool_size,
                    max_size=self.max_pool_size,
                    max_inactive_connection_lifetime=self.max_idle_seconds,
                    timeout=self.connect_timeout_seconds,
                )
            except Exception as exc:  # pragma: no cover - depends on environment
                raise RepositoryUnavailableError("database unavailable") from exc
            return self._pool

    async def ping(self) -> None:
        pool = await self.pool()
        async with asyncio.timeout(self.connect_timeout_seconds):
            await pool.fetchval("select 1")

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None


@lru_cache
def get_database() -> Database:
    settings = get_settings()
    return Database(
        database_url=settings.database_url,
        min_pool_size=settings.database_pool_min_size,
        max_pool_size=settings.database_pool_max_size,
        max_idle_seconds=settings.database_max_idle_seconds,
        connect_timeout_seconds=settings.database_connect_timeout_seconds,
    )
