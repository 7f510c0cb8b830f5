from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum
from typing import TYPE_CHECKING, Any

import asyncpg  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from dashboard.core.db import Database

# Upper bound of a bigserial id; larger values cannot name a stored row.
MAX_ID = 2**63 - 1


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    REFERENCE = "reference"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"


class RepositoryError(Exception):
    """Base repository error."""

    kind: ErrorKind


class RepositoryUnavailableError(RepositoryError):
    """Raised when the database is unavailable or not configured."""

    kind = ErrorKind.UNAVAILABLE


class RepositoryTimeoutError(RepositoryUnavailableError):
    """Raised when a storage operation exceeds its deadline."""

    kind = ErrorKind.TIMEOUT


class RepositoryNotFoundError(RepositoryError):
    """Raised when the requested entity does not exist."""

    kind = ErrorKind.NOT_FOUND


class RepositoryConflictError(RepositoryError):
    """Raised when the stored row changed since the caller read it."""

    kind = ErrorKind.CONFLICT


class RepositoryReferenceError(RepositoryError):
    """Raised when a reference by name (position title, clearance description) resolves to nothing."""

    kind = ErrorKind.REFERENCE

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"{field} '{value}' does not exist")
        self.field = field
        self.value = value


class RepositoryValidationError(RepositoryError):
    """Raised when payload validation fails before persistence."""

    kind = ErrorKind.VALIDATION

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("validation failed: " + ", ".join(sorted(errors)))
        self.errors = dict(errors)


class PostgresRepository:
    """Shared query plumbing. Every call runs under a deadline and goes through pool methods."""

    def __init__(
        self,
        database: Database,
        *,
        timeout_seconds: float = 5.0,
        list_timeout_seconds: float = 3.0,
    ) -> None:
        self.database = database
        self.timeout_seconds = timeout_seconds
        self.list_timeout_seconds = list_timeout_seconds

    @staticmethod
    def _storable_id(value: int) -> bool:
        return 1 <= value <= MAX_ID

    async def _fetch(self, sql: str, *args: Any, timeout: float | None = None) -> list[asyncpg.Record]:
        async with self._deadline(timeout):
            pool = await self.database.pool()
            return await pool.fetch(sql, *args)

    async def _fetchrow(self, sql: str, *args: Any, timeout: float | None = None) -> asyncpg.Record | None:
        async with self._deadline(timeout):
            pool = await self.database.pool()
            return await pool.fetchrow(sql, *args)

    async def _execute(self, sql: str, *args: Any, timeout: float | None = None) -> str:
        async with self._deadline(timeout):
            pool = await self.database.pool()
            return await pool.execute(sql, *args)

    async def _resolve_reference(self, *, sql: str, field: str, value: str) -> int:
        row = await self._fetchrow(sql, value)
        if row is None:
            raise RepositoryReferenceError(field, value)
        return int(row["id"])

    @asynccontextmanager
    async def _deadline(self, timeout: float | None) -> AsyncIterator[None]:
        seconds = self.timeout_seconds if timeout is None else timeout
        try:
            async with asyncio.timeout(seconds):
                yield
        except TimeoutError as exc:
            raise RepositoryTimeoutError(f"storage operation exceeded {seconds:g}s deadline") from exc

    @staticmethod
    def _rows_affected(status: str) -> int:
        # asyncpg returns the command tag, e.g. "DELETE 1" or "UPDATE 0".
        _, _, count = status.rpartition(" ")
        try:
            return int(count)
        except ValueError:
            return 0

    @staticmethod
    def _total_records(rows: list[asyncpg.Record]) -> int:
        if not rows:
            return 0
        return int(rows[0]["total_records"])

    @staticmethod
    def _text_list(value: Any) -> list[str]:
        if value is None:
            return []
        return [str(item) for item in value]
