from __future__ import annotations

from dataclasses import dataclass, replace

import asyncpg  # type: ignore[import-untyped]

from dashboard.core.validator import Validator, byte_length
from dashboard.services.filters import Filters, Metadata, calculate_metadata, with_descending
from dashboard.services.repository import (
    PostgresRepository,
    RepositoryConflictError,
    RepositoryNotFoundError,
    RepositoryValidationError,
)

POSITION_SORT_SAFELIST = with_descending("id", "title")


@dataclass(slots=True)
class Position:
    title: str
    id: int | None = None


def validate_title(v: Validator, title: str) -> None:
    v.check(bool(title), "title", "must be provided")
    v.check(byte_length(title or "") <= 256, "title", "must not be more than 256 bytes")


def validate_position(v: Validator, position: Position) -> None:
    validate_title(v, position.title)


class PositionRepository(PostgresRepository):
    async def insert(self, position: Position) -> Position:
        try:
            row = await self._fetchrow(
                """
                insert into positions (title)
                values ($1)
                returning id
                """,
                position.title,
            )
        except asyncpg.UniqueViolationError as exc:
            raise RepositoryValidationError({"title": "already exists"}) from exc
        if row is None:
            raise RepositoryConflictError("failed to insert position")
        return replace(position, id=int(row["id"]))

    async def get(self, position_id: int) -> Position:
        if not self._storable_id(position_id):
            raise RepositoryNotFoundError("position not found")
        row = await self._fetchrow(
            """
            select id, title
            from positions
            where id = $1
            """,
            position_id,
        )
        if row is None:
            raise RepositoryNotFoundError("position not found")
        return self._row_to_position(row)

    async def update(self, position: Position) -> Position:
        try:
            row = await self._fetchrow(
                """
                update positions
                set title = $1
                where id = $2
                returning id
                """,
                position.title,
                position.id,
            )
        except asyncpg.UniqueViolationError as exc:
            raise RepositoryValidationError({"title": "already exists"}) from exc
        if row is None:
            raise RepositoryConflictError("position was modified or removed; re-fetch and retry")
        return position

    async def delete(self, position_id: int) -> None:
        if not self._storable_id(position_id):
            raise RepositoryNotFoundError("position not found")
        try:
            status = await self._execute(
                "delete from positions where id = $1",
                position_id,
                timeout=self.list_timeout_seconds,
            )
        except asyncpg.ForeignKeyViolationError as exc:
            raise RepositoryConflictError("position is still referenced by resources") from exc
        if self._rows_affected(status) == 0:
            raise RepositoryNotFoundError("position not found")

    async def list_all(self, *, filters: Filters) -> tuple[list[Position], Metadata]:
        rows = await self._fetch(
            f"""
            select count(*) over() as total_records, id, title
            from positions
            order by {filters.sort_column()} {filters.sort_direction()}, id asc
            limit $1
            offset $2
            """,
            filters.limit(),
            filters.offset(),
            timeout=self.list_timeout_seconds,
        )
        metadata = calculate_metadata(self._total_records(rows), filters.page, filters.page_size)
        return [self._row_to_position(row) for row in rows], metadata

    @staticmethod
    def _row_to_position(row: asyncpg.Record) -> Position:
        return Position(id=int(row["id"]), title=row["title"])
