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

CLEARANCE_SORT_SAFELIST = with_descending("id", "description")


@dataclass(slots=True)
class Clearance:
    description: str
    id: int | None = None


def validate_description(v: Validator, description: str) -> None:
    v.check(bool(description), "description", "must be provided")
    v.check(byte_length(description or "") <= 256, "description", "must not be more than 256 bytes")


def validate_clearance(v: Validator, clearance: Clearance) -> None:
    validate_description(v, clearance.description)


class ClearanceRepository(PostgresRepository):
    async def insert(self, clearance: Clearance) -> Clearance:
        try:
            row = await self._fetchrow(
                """
                insert into clearances (description)
                values ($1)
                returning id
                """,
                clearance.description,
            )
        except asyncpg.UniqueViolationError as exc:
            raise RepositoryValidationError({"description": "already exists"}) from exc
        if row is None:
            raise RepositoryConflictError("failed to insert clearance")
        return replace(clearance, id=int(row["id"]))

    async def get(self, clearance_id: int) -> Clearance:
        if not self._storable_id(clearance_id):
            raise RepositoryNotFoundError("clearance not found")
        row = await self._fetchrow(
            """
            select id, description
            from clearances
            where id = $1
            """,
            clearance_id,
        )
        if row is None:
            raise RepositoryNotFoundError("clearance not found")
        return self._row_to_clearance(row)

    async def update(self, clearance: Clearance) -> Clearance:
        try:
            row = await self._fetchrow(
                """
                update clearances
                set description = $1
                where id = $2
                returning id
                """,
                clearance.description,
                clearance.id,
            )
        except asyncpg.UniqueViolationError as exc:
            raise RepositoryValidationError({"description": "already exists"}) from exc
        if row is None:
            raise RepositoryConflictError("clearance was modified or removed; re-fetch and retry")
        return clearance

    async def delete(self, clearance_id: int) -> None:
        if not self._storable_id(clearance_id):
            raise RepositoryNotFoundError("clearance not found")
        try:
            status = await self._execute(
                "delete from clearances where id = $1",
                clearance_id,
                timeout=self.list_timeout_seconds,
            )
        except asyncpg.ForeignKeyViolationError as exc:
            raise RepositoryConflictError("clearance is still referenced by resources") from exc
        if self._rows_affected(status) == 0:
            raise RepositoryNotFoundError("clearance not found")

    async def list_all(self, *, filters: Filters) -> tuple[list[Clearance], Metadata]:
        rows = await self._fetch(
            f"""
            select count(*) over() as total_records, id, description
            from clearances
            order by {filters.sort_column()} {filters.sort_direction()}, id asc
            limit $1
            offset $2
            """,
            filters.limit(),
            filters.offset(),
            timeout=self.list_timeout_seconds,
        )
        metadata = calculate_metadata(self._total_records(rows), filters.page, filters.page_size)
        return [self._row_to_clearance(row) for row in rows], metadata

    @staticmethod
    def _row_to_clearance(row: asyncpg.Record) -> Clearance:
        return Clearance(id=int(row["id"]), description=row["description"])
