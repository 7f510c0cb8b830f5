"""
Resource requests: staffing demand raised by a customer.

Updates are optimistic. Every row carries a `version` that the update
statement compares and increments atomically; a writer holding a stale
version matches zero rows and gets `RepositoryConflictError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime

import asyncpg  # type: ignore[import-untyped]

from dashboard.core.validator import Validator, byte_length, unique
from dashboard.services.filters import Filters, Metadata, calculate_metadata, with_descending
from dashboard.services.patch import UNSET, FieldUpdate, merge
from dashboard.services.repository import (
    PostgresRepository,
    RepositoryConflictError,
    RepositoryNotFoundError,
    RepositoryValidationError,
)

HOURS_PER_WEEK = 24 * 7
RESOURCE_REQUEST_SORT_SAFELIST = with_descending(
    "id",
    "customer",
    "start_date",
    "end_date",
    "hours_per_week",
    "created_at",
    "updated_at",
)

_COLUMNS = """
  id,
  customer,
  start_date,
  end_date,
  hours_per_week,
  skills,
  opportunity_id,
  engagement_id,
  created_at,
  updated_at,
  version,
  closed
"""


@dataclass(slots=True)
class ResourceRequest:
    customer: str
    start_date: date
    end_date: date
    hours_per_week: int
    skills: list[str] = field(default_factory=list)
    opportunity_id: str | None = None
    engagement_id: str | None = None
    closed: bool = False
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 0


@dataclass(slots=True)
class ResourceRequestPatch:
    customer: FieldUpdate[str] = UNSET
    start_date: FieldUpdate[date] = UNSET
    end_date: FieldUpdate[date] = UNSET
    hours_per_week: FieldUpdate[int] = UNSET
    skills: FieldUpdate[list[str]] = UNSET
    opportunity_id: FieldUpdate[str | None] = UNSET
    engagement_id: FieldUpdate[str | None] = UNSET
    closed: FieldUpdate[bool] = UNSET

    def apply_to(self, request: ResourceRequest) -> ResourceRequest:
        return merge(request, self)


def validate_customer(v: Validator, customer: str) -> None:
    v.check(bool(customer), "customer", "must be provided")
    v.check(byte_length(customer or "") <= 256, "customer", "must not be more than 256 bytes")


def validate_skills(v: Validator, skills: list[str]) -> None:
    v.check(len(skills or []) > 0, "skills", "at least one must be provided")
    v.check(unique(skills), "skills", "must not contain duplicate values")


def validate_resource_request(v: Validator, request: ResourceRequest) -> None:
    validate_customer(v, request.customer)
    validate_skills(v, request.skills)
    v.check(request.hours_per_week > 0, "hoursPerWeek", "must be greater than zero")
    v.check(request.hours_per_week <= HOURS_PER_WEEK, "hoursPerWeek", f"must not be more than {HOURS_PER_WEEK}")
    v.check(request.end_date >= request.start_date, "endDate", "must not be before startDate")


class ResourceRequestRepository(PostgresRepository):
    async def insert(self, request: ResourceRequest) -> ResourceRequest:
        row = await self._fetchrow(
            """
            insert into resource_requests
              (customer, start_date, end_date, hours_per_week, skills, opportunity_id, engagement_id)
            values ($1, $2, $3, $4, $5::text[], $6, $7)
            returning id, created_at, updated_at, version, closed
            """,
            request.customer,
            request.start_date,
            request.end_date,
            request.hours_per_week,
            list(request.skills),
            request.opportunity_id,
            request.engagement_id,
        )
        if row is None:
            raise RepositoryConflictError("failed to insert resource request")
        return replace(
            request,
            id=int(row["id"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            version=int(row["version"]),
            closed=bool(row["closed"]),
        )

    async def get(self, request_id: int) -> ResourceRequest:
        if not self._storable_id(request_id):
            raise RepositoryNotFoundError("resource request not found")
        row = await self._fetchrow(
            f"""
            select {_COLUMNS}
            from resource_requests
            where id = $1
            """,
            request_id,
        )
        if row is None:
            raise RepositoryNotFoundError("resource request not found")
        return self._row_to_resource_request(row)

    async def update(self, request: ResourceRequest) -> ResourceRequest:
        """
        Full replace conditioned on the version the caller read.

        Returns the request with the advanced `version` and `updated_at`.
        """
        if request.id is None or not self._storable_id(request.id):
            raise RepositoryNotFoundError("resource request not found")
        row = await self._fetchrow(
            """
            update resource_requests
            set customer = $1,
                start_date = $2,
                end_date = $3,
                hours_per_week = $4,
                skills = $5::text[],
                opportunity_id = $6,
                engagement_id = $7,
                closed = $8,
                updated_at = now(),
                version = version + 1
            where id = $9
              and version = $10
            returning updated_at, version
            """,
            request.customer,
            request.start_date,
            request.end_date,
            request.hours_per_week,
            list(request.skills),
            request.opportunity_id,
            request.engagement_id,
            request.closed,
            request.id,
            request.version,
        )
        if row is None:
            raise RepositoryConflictError("resource request was modified or removed; re-fetch and retry")
        return replace(request, updated_at=row["updated_at"], version=int(row["version"]))

    async def update_partial(
        self,
        request_id: int,
        patch: ResourceRequestPatch,
        *,
        expected_version: int | None = None,
    ) -> ResourceRequest:
        current = await self.get(request_id)
        if expected_version is not None and expected_version != current.version:
            raise RepositoryConflictError(
                f"resource request is at version {current.version}, expected {expected_version}"
            )
        merged = patch.apply_to(current)

        v = Validator()
        validate_resource_request(v, merged)
        if not v.valid():
            raise RepositoryValidationError(v.errors)

        return await self.update(merged)

    async def delete(self, request_id: int) -> None:
        if not self._storable_id(request_id):
            raise RepositoryNotFoundError("resource request not found")
        status = await self._execute(
            "delete from resource_requests where id = $1",
            request_id,
            timeout=self.list_timeout_seconds,
        )
        if self._rows_affected(status) == 0:
            raise RepositoryNotFoundError("resource request not found")

    async def list_all(
        self,
        *,
        customer: str | None = None,
        skills: list[str] | None = None,
        closed: bool | None = None,
        filters: Filters,
    ) -> tuple[list[ResourceRequest], Metadata]:
        rows = await self._fetch(
            f"""
            select count(*) over() as total_records, {_COLUMNS}
            from resource_requests
            where ($1::text = '' or to_tsvector('simple', customer) @@ plainto_tsquery('simple', $1))
              and (cardinality($2::text[]) = 0 or skills @> $2::text[])
              and ($3::boolean is null or closed = $3)
            order by {filters.sort_column()} {filters.sort_direction()}, id asc
            limit $4
            offset $5
            """,
            (customer or "").strip(),
            list(skills or []),
            closed,
            filters.limit(),
            filters.offset(),
            timeout=self.list_timeout_seconds,
        )
        metadata = calculate_metadata(self._total_records(rows), filters.page, filters.page_size)
        return [self._row_to_resource_request(row) for row in rows], metadata

    def _row_to_resource_request(self, row: asyncpg.Record) -> ResourceRequest:
        return ResourceRequest(
            id=int(row["id"]),
            customer=row["customer"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            hours_per_week=int(row["hours_per_week"]),
            skills=self._text_list(row["skills"]),
            opportunity_id=row["opportunity_id"],
            engagement_id=row["engagement_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            version=int(row["version"]),
            closed=bool(row["closed"]),
        )
