from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

import asyncpg  # type: ignore[import-untyped]

from dashboard.core.validator import Validator, byte_length, permitted_value, unique
from dashboard.services.filters import Filters, Metadata, calculate_metadata, with_descending
from dashboard.services.patch import UNSET, FieldUpdate, merge
from dashboard.services.repository import (
    PostgresRepository,
    RepositoryConflictError,
    RepositoryNotFoundError,
    RepositoryReferenceError,
    RepositoryValidationError,
)


class Sex(str, Enum):
    UNKNOWN = "Unknown"
    MALE = "Male"
    FEMALE = "Female"
    WITHHELD = "Not Specified"


POSITION_TITLES = (
    "Associate Consultant I",
    "Associate Consultant II",
    "Consultant",
    "Senior Consultant",
    "Staff Consultant",
    "Consulting Architect",
    "Staff Consulting Architect",
)
CLEARANCE_LEVELS = ("None", "Baseline", "NV1", "NV2", "TSPV")
SEXES = tuple(sex.value for sex in Sex)
RESOURCE_SORT_SAFELIST = with_descending("id", "first_name", "last_name")


@dataclass(slots=True)
class Resource:
    first_name: str
    last_name: str
    position: str
    clearance: str
    specialties: list[str] = field(default_factory=list)
    certifications: list[str] = field(default_factory=list)
    active: bool = True
    sex: str = Sex.UNKNOWN.value
    id: int | None = None


@dataclass(slots=True)
class ResourcePatch:
    first_name: FieldUpdate[str] = UNSET
    last_name: FieldUpdate[str] = UNSET
    position: FieldUpdate[str] = UNSET
    clearance: FieldUpdate[str] = UNSET
    specialties: FieldUpdate[list[str]] = UNSET
    certifications: FieldUpdate[list[str]] = UNSET
    active: FieldUpdate[bool] = UNSET
    sex: FieldUpdate[str] = UNSET

    def apply_to(self, resource: Resource) -> Resource:
        return merge(resource, self)


def validate_id(v: Validator, resource_id: int | None) -> None:
    if resource_id is None:
        return
    v.check(resource_id > 0, "id", "must be a positive number")


def validate_name(v: Validator, key: str, name: str) -> None:
    v.check(bool(name), key, "must be provided")
    v.check(byte_length(name or "") <= 256, key, "must not be more than 256 bytes")


def validate_resource(v: Validator, resource: Resource) -> None:
    validate_id(v, resource.id)
    validate_name(v, "firstName", resource.first_name)
    validate_name(v, "lastName", resource.last_name)
    v.check(permitted_value(resource.position, *POSITION_TITLES), "position", "does not exist")
    v.check(permitted_value(resource.clearance, *CLEARANCE_LEVELS), "clearance", "does not exist")
    v.check(permitted_value(resource.sex, *SEXES), "sex", "does not exist")
    v.check(unique(resource.specialties), "specialties", "must not contain duplicate values")
    v.check(unique(resource.certifications), "certifications", "must not contain duplicate values")


class ResourceRepository(PostgresRepository):
    async def insert(self, resource: Resource) -> Resource:
        position_id, clearance_id = await self._resolve_references(resource)
        try:
            row = await self._fetchrow(
                """
                insert into resources
                  (first_name, last_name, position_id, clearance_id, specialties, certifications, active, sex)
                values ($1, $2, $3, $4, $5::text[], $6::text[], $7, $8)
                returning id
                """,
                resource.first_name,
                resource.last_name,
                position_id,
                clearance_id,
                list(resource.specialties),
                list(resource.certifications),
                resource.active,
                resource.sex,
            )
        except asyncpg.ForeignKeyViolationError as exc:
            raise self._reference_error(exc, resource) from exc
        if row is None:
            raise RepositoryConflictError("failed to insert resource")
        return replace(resource, id=int(row["id"]))

    async def get(self, resource_id: int) -> Resource:
        if not self._storable_id(resource_id):
            raise RepositoryNotFoundError("resource not found")
        row = await self._fetchrow(
            """
            select
              r.id,
              r.first_name,
              r.last_name,
              p.title as position,
              c.description as clearance,
              r.specialties,
              r.certifications,
              r.active,
              r.sex
            from resources r
            join positions p on p.id = r.position_id
            join clearances c on c.id = r.clearance_id
            where r.id = $1
            """,
            resource_id,
        )
        if row is None:
            raise RepositoryNotFoundError("resource not found")
        return self._row_to_resource(row)

    async def update(self, resource: Resource) -> Resource:
        if resource.id is None or not self._storable_id(resource.id):
            raise RepositoryNotFoundError("resource not found")
        position_id, clearance_id = await self._resolve_references(resource)
        try:
            row = await self._fetchrow(
                """
                update resources
                set first_name = $1,
                    last_name = $2,
                    position_id = $3,
                    clearance_id = $4,
                    specialties = $5::text[],
                    certifications = $6::text[],
                    active = $7,
                    sex = $8
                where id = $9
                returning id
                """,
                resource.first_name,
                resource.last_name,
                position_id,
                clearance_id,
                list(resource.specialties),
                list(resource.certifications),
                resource.active,
                resource.sex,
                resource.id,
            )
        except asyncpg.ForeignKeyViolationError as exc:
            raise self._reference_error(exc, resource) from exc
        if row is None:
            raise RepositoryConflictError("resource was modified or removed; re-fetch and retry")
        return resource

    async def update_partial(self, resource_id: int, patch: ResourcePatch) -> Resource:
        current = await self.get(resource_id)
        merged = patch.apply_to(current)

        v = Validator()
        validate_resource(v, merged)
        if not v.valid():
            raise RepositoryValidationError(v.errors)

        return await self.update(merged)

    async def delete(self, resource_id: int) -> None:
        if not self._storable_id(resource_id):
            raise RepositoryNotFoundError("resource not found")
        status = await self._execute(
            "delete from resources where id = $1",
            resource_id,
            timeout=self.list_timeout_seconds,
        )
        if self._rows_affected(status) == 0:
            raise RepositoryNotFoundError("resource not found")

    async def list_all(
        self,
        *,
        specialties: list[str] | None = None,
        certifications: list[str] | None = None,
        active: bool | None = None,
        position: str | None = None,
        clearance: str | None = None,
        filters: Filters,
    ) -> tuple[list[Resource], Metadata]:
        rows = await self._fetch(
            f"""
            select
              count(*) over() as total_records,
              r.id,
              r.first_name,
              r.last_name,
              p.title as position,
              c.description as clearance,
              r.specialties,
              r.certifications,
              r.active,
              r.sex
            from resources r
            join positions p on p.id = r.position_id
            join clearances c on c.id = r.clearance_id
            where (cardinality($1::text[]) = 0 or r.specialties @> $1::text[])
              and (cardinality($2::text[]) = 0 or r.certifications @> $2::text[])
              and ($3::boolean is null or r.active = $3)
              and ($4::text = '' or p.title = $4)
              and ($5::text = '' or c.description = $5)
            order by r.{filters.sort_column()} {filters.sort_direction()}, r.id asc
            limit $6
            offset $7
            """,
            list(specialties or []),
            list(certifications or []),
            active,
            (position or "").strip(),
            (clearance or "").strip(),
            filters.limit(),
            filters.offset(),
            timeout=self.list_timeout_seconds,
        )
        metadata = calculate_metadata(self._total_records(rows), filters.page, filters.page_size)
        return [self._row_to_resource(row) for row in rows], metadata

    async def _resolve_references(self, resource: Resource) -> tuple[int, int]:
        position_id = await self._resolve_reference(
            sql="select id from positions where title = $1",
            field="position",
            value=resource.position,
        )
        clearance_id = await self._resolve_reference(
            sql="select id from clearances where description = $1",
            field="clearance",
            value=resource.clearance,
        )
        return position_id, clearance_id

    @staticmethod
    def _reference_error(exc: asyncpg.ForeignKeyViolationError, resource: Resource) -> RepositoryReferenceError:
        # The reference was removed between the lookup and the write.
        constraint = getattr(exc, "constraint_name", None) or ""
        if "clearance" in constraint:
            return RepositoryReferenceError("clearance", resource.clearance)
        return RepositoryReferenceError("position", resource.position)

    def _row_to_resource(self, row: asyncpg.Record) -> Resource:
        return Resource(
            id=int(row["id"]),
            first_name=row["first_name"],
            last_name=row["last_name"],
            position=row["position"],
            clearance=row["clearance"],
            specialties=self._text_list(row["specialties"]),
            certifications=self._text_list(row["certifications"]),
            active=bool(row["active"]),
            sex=row["sex"],
        )
