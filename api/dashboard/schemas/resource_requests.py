from datetime import date, datetime

from pydantic import Field

from dashboard.schemas.common import CamelModel, MetadataOut
from dashboard.services.patch import Set
from dashboard.services.resource_requests import ResourceRequestPatch

NULLABLE_FIELDS = {"opportunity_id", "engagement_id"}


class ResourceRequestOut(CamelModel):
    id: int
    customer: str
    start_date: date
    end_date: date
    hours_per_week: int
    skills: list[str] = Field(default_factory=list)
    opportunity_id: str | None = None
    engagement_id: str | None = None
    created_at: datetime
    updated_at: datetime
    version: int
    closed: bool


class ResourceRequestListOut(CamelModel):
    resource_requests: list[ResourceRequestOut] = Field(default_factory=list)
    metadata: MetadataOut


class ResourceRequestCreateRequest(CamelModel):
    customer: str = ""
    start_date: date
    end_date: date
    hours_per_week: int = 0
    skills: list[str] = Field(default_factory=list)
    opportunity_id: str | None = None
    engagement_id: str | None = None


class ResourceRequestPatchRequest(CamelModel):
    customer: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    hours_per_week: int | None = None
    skills: list[str] | None = None
    opportunity_id: str | None = None
    engagement_id: str | None = None
    closed: bool | None = None
    version: int | None = Field(default=None, description="Version the client last read; a mismatch is a conflict.")

    def to_patch(self) -> ResourceRequestPatch:
        updates = {}
        for name in self.model_fields_set - {"version"}:
            value = getattr(self, name)
            if value is None and name not in NULLABLE_FIELDS:
                continue
            updates[name] = Set(value)
        return ResourceRequestPatch(**updates)
