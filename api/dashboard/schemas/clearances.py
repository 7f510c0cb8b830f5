from pydantic import Field

from dashboard.schemas.common import CamelModel, MetadataOut


class ClearanceOut(CamelModel):
    id: int
    description: str


class ClearanceListOut(CamelModel):
    clearances: list[ClearanceOut] = Field(default_factory=list)
    metadata: MetadataOut


class ClearanceCreateRequest(CamelModel):
    description: str = ""


class ClearancePatchRequest(CamelModel):
    description: str | None = None
