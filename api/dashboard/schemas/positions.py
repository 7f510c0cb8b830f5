from pydantic import Field

from dashboard.schemas.common import CamelModel, MetadataOut


class PositionOut(CamelModel):
    id: int
    title: str


class PositionListOut(CamelModel):
    positions: list[PositionOut] = Field(default_factory=list)
    metadata: MetadataOut


class PositionCreateRequest(CamelModel):
    title: str = ""


class PositionPatchRequest(CamelModel):
    title: str | None = None
