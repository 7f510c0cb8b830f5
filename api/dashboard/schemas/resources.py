from pydantic import Field

from dashboard.schemas.common import CamelModel, MetadataOut
from dashboard.services.patch import Set
from dashboard.services.resources import ResourcePatch


class ResourceOut(CamelModel):
    id: int
    first_name: str
    last_name: str
    position: str
    clearance: str
    specialties: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    active: bool
    sex: str


class ResourceListOut(CamelModel):
    resources: list[ResourceOut] = Field(default_factory=list)
    metadata: MetadataOut


class ResourceCreateRequest(CamelModel):
    first_name: str = ""
    last_name: str = ""
    position: str = ""
    clearance: str = ""
    specialties: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    active: bool = True
    sex: str = "Unknown"


class ResourcePatchRequest(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    position: str | None = None
    clearance: str | None = None
    specialties: list[str] | None = None
    certifications: list[str] | None = None
    active: bool | None = None
    sex: str | None = None

    def to_patch(self) -> ResourcePatch:
        # Absent fields and explicit nulls both leave the stored value alone.
        updates = {
            name: Set(getattr(self, name))
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }
        return ResourcePatch(**updates)
