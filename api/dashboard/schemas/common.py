from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MetadataOut(CamelModel):
    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0


class MessageOut(BaseModel):
    message: str


class HealthcheckOut(BaseModel):
    status: str
    system_info: dict[str, str]
