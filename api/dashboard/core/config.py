from functools import lru_cache
from typing import Annotated, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "delivery-dashboard-api"
    environment: Literal["development", "production"] = "development"
    version: str = "0.1.0"
    database_url: str | None = None
    database_pool_min_size: int = 1
    database_pool_max_size: int = 25
    database_max_idle_seconds: float = 900.0
    database_connect_timeout_seconds: float = 5.0
    query_timeout_seconds: float = 5.0
    list_timeout_seconds: float = 3.0
    cors_trusted_origins: Annotated[list[str], NoDecode] = []
    otel_enabled: bool = True
    otel_service_name: str = "delivery-dashboard-api"
    otel_exporter_otlp_endpoint: str | None = None
    otel_exporter_otlp_headers: str | None = None
    otel_trace_sample_ratio: float = 1.0
    otel_log_correlation: bool = True

    model_config = SettingsConfigDict(env_prefix="DD_", extra="ignore")

    @field_validator("cors_trusted_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        # Space separated, e.g. DD_CORS_TRUSTED_ORIGINS="http://a.test http://b.test"
        if isinstance(value, str):
            return value.split()
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
