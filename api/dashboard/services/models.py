from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from dashboard.core.config import get_settings
from dashboard.core.db import Database, get_database
from dashboard.services.clearances import ClearanceRepository
from dashboard.services.positions import PositionRepository
from dashboard.services.resource_requests import ResourceRequestRepository
from dashboard.services.resources import ResourceRepository


@dataclass(slots=True)
class Models:
    positions: PositionRepository
    clearances: ClearanceRepository
    resources: ResourceRepository
    resource_requests: ResourceRequestRepository


def new_models(database: Database, *, timeout_seconds: float, list_timeout_seconds: float) -> Models:
    options = {"timeout_seconds": timeout_seconds, "list_timeout_seconds": list_timeout_seconds}
    return Models(
        positions=PositionRepository(database, **options),
        clearances=ClearanceRepository(database, **options),
        resources=ResourceRepository(database, **options),
        resource_requests=ResourceRequestRepository(database, **options),
    )


@lru_cache
def get_models() -> Models:
    settings = get_settings()
    return new_models(
        get_database(),
        timeout_seconds=settings.query_timeout_seconds,
        list_timeout_seconds=settings.list_timeout_seconds,
    )
