from fastapi import APIRouter, Depends

from dashboard.core.config import Settings, get_settings
from dashboard.schemas.common import HealthcheckOut

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/v1/healthcheck", response_model=HealthcheckOut)
async def healthcheck(settings: Settings = Depends(get_settings)) -> HealthcheckOut:
    return HealthcheckOut(
        status="available",
        system_info={"environment": settings.environment, "version": settings.version},
    )
