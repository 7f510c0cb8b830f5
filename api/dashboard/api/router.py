from fastapi import APIRouter

from dashboard.api.routes import clearances, health, positions, resource_requests, resources

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(positions.router, prefix="/v1/positions", tags=["positions"])
api_router.include_router(clearances.router, prefix="/v1/clearances", tags=["clearances"])
api_router.include_router(resources.router, prefix="/v1/resources", tags=["resources"])
api_router.include_router(resource_requests.router, prefix="/v1/resource-requests", tags=["resource-requests"])
