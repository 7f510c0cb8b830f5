from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from dashboard.api.router import api_router
from dashboard.core.config import get_settings
from dashboard.core.db import get_database
from dashboard.core.telemetry import (
    TelemetryRuntime,
    configure_api_logging,
    setup_api_telemetry,
    shutdown_api_telemetry,
)
from dashboard.services.models import get_models

settings = get_settings()
_telemetry_runtime: TelemetryRuntime | None = None
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    database = get_database()
    if database.database_url:
        await database.ping()
        logger.info("database connection pool established")
    try:
        yield
    finally:
        if _telemetry_runtime is not None:
            shutdown_api_telemetry(app, _telemetry_runtime)
        # Ensure asyncpg pool shuts down on app teardown.
        await database.close()
        get_models.cache_clear()
        get_database.cache_clear()


configure_api_logging()
app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)
_telemetry_runtime = setup_api_telemetry(app, settings)

if settings.cors_trusted_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_trusted_origins,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    started_at = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started_at) * 1000.0
    logger.info(
        "http request method=%s path=%s status=%s duration_ms=%.2f",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "the server encountered a problem and could not process your request"},
    )


app.include_router(api_router)
