from dataclasses import asdict
import logging

from fastapi import APIRouter, Depends, Query, status

from dashboard.api.errors import failed_validation, http_error
from dashboard.api.params import read_csv, validated_filters
from dashboard.core.validator import Validator
from dashboard.schemas.common import MessageOut, MetadataOut
from dashboard.schemas.resources import (
    ResourceCreateRequest,
    ResourceListOut,
    ResourceOut,
    ResourcePatchRequest,
)
from dashboard.services.models import get_models
from dashboard.services.repository import RepositoryError
from dashboard.services.resources import RESOURCE_SORT_SAFELIST, Resource, validate_resource

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=ResourceListOut)
async def list_resources(
    specialties: str = Query(default="", description="Comma separated; rows must carry all of them"),
    certifications: str = Query(default="", description="Comma separated; rows must carry all of them"),
    active: bool | None = Query(default=None),
    position: str | None = Query(default=None),
    clearance: str | None = Query(default=None),
    page: int = Query(default=1),
    page_size: int = Query(default=20),
    sort: str = Query(default="id"),
    models=Depends(get_models),
) -> ResourceListOut:
    filters = validated_filters(page=page, page_size=page_size, sort=sort, sort_safelist=RESOURCE_SORT_SAFELIST)
    try:
        resources, metadata = await models.resources.list_all(
            specialties=read_csv(specialties),
            certifications=read_csv(certifications),
            active=active,
            position=position,
            clearance=clearance,
            filters=filters,
        )
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return ResourceListOut(
        resources=[ResourceOut(**asdict(resource)) for resource in resources],
        metadata=MetadataOut(**asdict(metadata)),
    )


@router.post("", response_model=ResourceOut, status_code=status.HTTP_201_CREATED)
async def create_resource(payload: ResourceCreateRequest, models=Depends(get_models)) -> ResourceOut:
    resource = Resource(**payload.model_dump())

    v = Validator()
    validate_resource(v, resource)
    if not v.valid():
        raise failed_validation(v.errors)

    try:
        created = await models.resources.insert(resource)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    logger.info("resource created id=%s", created.id)
    return ResourceOut(**asdict(created))


@router.get("/{resource_id}", response_model=ResourceOut)
async def get_resource(resource_id: int, models=Depends(get_models)) -> ResourceOut:
    try:
        resource = await models.resources.get(resource_id)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return ResourceOut(**asdict(resource))


@router.patch("/{resource_id}", response_model=ResourceOut)
async def patch_resource(
    resource_id: int,
    payload: ResourcePatchRequest,
    models=Depends(get_models),
) -> ResourceOut:
    try:
        resource = await models.resources.update_partial(resource_id, payload.to_patch())
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return ResourceOut(**asdict(resource))


@router.delete("/{resource_id}", response_model=MessageOut)
async def delete_resource(resource_id: int, models=Depends(get_models)) -> MessageOut:
    try:
        await models.resources.delete(resource_id)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    logger.info("resource deleted id=%s", resource_id)
    return MessageOut(message="resource successfully deleted")
