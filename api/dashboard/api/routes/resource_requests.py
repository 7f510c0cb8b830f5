from dataclasses import asdict
import logging

from fastapi import APIRouter, Depends, Query, status

from dashboard.api.errors import failed_validation, http_error
from dashboard.api.params import read_csv, validated_filters
from dashboard.core.validator import Validator
from dashboard.schemas.common import MessageOut, MetadataOut
from dashboard.schemas.resource_requests import (
    ResourceRequestCreateRequest,
    ResourceRequestListOut,
    ResourceRequestOut,
    ResourceRequestPatchRequest,
)
from dashboard.services.models import get_models
from dashboard.services.repository import RepositoryError
from dashboard.services.resource_requests import (
    RESOURCE_REQUEST_SORT_SAFELIST,
    ResourceRequest,
    validate_resource_request,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=ResourceRequestListOut)
async def list_resource_requests(
    customer: str = Query(default="", max_length=256),
    skills: str = Query(default="", description="Comma separated; rows must require all of them"),
    closed: bool | None = Query(default=None),
    page: int = Query(default=1),
    page_size: int = Query(default=20),
    sort: str = Query(default="id"),
    models=Depends(get_models),
) -> ResourceRequestListOut:
    filters = validated_filters(
        page=page,
        page_size=page_size,
        sort=sort,
        sort_safelist=RESOURCE_REQUEST_SORT_SAFELIST,
    )
    try:
        requests, metadata = await models.resource_requests.list_all(
            customer=customer,
            skills=read_csv(skills),
            closed=closed,
            filters=filters,
        )
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return ResourceRequestListOut(
        resource_requests=[ResourceRequestOut(**asdict(request)) for request in requests],
        metadata=MetadataOut(**asdict(metadata)),
    )


@router.post("", response_model=ResourceRequestOut, status_code=status.HTTP_201_CREATED)
async def create_resource_request(
    payload: ResourceRequestCreateRequest,
    models=Depends(get_models),
) -> ResourceRequestOut:
    request = ResourceRequest(**payload.model_dump())

    v = Validator()
    validate_resource_request(v, request)
    if not v.valid():
        raise failed_validation(v.errors)

    try:
        created = await models.resource_requests.insert(request)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    logger.info("resource request created id=%s customer=%s", created.id, created.customer)
    return ResourceRequestOut(**asdict(created))


@router.get("/{request_id}", response_model=ResourceRequestOut)
async def get_resource_request(request_id: int, models=Depends(get_models)) -> ResourceRequestOut:
    try:
        request = await models.resource_requests.get(request_id)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return ResourceRequestOut(**asdict(request))


@router.patch("/{request_id}", response_model=ResourceRequestOut)
async def patch_resource_request(
    request_id: int,
    payload: ResourceRequestPatchRequest,
    models=Depends(get_models),
) -> ResourceRequestOut:
    try:
        request = await models.resource_requests.update_partial(
            request_id,
            payload.to_patch(),
            expected_version=payload.version,
        )
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return ResourceRequestOut(**asdict(request))


@router.delete("/{request_id}", response_model=MessageOut)
async def delete_resource_request(request_id: int, models=Depends(get_models)) -> MessageOut:
    try:
        await models.resource_requests.delete(request_id)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    logger.info("resource request deleted id=%s", request_id)
    return MessageOut(message="resource request successfully deleted")
