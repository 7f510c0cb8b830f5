from dataclasses import asdict, replace

from fastapi import APIRouter, Depends, Query, status

from dashboard.api.errors import failed_validation, http_error
from dashboard.api.params import validated_filters
from dashboard.core.validator import Validator
from dashboard.schemas.common import MessageOut, MetadataOut
from dashboard.schemas.clearances import (
    ClearanceCreateRequest,
    ClearanceListOut,
    ClearanceOut,
    ClearancePatchRequest,
)
from dashboard.services.models import get_models
from dashboard.services.clearances import CLEARANCE_SORT_SAFELIST, Clearance, validate_clearance
from dashboard.services.repository import RepositoryError

router = APIRouter()


@router.get("", response_model=ClearanceListOut)
async def list_clearances(
    page: int = Query(default=1),
    page_size: int = Query(default=20),
    sort: str = Query(default="description"),
    models=Depends(get_models),
) -> ClearanceListOut:
    filters = validated_filters(page=page, page_size=page_size, sort=sort, sort_safelist=CLEARANCE_SORT_SAFELIST)
    try:
        clearances, metadata = await models.clearances.list_all(filters=filters)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return ClearanceListOut(
        clearances=[ClearanceOut(**asdict(clearance)) for clearance in clearances],
        metadata=MetadataOut(**asdict(metadata)),
    )


@router.post("", response_model=ClearanceOut, status_code=status.HTTP_201_CREATED)
async def create_clearance(payload: ClearanceCreateRequest, models=Depends(get_models)) -> ClearanceOut:
    clearance = Clearance(description=payload.description)

    v = Validator()
    validate_clearance(v, clearance)
    if not v.valid():
        raise failed_validation(v.errors)

    try:
        created = await models.clearances.insert(clearance)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return ClearanceOut(**asdict(created))


@router.get("/{clearance_id}", response_model=ClearanceOut)
async def get_clearance(clearance_id: int, models=Depends(get_models)) -> ClearanceOut:
    try:
        clearance = await models.clearances.get(clearance_id)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return ClearanceOut(**asdict(clearance))


@router.patch("/{clearance_id}", response_model=ClearanceOut)
async def patch_clearance(
    clearance_id: int,
    payload: ClearancePatchRequest,
    models=Depends(get_models),
) -> ClearanceOut:
    try:
        clearance = await models.clearances.get(clearance_id)
        if payload.description is not None:
            clearance = replace(clearance, description=payload.description)

        v = Validator()
        validate_clearance(v, clearance)
        if not v.valid():
            raise failed_validation(v.errors)

        clearance = await models.clearances.update(clearance)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return ClearanceOut(**asdict(clearance))


@router.delete("/{clearance_id}", response_model=MessageOut)
async def delete_clearance(clearance_id: int, models=Depends(get_models)) -> MessageOut:
    try:
        await models.clearances.delete(clearance_id)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return MessageOut(message="clearance successfully deleted")
