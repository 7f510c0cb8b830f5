from dataclasses import asdict, replace

from fastapi import APIRouter, Depends, Query, status

from dashboard.api.errors import failed_validation, http_error
from dashboard.api.params import validated_filters
from dashboard.core.validator import Validator
from dashboard.schemas.common import MessageOut, MetadataOut
from dashboard.schemas.positions import (
    PositionCreateRequest,
    PositionListOut,
    PositionOut,
    PositionPatchRequest,
)
from dashboard.services.models import get_models
from dashboard.services.positions import POSITION_SORT_SAFELIST, Position, validate_position
from dashboard.services.repository import RepositoryError

router = APIRouter()


@router.get("", response_model=PositionListOut)
async def list_positions(
    page: int = Query(default=1),
    page_size: int = Query(default=20),
    sort: str = Query(default="title"),
    models=Depends(get_models),
) -> PositionListOut:
    filters = validated_filters(page=page, page_size=page_size, sort=sort, sort_safelist=POSITION_SORT_SAFELIST)
    try:
        positions, metadata = await models.positions.list_all(filters=filters)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return PositionListOut(
        positions=[PositionOut(**asdict(position)) for position in positions],
        metadata=MetadataOut(**asdict(metadata)),
    )


@router.post("", response_model=PositionOut, status_code=status.HTTP_201_CREATED)
async def create_position(payload: PositionCreateRequest, models=Depends(get_models)) -> PositionOut:
    position = Position(title=payload.title)

    v = Validator()
    validate_position(v, position)
    if not v.valid():
        raise failed_validation(v.errors)

    try:
        created = await models.positions.insert(position)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return PositionOut(**asdict(created))


@router.get("/{position_id}", response_model=PositionOut)
async def get_position(position_id: int, models=Depends(get_models)) -> PositionOut:
    try:
        position = await models.positions.get(position_id)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return PositionOut(**asdict(position))


@router.patch("/{position_id}", response_model=PositionOut)
async def patch_position(
    position_id: int,
    payload: PositionPatchRequest,
    models=Depends(get_models),
) -> PositionOut:
    try:
        position = await models.positions.get(position_id)
        if payload.title is not None:
            position = replace(position, title=payload.title)

        v = Validator()
        validate_position(v, position)
        if not v.valid():
            raise failed_validation(v.errors)

        position = await models.positions.update(position)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return PositionOut(**asdict(position))


@router.delete("/{position_id}", response_model=MessageOut)
async def delete_position(position_id: int, models=Depends(get_models)) -> MessageOut:
    try:
        await models.positions.delete(position_id)
    except RepositoryError as exc:
        raise http_error(exc) from exc
    return MessageOut(message="position successfully deleted")
