"""Aisle API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user
from wms.api.pagination import PageParams, fetch_page
from wms.api.api_v1.endpoints.zones import get_live_zone
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.warehouse import Aisle, Rack
from wms.schemas.warehouse import AisleCreate, AisleUpdate, AisleResponse, AisleListData

router = APIRouter()


async def get_live_aisle(db: AsyncSession, aisle_id: str) -> Optional[Aisle]:
    result = await db.execute(select(Aisle).where(Aisle.aisle_id == aisle_id, Aisle.deleted_at.is_(None)))
    return result.scalar_one_or_none()


@router.get("/", response_model=ApiResponse[AisleListData])
async def list_aisles(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    zone_id: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None)) -> Any:
    query = select(Aisle).where(Aisle.deleted_at.is_(None))
    if zone_id:
        query = query.where(Aisle.zone_id == zone_id)
    if is_active is not None:
        query = query.where(Aisle.is_active == is_active)

    aisles, total = await fetch_page(db, query.order_by(Aisle.aisle_code), page)
    return create_api_response(True, AisleListData(
        aisles=[AisleResponse.model_validate(a) for a in aisles],
        total=total,
    ))


@router.get("/{aisle_id}", response_model=ApiResponse[AisleResponse])
async def get_aisle(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    aisle_id: str) -> Any:
    aisle = await get_live_aisle(db, aisle_id)
    if not aisle:
        raise HTTPException(status_code=404, detail="Aisle not found")
    return create_api_response(True, AisleResponse.model_validate(aisle))


@router.post("/", response_model=ApiResponse[AisleResponse], status_code=201)
async def create_aisle(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    aisle_in: AisleCreate) -> Any:
    if not await get_live_zone(db, aisle_in.zone_id):
        raise HTTPException(status_code=404, detail="Zone not found")

    aisle = Aisle(**aisle_in.model_dump(exclude_none=True), created_by=current_user.id, updated_by=current_user.id)
    db.add(aisle)
    await db.commit()
    await db.refresh(aisle)
    return create_api_response(True, AisleResponse.model_validate(aisle), "Aisle created successfully")


@router.put("/{aisle_id}", response_model=ApiResponse[AisleResponse])
@router.patch("/{aisle_id}", response_model=ApiResponse[AisleResponse])
async def update_aisle(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    aisle_id: str,
    aisle_in: AisleUpdate) -> Any:
    aisle = await get_live_aisle(db, aisle_id)
    if not aisle:
        raise HTTPException(status_code=404, detail="Aisle not found")

    for field, value in aisle_in.model_dump(exclude_unset=True).items():
        setattr(aisle, field, value)
    aisle.updated_by = current_user.id

    await db.commit()
    await db.refresh(aisle)
    return create_api_response(True, AisleResponse.model_validate(aisle), "Aisle updated successfully")


@router.delete("/{aisle_id}", response_model=ApiResponse[None])
async def delete_aisle(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    aisle_id: str) -> Any:
    aisle = await get_live_aisle(db, aisle_id)
    if not aisle:
        raise HTTPException(status_code=404, detail="Aisle not found")

    racks = await db.execute(
        select(func.count(Rack.rack_id)).where(Rack.aisle_id == aisle_id, Rack.deleted_at.is_(None))
    )
    if racks.scalar():
        raise HTTPException(status_code=409, detail="Cannot delete aisle with existing racks")

    aisle.soft_delete()
    aisle.updated_by = current_user.id
    await db.commit()
    return create_api_response(True, None, "Aisle deleted successfully")
