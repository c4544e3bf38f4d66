"""Zone API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user
from wms.api.pagination import PageParams, fetch_page
from wms.api.api_v1.endpoints.warehouses import get_live_warehouse
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.warehouse import Aisle, Zone
from wms.schemas.warehouse import ZoneType, ZoneCreate, ZoneUpdate, ZoneResponse, ZoneListData

router = APIRouter()


async def get_live_zone(db: AsyncSession, zone_id: str) -> Optional[Zone]:
    result = await db.execute(select(Zone).where(Zone.zone_id == zone_id, Zone.deleted_at.is_(None)))
    return result.scalar_one_or_none()


@router.get("/", response_model=ApiResponse[ZoneListData])
async def list_zones(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    warehouse_id: Optional[str] = Query(None),
    zone_type: Optional[ZoneType] = Query(None),
    is_active: Optional[bool] = Query(None)) -> Any:
    query = select(Zone).where(Zone.deleted_at.is_(None))
    if warehouse_id:
        query = query.where(Zone.warehouse_id == warehouse_id)
    if zone_type:
        query = query.where(Zone.zone_type == zone_type)
    if is_active is not None:
        query = query.where(Zone.is_active == is_active)

    zones, total = await fetch_page(db, query.order_by(Zone.zone_code), page)
    return create_api_response(True, ZoneListData(
        zones=[ZoneResponse.model_validate(z) for z in zones],
        total=total,
    ))


@router.get("/{zone_id}", response_model=ApiResponse[ZoneResponse])
async def get_zone(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    zone_id: str) -> Any:
    zone = await get_live_zone(db, zone_id)
    if not zone:
        raise HTTPException(status_code=404, detail="Zone not found")
    return create_api_response(True, ZoneResponse.model_validate(zone))


@router.post("/", response_model=ApiResponse[ZoneResponse], status_code=201)
async def create_zone(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    zone_in: ZoneCreate) -> Any:
    if not await get_live_warehouse(db, zone_in.warehouse_id):
        raise HTTPException(status_code=404, detail="Warehouse not found")

    zone = Zone(**zone_in.model_dump(exclude_none=True), created_by=current_user.id, updated_by=current_user.id)
    db.add(zone)
    await db.commit()
    await db.refresh(zone)
    return create_api_response(True, ZoneResponse.model_validate(zone), "Zone created successfully")


@router.put("/{zone_id}", response_model=ApiResponse[ZoneResponse])
@router.patch("/{zone_id}", response_model=ApiResponse[ZoneResponse])
async def update_zone(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    zone_id: str,
    zone_in: ZoneUpdate) -> Any:
    zone = await get_live_zone(db, zone_id)
    if not zone:
        raise HTTPException(status_code=404, detail="Zone not found")

    update_data = zone_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(zone, field, value)
    zone.updated_by = current_user.id

    await db.commit()
    await db.refresh(zone)
    return create_api_response(True, ZoneResponse.model_validate(zone), "Zone updated successfully")


@router.delete("/{zone_id}", response_model=ApiResponse[None])
async def delete_zone(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    zone_id: str) -> Any:
    zone = await get_live_zone(db, zone_id)
    if not zone:
        raise HTTPException(status_code=404, detail="Zone not found")

    aisles = await db.execute(
        select(func.count(Aisle.aisle_id)).where(Aisle.zone_id == zone_id, Aisle.deleted_at.is_(None))
    )
    if aisles.scalar():
        raise HTTPException(status_code=409, detail="Cannot delete zone with existing aisles")

    zone.soft_delete()
    zone.updated_by = current_user.id
    await db.commit()
    return create_api_response(True, None, "Zone deleted successfully")
