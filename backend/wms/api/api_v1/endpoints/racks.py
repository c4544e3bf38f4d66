"""Rack API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user
from wms.api.pagination import PageParams, fetch_page
from wms.api.api_v1.endpoints.aisles import get_live_aisle
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.warehouse import Location, Rack
from wms.schemas.warehouse import RackCreate, RackUpdate, RackResponse, RackListData

router = APIRouter()


async def get_live_rack(db: AsyncSession, rack_id: str) -> Optional[Rack]:
    result = await db.execute(select(Rack).where(Rack.rack_id == rack_id, Rack.deleted_at.is_(None)))
    return result.scalar_one_or_none()


@router.get("/", response_model=ApiResponse[RackListData])
async def list_racks(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    aisle_id: Optional[str] = Query(None),
    rack_type: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None)) -> Any:
    query = select(Rack).where(Rack.deleted_at.is_(None))
    if aisle_id:
        query = query.where(Rack.aisle_id == aisle_id)
    if rack_type:
        query = query.where(Rack.rack_type == rack_type)
    if is_active is not None:
        query = query.where(Rack.is_active == is_active)

    racks, total = await fetch_page(db, query.order_by(Rack.aisle_id, Rack.position_in_aisle, Rack.rack_code), page)
    return create_api_response(True, RackListData(
        racks=[RackResponse.model_validate(r) for r in racks],
        total=total,
    ))


@router.get("/{rack_id}", response_model=ApiResponse[RackResponse])
async def get_rack(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    rack_id: str) -> Any:
    rack = await get_live_rack(db, rack_id)
    if not rack:
        raise HTTPException(status_code=404, detail="Rack not found")
    return create_api_response(True, RackResponse.model_validate(rack))


@router.post("/", response_model=ApiResponse[RackResponse], status_code=201)
async def create_rack(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    rack_in: RackCreate) -> Any:
    if not await get_live_aisle(db, rack_in.aisle_id):
        raise HTTPException(status_code=404, detail="Aisle not found")

    rack = Rack(**rack_in.model_dump(exclude_none=True), created_by=current_user.id, updated_by=current_user.id)
    db.add(rack)
    await db.commit()
    await db.refresh(rack)
    return create_api_response(True, RackResponse.model_validate(rack), "Rack created successfully")


@router.put("/{rack_id}", response_model=ApiResponse[RackResponse])
@router.patch("/{rack_id}", response_model=ApiResponse[RackResponse])
async def update_rack(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    rack_id: str,
    rack_in: RackUpdate) -> Any:
    rack = await get_live_rack(db, rack_id)
    if not rack:
        raise HTTPException(status_code=404, detail="Rack not found")

    update_data = rack_in.model_dump(exclude_unset=True)
    levels = update_data.get("levels_count")
    if levels is not None:
        # locations already placed above the new top level would be orphaned
        highest = await db.execute(
            select(func.max(Location.level_number)).where(
                Location.rack_id == rack_id, Location.deleted_at.is_(None)
            )
        )
        top = highest.scalar()
        if top is not None and top > levels:
            raise HTTPException(
                status_code=400,
                detail=f"Rack has locations on level {top}; levels_count cannot be lower",
            )

    for field, value in update_data.items():
        setattr(rack, field, value)
    rack.updated_by = current_user.id

    await db.commit()
    await db.refresh(rack)
    return create_api_response(True, RackResponse.model_validate(rack), "Rack updated successfully")


@router.delete("/{rack_id}", response_model=ApiResponse[None])
async def delete_rack(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    rack_id: str) -> Any:
    rack = await get_live_rack(db, rack_id)
    if not rack:
        raise HTTPException(status_code=404, detail="Rack not found")

    locations = await db.execute(
        select(func.count(Location.location_id)).where(Location.rack_id == rack_id, Location.deleted_at.is_(None))
    )
    if locations.scalar():
        raise HTTPException(status_code=409, detail="Cannot delete rack with existing locations")

    rack.soft_delete()
    rack.updated_by = current_user.id
    await db.commit()
    return create_api_response(True, None, "Rack deleted successfully")
