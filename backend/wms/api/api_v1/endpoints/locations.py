"""Location API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user
from wms.api.pagination import PageParams, fetch_page
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.warehouse import Aisle, Bin, Location, Rack, Zone
from wms.schemas.warehouse import (
    LocationType, LocationCreate, LocationUpdate, LocationResponse, LocationListData
)

router = APIRouter()


async def get_live_location(db: AsyncSession, location_id: str) -> Optional[Location]:
    result = await db.execute(
        select(Location).where(Location.location_id == location_id, Location.deleted_at.is_(None))
    )
    return result.scalar_one_or_none()


async def resolve_rack_chain(db: AsyncSession, rack_id: str):
    """(rack, warehouse_id) for a live rack whose aisle and zone are live, else (None, None)."""
    result = await db.execute(
        select(Rack, Zone.warehouse_id)
        .join(Aisle, Rack.aisle_id == Aisle.aisle_id)
        .join(Zone, Aisle.zone_id == Zone.zone_id)
        .where(
            Rack.rack_id == rack_id,
            Rack.deleted_at.is_(None),
            Aisle.deleted_at.is_(None),
            Zone.deleted_at.is_(None),
        )
    )
    row = result.first()
    if row is None:
        return None, None
    return row[0], row[1]


def _check_level(rack: Rack, level_number: Optional[int]) -> None:
    if level_number is not None and level_number > rack.levels_count:
        raise HTTPException(
            status_code=400,
            detail=f"level_number {level_number} exceeds the rack's {rack.levels_count} levels",
        )


@router.get("/", response_model=ApiResponse[LocationListData])
async def list_locations(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    warehouse_id: Optional[str] = Query(None),
    rack_id: Optional[str] = Query(None),
    location_type: Optional[LocationType] = Query(None),
    is_active: Optional[bool] = Query(None)) -> Any:
    query = select(Location).where(Location.deleted_at.is_(None))
    if warehouse_id:
        query = query.where(Location.warehouse_id == warehouse_id)
    if rack_id:
        query = query.where(Location.rack_id == rack_id)
    if location_type:
        query = query.where(Location.location_type == location_type)
    if is_active is not None:
        query = query.where(Location.is_active == is_active)

    locations, total = await fetch_page(db, query.order_by(Location.location_code), page)
    return create_api_response(True, LocationListData(
        locations=[LocationResponse.model_validate(loc) for loc in locations],
        total=total,
    ))


@router.get("/{location_id}", response_model=ApiResponse[LocationResponse])
async def get_location(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    location_id: str) -> Any:
    location = await get_live_location(db, location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return create_api_response(True, LocationResponse.model_validate(location))


@router.post("/", response_model=ApiResponse[LocationResponse], status_code=201)
async def create_location(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    location_in: LocationCreate) -> Any:
    """Create a location; warehouse_id is taken from the rack's zone"""
    rack, warehouse_id = await resolve_rack_chain(db, location_in.rack_id)
    if rack is None:
        raise HTTPException(status_code=404, detail="Rack not found")
    _check_level(rack, location_in.level_number)

    location = Location(
        **location_in.model_dump(exclude_none=True),
        warehouse_id=warehouse_id,
        created_by=current_user.id,
        updated_by=current_user.id)
    db.add(location)
    await db.commit()
    await db.refresh(location)
    return create_api_response(True, LocationResponse.model_validate(location), "Location created successfully")


@router.put("/{location_id}", response_model=ApiResponse[LocationResponse])
@router.patch("/{location_id}", response_model=ApiResponse[LocationResponse])
async def update_location(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    location_id: str,
    location_in: LocationUpdate) -> Any:
    location = await get_live_location(db, location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")

    update_data = location_in.model_dump(exclude_unset=True)
    if update_data.get("level_number") is not None:
        rack = await db.get(Rack, location.rack_id)
        _check_level(rack, update_data["level_number"])

    for field, value in update_data.items():
        setattr(location, field, value)
    location.updated_by = current_user.id

    await db.commit()
    await db.refresh(location)
    return create_api_response(True, LocationResponse.model_validate(location), "Location updated successfully")


@router.delete("/{location_id}", response_model=ApiResponse[None])
async def delete_location(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    location_id: str) -> Any:
    location = await get_live_location(db, location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")

    bins = await db.execute(
        select(func.count(Bin.bin_id)).where(Bin.location_id == location_id, Bin.deleted_at.is_(None))
    )
    if bins.scalar():
        raise HTTPException(status_code=409, detail="Cannot delete location with existing bins")

    location.soft_delete()
    location.updated_by = current_user.id
    await db.commit()
    return create_api_response(True, None, "Location deleted successfully")
