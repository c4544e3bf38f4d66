"""Bin API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user
from wms.api.pagination import PageParams, fetch_page
from wms.api.api_v1.endpoints.locations import get_live_location
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.warehouse import Bin
from wms.schemas.warehouse import BinCreate, BinUpdate, BinResponse, BinListData

router = APIRouter()


async def get_live_bin(db: AsyncSession, bin_id: str) -> Optional[Bin]:
    result = await db.execute(select(Bin).where(Bin.bin_id == bin_id, Bin.deleted_at.is_(None)))
    return result.scalar_one_or_none()


@router.get("/", response_model=ApiResponse[BinListData])
async def list_bins(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    location_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None)) -> Any:
    query = select(Bin).where(Bin.deleted_at.is_(None))
    if location_id:
        query = query.where(Bin.location_id == location_id)
    if status:
        query = query.where(Bin.status == status)
    if is_active is not None:
        query = query.where(Bin.is_active == is_active)

    bins, total = await fetch_page(db, query.order_by(Bin.bin_code), page)
    return create_api_response(True, BinListData(
        bins=[BinResponse.model_validate(b) for b in bins],
        total=total,
    ))


@router.get("/{bin_id}", response_model=ApiResponse[BinResponse])
async def get_bin(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    bin_id: str) -> Any:
    bin_ = await get_live_bin(db, bin_id)
    if not bin_:
        raise HTTPException(status_code=404, detail="Bin not found")
    return create_api_response(True, BinResponse.model_validate(bin_))


@router.post("/", response_model=ApiResponse[BinResponse], status_code=201)
async def create_bin(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    bin_in: BinCreate) -> Any:
    if not await get_live_location(db, bin_in.location_id):
        raise HTTPException(status_code=404, detail="Location not found")

    bin_ = Bin(**bin_in.model_dump(exclude_none=True), created_by=current_user.id, updated_by=current_user.id)
    db.add(bin_)
    await db.commit()
    await db.refresh(bin_)
    return create_api_response(True, BinResponse.model_validate(bin_), "Bin created successfully")


@router.put("/{bin_id}", response_model=ApiResponse[BinResponse])
@router.patch("/{bin_id}", response_model=ApiResponse[BinResponse])
async def update_bin(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    bin_id: str,
    bin_in: BinUpdate) -> Any:
    bin_ = await get_live_bin(db, bin_id)
    if not bin_:
        raise HTTPException(status_code=404, detail="Bin not found")

    for field, value in bin_in.model_dump(exclude_unset=True).items():
        setattr(bin_, field, value)
    bin_.updated_by = current_user.id

    await db.commit()
    await db.refresh(bin_)
    return create_api_response(True, BinResponse.model_validate(bin_), "Bin updated successfully")


@router.delete("/{bin_id}", response_model=ApiResponse[None])
async def delete_bin(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    bin_id: str) -> Any:
    bin_ = await get_live_bin(db, bin_id)
    if not bin_:
        raise HTTPException(status_code=404, detail="Bin not found")

    bin_.soft_delete()
    bin_.updated_by = current_user.id
    await db.commit()
    return create_api_response(True, None, "Bin deleted successfully")
