"""Warehouse API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy import select, or_, func
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user
from wms.api.pagination import PageParams, fetch_page
from wms.api.api_v1.endpoints.system_logs import record_system_log
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.core.text import warehouse_codes
from wms.models.warehouse import Warehouse, Zone
from wms.schemas.warehouse import (
    WarehouseCreate, WarehouseUpdate, WarehouseResponse, WarehouseListData
)

router = APIRouter()


async def get_live_warehouse(db: AsyncSession, warehouse_id: str) -> Optional[Warehouse]:
    result = await db.execute(
        select(Warehouse).where(Warehouse.warehouse_id == warehouse_id, Warehouse.deleted_at.is_(None))
    )
    return result.scalar_one_or_none()


async def _ensure_code_free(db: AsyncSession, code: str, exclude_id: Optional[str] = None) -> None:
    query = select(Warehouse.warehouse_id).where(
        or_(Warehouse.warehouse_code == code, func.upper(Warehouse.warehouse_code) == code.upper())
    )
    if exclude_id is not None:
        query = query.where(Warehouse.warehouse_id != exclude_id)
    if (await db.execute(query)).first():
        raise HTTPException(status_code=409, detail="Warehouse with this code already exists")


@router.get("/", response_model=ApiResponse[WarehouseListData])
async def list_warehouses(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    is_active: Optional[bool] = Query(None),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="name, code or city")) -> Any:
    """List warehouses ordered by name"""
    query = select(Warehouse).where(Warehouse.deleted_at.is_(None))
    if is_active is not None:
        query = query.where(Warehouse.is_active == is_active)
    if status:
        query = query.where(Warehouse.status == status)
    if search:
        like = f"%{search}%"
        query = query.where(or_(
            Warehouse.warehouse_name.ilike(like),
            Warehouse.warehouse_code.ilike(like),
            Warehouse.city.ilike(like),
        ))

    warehouses, total = await fetch_page(db, query.order_by(Warehouse.warehouse_name), page)
    return create_api_response(True, WarehouseListData(
        warehouses=[WarehouseResponse.model_validate(w) for w in warehouses],
        total=total,
    ))


@router.get("/{warehouse_id}", response_model=ApiResponse[WarehouseResponse])
async def get_warehouse(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    warehouse_id: str) -> Any:
    warehouse = await get_live_warehouse(db, warehouse_id)
    if not warehouse:
        raise HTTPException(status_code=404, detail="Warehouse not found")
    return create_api_response(True, WarehouseResponse.model_validate(warehouse))


@router.post("/", response_model=ApiResponse[WarehouseResponse], status_code=201)
async def create_warehouse(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    request: Request,
    warehouse_in: WarehouseCreate) -> Any:
    """Create a warehouse; the lookup codes are derived from warehouse_code"""
    await _ensure_code_free(db, warehouse_in.warehouse_code)

    data = warehouse_in.model_dump(exclude_none=True)
    lc_code, full_code = warehouse_codes(warehouse_in.warehouse_code)
    warehouse = Warehouse(
        **data,
        lc_warehouse_code=lc_code,
        lc_full_code=full_code,
        created_by=current_user.id,
        updated_by=current_user.id)
    db.add(warehouse)
    await db.flush()

    record_system_log(
        db, "warehouse.create", f"Warehouse {warehouse.warehouse_code} created",
        user_id=current_user.id, module="warehouses", entity_type="warehouse",
        entity_id=warehouse.warehouse_id, request=request,
    )
    await db.commit()
    await db.refresh(warehouse)
    return create_api_response(True, WarehouseResponse.model_validate(warehouse), "Warehouse created successfully")


@router.put("/{warehouse_id}", response_model=ApiResponse[WarehouseResponse])
@router.patch("/{warehouse_id}", response_model=ApiResponse[WarehouseResponse])
async def update_warehouse(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    warehouse_id: str,
    warehouse_in: WarehouseUpdate) -> Any:
    warehouse = await get_live_warehouse(db, warehouse_id)
    if not warehouse:
        raise HTTPException(status_code=404, detail="Warehouse not found")

    update_data = warehouse_in.model_dump(exclude_unset=True)
    low = update_data.get("temperature_min", warehouse.temperature_min)
    high = update_data.get("temperature_max", warehouse.temperature_max)
    if low is not None and high is not None and low > high:
        raise RequestValidationError([{
            "loc": ("body", "temperature_min"),
            "msg": "temperature_min must not exceed temperature_max",
            "type": "value_error",
        }])

    code = update_data.get("warehouse_code")
    if code and code != warehouse.warehouse_code:
        await _ensure_code_free(db, code, exclude_id=warehouse.warehouse_id)
        warehouse.lc_warehouse_code, warehouse.lc_full_code = warehouse_codes(code)

    for field, value in update_data.items():
        setattr(warehouse, field, value)
    warehouse.updated_by = current_user.id

    await db.commit()
    await db.refresh(warehouse)
    return create_api_response(True, WarehouseResponse.model_validate(warehouse), "Warehouse updated successfully")


@router.delete("/{warehouse_id}", response_model=ApiResponse[None])
async def delete_warehouse(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    request: Request,
    warehouse_id: str) -> Any:
    """Soft-delete a warehouse that has no live zones"""
    warehouse = await get_live_warehouse(db, warehouse_id)
    if not warehouse:
        raise HTTPException(status_code=404, detail="Warehouse not found")

    zones = await db.execute(
        select(func.count(Zone.zone_id)).where(Zone.warehouse_id == warehouse_id, Zone.deleted_at.is_(None))
    )
    if zones.scalar():
        raise HTTPException(status_code=409, detail="Cannot delete warehouse with existing zones")

    warehouse.soft_delete()
    warehouse.updated_by = current_user.id
    record_system_log(
        db, "warehouse.delete", f"Warehouse {warehouse.warehouse_code} deleted",
        level="warning", user_id=current_user.id, module="warehouses", entity_type="warehouse",
        entity_id=warehouse.warehouse_id, request=request,
    )
    await db.commit()
    return create_api_response(True, None, "Warehouse deleted successfully")
