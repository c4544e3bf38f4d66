"""System settings API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user, require_admin
from wms.api.pagination import PageParams, fetch_page
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.system import SystemSetting
from wms.schemas.system import (
    SettingCreate, SettingUpdate, SettingResponse, SettingListData, PublicSetting, SettingGroup
)

router = APIRouter()


async def _get_by_key(db: AsyncSession, key: str) -> SystemSetting:
    result = await db.execute(select(SystemSetting).where(SystemSetting.key == key))
    setting = result.scalar_one_or_none()
    if not setting:
        raise HTTPException(status_code=404, detail="Setting not found")
    return setting


@router.get("/", response_model=ApiResponse[SettingListData])
async def list_settings(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    group: Optional[str] = Query(None),
    is_public: Optional[bool] = Query(None),
    is_editable: Optional[bool] = Query(None)) -> Any:
    query = select(SystemSetting)
    if group:
        query = query.where(SystemSetting.group == group)
    if is_public is not None:
        query = query.where(SystemSetting.is_public == is_public)
    if is_editable is not None:
        query = query.where(SystemSetting.is_editable == is_editable)

    settings_, total = await fetch_page(db, query.order_by(SystemSetting.group, SystemSetting.key), page)
    return create_api_response(True, SettingListData(
        settings=[SettingResponse.model_validate(s) for s in settings_],
        total=total,
    ))


@router.get("/public", response_model=ApiResponse[List[PublicSetting]])
async def list_public_settings(*, db: AsyncSession = Depends(get_db)) -> Any:
    """Public settings; no authentication required"""
    result = await db.execute(
        select(SystemSetting).where(SystemSetting.is_public.is_(True)).order_by(SystemSetting.key)
    )
    return create_api_response(True, [PublicSetting.model_validate(s) for s in result.scalars().all()])


@router.get("/groups/list", response_model=ApiResponse[List[SettingGroup]])
async def list_setting_groups(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)) -> Any:
    rows = await db.execute(
        select(SystemSetting.group, func.count(SystemSetting.id))
        .group_by(SystemSetting.group)
        .order_by(SystemSetting.group)
    )
    return create_api_response(True, [SettingGroup(group=g, count=c) for g, c in rows.all()])


@router.get("/{key}", response_model=ApiResponse[SettingResponse])
async def get_setting(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    key: str) -> Any:
    return create_api_response(True, SettingResponse.model_validate(await _get_by_key(db, key)))


@router.post("/", response_model=ApiResponse[SettingResponse], status_code=201)
async def create_setting(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    setting_in: SettingCreate) -> Any:
    existing = await db.execute(select(SystemSetting.id).where(SystemSetting.key == setting_in.key))
    if existing.first():
        raise HTTPException(status_code=409, detail="Setting with this key already exists")

    setting = SystemSetting(**setting_in.model_dump())
    db.add(setting)
    await db.commit()
    await db.refresh(setting)
    return create_api_response(True, SettingResponse.model_validate(setting), "Setting created successfully")


@router.put("/{key}", response_model=ApiResponse[SettingResponse])
async def update_setting(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    key: str,
    setting_in: SettingUpdate) -> Any:
    setting = await _get_by_key(db, key)
    if not setting.is_editable:
        raise HTTPException(status_code=403, detail="This setting is not editable")

    for field, value in setting_in.model_dump(exclude_unset=True).items():
        setattr(setting, field, value)

    await db.commit()
    await db.refresh(setting)
    return create_api_response(True, SettingResponse.model_validate(setting), "Setting updated successfully")


@router.delete("/{key}", response_model=ApiResponse[None])
async def delete_setting(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    key: str) -> Any:
    setting = await _get_by_key(db, key)
    if not setting.is_editable:
        raise HTTPException(status_code=403, detail="This setting cannot be deleted")

    await db.delete(setting)
    await db.commit()
    return create_api_response(True, None, "Setting deleted successfully")
