"""Permission management API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user, require_super_admin
from wms.api.pagination import PageParams, fetch_page
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.role import Permission
from wms.schemas.role import PermissionCreate, PermissionUpdate, PermissionResponse, PermissionListData

router = APIRouter()


async def get_live_permission(db: AsyncSession, permission_id: int) -> Optional[Permission]:
    result = await db.execute(
        select(Permission).where(Permission.id == permission_id, Permission.deleted_at.is_(None))
    )
    return result.scalar_one_or_none()


async def _ensure_slug_free(db: AsyncSession, slug: str, exclude_id: Optional[int] = None) -> None:
    query = select(Permission.id).where(Permission.slug == slug)
    if exclude_id is not None:
        query = query.where(Permission.id != exclude_id)
    if (await db.execute(query)).first():
        raise HTTPException(status_code=409, detail="Permission with this slug already exists")


@router.get("/", response_model=ApiResponse[PermissionListData])
async def list_permissions(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    module: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None)) -> Any:
    query = select(Permission).where(Permission.deleted_at.is_(None))
    if module:
        query = query.where(Permission.module == module)
    if search:
        query = query.where(or_(Permission.name.ilike(f"%{search}%"), Permission.slug.ilike(f"%{search}%")))
    if is_active is not None:
        query = query.where(Permission.is_active == is_active)

    permissions, total = await fetch_page(db, query.order_by(Permission.module, Permission.name), page)
    return create_api_response(True, PermissionListData(
        permissions=[PermissionResponse.model_validate(p) for p in permissions],
        total=total,
    ))


@router.get("/{permission_id}", response_model=ApiResponse[PermissionResponse])
async def get_permission(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    permission_id: int) -> Any:
    permission = await get_live_permission(db, permission_id)
    if not permission:
        raise HTTPException(status_code=404, detail="Permission not found")
    return create_api_response(True, PermissionResponse.model_validate(permission))


@router.post("/", response_model=ApiResponse[PermissionResponse], status_code=201)
async def create_permission(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_super_admin),
    permission_in: PermissionCreate) -> Any:
    await _ensure_slug_free(db, permission_in.slug)

    permission = Permission(**permission_in.model_dump())
    db.add(permission)
    await db.commit()
    await db.refresh(permission)
    return create_api_response(
        True, PermissionResponse.model_validate(permission), "Permission created successfully"
    )


@router.put("/{permission_id}", response_model=ApiResponse[PermissionResponse])
@router.patch("/{permission_id}", response_model=ApiResponse[PermissionResponse])
async def update_permission(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_super_admin),
    permission_id: int,
    permission_in: PermissionUpdate) -> Any:
    permission = await get_live_permission(db, permission_id)
    if not permission:
        raise HTTPException(status_code=404, detail="Permission not found")

    update_data = permission_in.model_dump(exclude_unset=True)
    if "slug" in update_data and update_data["slug"] != permission.slug:
        await _ensure_slug_free(db, update_data["slug"], exclude_id=permission.id)
    for field, value in update_data.items():
        setattr(permission, field, value)

    await db.commit()
    await db.refresh(permission)
    return create_api_response(
        True, PermissionResponse.model_validate(permission), "Permission updated successfully"
    )


@router.delete("/{permission_id}", response_model=ApiResponse[None])
async def delete_permission(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_super_admin),
    permission_id: int) -> Any:
    permission = await get_live_permission(db, permission_id)
    if not permission:
        raise HTTPException(status_code=404, detail="Permission not found")

    permission.soft_delete()
    await db.commit()
    return create_api_response(True, None, "Permission deleted successfully")
