"""Role <-> permission assignments"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wms.api.deps import CurrentUser, get_current_user, require_super_admin
from wms.api.pagination import PageParams, fetch_page
from wms.api.api_v1.endpoints.permissions import get_live_permission
from wms.api.api_v1.endpoints.roles import get_live_role
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.role import RolePermission
from wms.schemas.role import RolePermissionCreate, RolePermissionResponse, RolePermissionListData

router = APIRouter()


def _base_query():
    return select(RolePermission).options(
        selectinload(RolePermission.role), selectinload(RolePermission.permission)
    ).where(RolePermission.deleted_at.is_(None))


def _build_response(grant: RolePermission) -> RolePermissionResponse:
    return RolePermissionResponse(
        id=grant.id,
        role_id=grant.role_id,
        permission_id=grant.permission_id,
        role_slug=grant.role.slug if grant.role else "",
        permission_slug=grant.permission.slug if grant.permission else "",
        created_at=grant.created_at)


async def _load(db: AsyncSession, grant_id: int) -> Optional[RolePermission]:
    result = await db.execute(_base_query().where(RolePermission.id == grant_id))
    return result.scalar_one_or_none()


@router.get("/", response_model=ApiResponse[RolePermissionListData])
async def list_role_permissions(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    role_id: Optional[int] = Query(None),
    permission_id: Optional[int] = Query(None)) -> Any:
    query = _base_query()
    if role_id:
        query = query.where(RolePermission.role_id == role_id)
    if permission_id:
        query = query.where(RolePermission.permission_id == permission_id)

    grants, total = await fetch_page(db, query.order_by(RolePermission.id), page)
    return create_api_response(True, RolePermissionListData(
        role_permissions=[_build_response(g) for g in grants],
        total=total,
    ))


@router.get("/{grant_id}", response_model=ApiResponse[RolePermissionResponse])
async def get_role_permission(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    grant_id: int) -> Any:
    grant = await _load(db, grant_id)
    if not grant:
        raise HTTPException(status_code=404, detail="Role permission not found")
    return create_api_response(True, _build_response(grant))


@router.post("/", response_model=ApiResponse[RolePermissionResponse], status_code=201)
async def grant_permission(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_super_admin),
    grant_in: RolePermissionCreate) -> Any:
    role = await get_live_role(db, grant_in.role_id)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    permission = await get_live_permission(db, grant_in.permission_id)
    if not permission:
        raise HTTPException(status_code=404, detail="Permission not found")

    existing = await db.execute(
        select(RolePermission.id).where(
            RolePermission.role_id == role.id,
            RolePermission.permission_id == permission.id,
            RolePermission.deleted_at.is_(None),
        )
    )
    if existing.first():
        raise HTTPException(status_code=409, detail="Role already has this permission")

    grant = RolePermission(role_id=role.id, permission_id=permission.id)
    db.add(grant)
    await db.commit()

    grant = await _load(db, grant.id)
    return create_api_response(True, _build_response(grant), "Permission assigned to role successfully")


@router.delete("/{grant_id}", response_model=ApiResponse[None])
async def revoke_permission(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_super_admin),
    grant_id: int) -> Any:
    grant = await _load(db, grant_id)
    if not grant:
        raise HTTPException(status_code=404, detail="Role permission not found")

    grant.soft_delete()
    await db.commit()
    return create_api_response(True, None, "Permission removed from role successfully")
