"""Role management API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user, require_super_admin
from wms.api.pagination import PageParams, fetch_page
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.role import Role, UserRole
from wms.schemas.role import RoleCreate, RoleUpdate, RoleResponse, RoleListData

router = APIRouter()


async def get_live_role(db: AsyncSession, role_id: int) -> Optional[Role]:
    result = await db.execute(select(Role).where(Role.id == role_id, Role.deleted_at.is_(None)))
    return result.scalar_one_or_none()


async def _ensure_slug_free(db: AsyncSession, slug: str, exclude_id: Optional[int] = None) -> None:
    query = select(Role.id).where(Role.slug == slug)
    if exclude_id is not None:
        query = query.where(Role.id != exclude_id)
    if (await db.execute(query)).first():
        raise HTTPException(status_code=409, detail="Role with this slug already exists")


@router.get("/", response_model=ApiResponse[RoleListData])
async def list_roles(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    search: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None)) -> Any:
    query = select(Role).where(Role.deleted_at.is_(None))
    if search:
        query = query.where(or_(Role.name.ilike(f"%{search}%"), Role.slug.ilike(f"%{search}%")))
    if is_active is not None:
        query = query.where(Role.is_active == is_active)

    roles, total = await fetch_page(db, query.order_by(Role.name), page)
    return create_api_response(True, RoleListData(
        roles=[RoleResponse.model_validate(r) for r in roles],
        total=total,
    ))


@router.get("/{role_id}", response_model=ApiResponse[RoleResponse])
async def get_role(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    role_id: int) -> Any:
    role = await get_live_role(db, role_id)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    return create_api_response(True, RoleResponse.model_validate(role))


@router.post("/", response_model=ApiResponse[RoleResponse], status_code=201)
async def create_role(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_super_admin),
    role_in: RoleCreate) -> Any:
    # slugs stay unique even across soft-deleted rows
    await _ensure_slug_free(db, role_in.slug)

    role = Role(**role_in.model_dump())
    db.add(role)
    await db.commit()
    await db.refresh(role)
    return create_api_response(True, RoleResponse.model_validate(role), "Role created successfully")


@router.put("/{role_id}", response_model=ApiResponse[RoleResponse])
@router.patch("/{role_id}", response_model=ApiResponse[RoleResponse])
async def update_role(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_super_admin),
    role_id: int,
    role_in: RoleUpdate) -> Any:
    role = await get_live_role(db, role_id)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")

    update_data = role_in.model_dump(exclude_unset=True)
    if "slug" in update_data and update_data["slug"] != role.slug:
        await _ensure_slug_free(db, update_data["slug"], exclude_id=role.id)
    for field, value in update_data.items():
        setattr(role, field, value)

    await db.commit()
    await db.refresh(role)
    return create_api_response(True, RoleResponse.model_validate(role), "Role updated successfully")


@router.delete("/{role_id}", response_model=ApiResponse[None])
async def delete_role(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_super_admin),
    role_id: int) -> Any:
    role = await get_live_role(db, role_id)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")

    assigned = await db.execute(
        select(UserRole.id).where(UserRole.role_id == role.id, UserRole.deleted_at.is_(None)).limit(1)
    )
    if assigned.first():
        raise HTTPException(status_code=409, detail="Role is still assigned to users")

    role.soft_delete()
    await db.commit()
    return create_api_response(True, None, "Role deleted successfully")
