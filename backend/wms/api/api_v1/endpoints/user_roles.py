"""User <-> role assignments"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wms.api.deps import CurrentUser, get_current_user, require_super_admin
from wms.api.pagination import PageParams, fetch_page
from wms.api.api_v1.endpoints.roles import get_live_role
from wms.api.api_v1.endpoints.system_logs import record_system_log
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.role import UserRole
from wms.models.user import User
from wms.schemas.role import UserRoleCreate, UserRoleResponse, UserRoleListData

router = APIRouter()


def _base_query():
    return select(UserRole).options(
        selectinload(UserRole.user), selectinload(UserRole.role)
    ).where(UserRole.deleted_at.is_(None))


def _build_response(assignment: UserRole) -> UserRoleResponse:
    return UserRoleResponse(
        id=assignment.id,
        user_id=assignment.user_id,
        role_id=assignment.role_id,
        assigned_by=assignment.assigned_by,
        username=assignment.user.username if assignment.user else "",
        role_slug=assignment.role.slug if assignment.role else "",
        created_at=assignment.created_at)


async def _load(db: AsyncSession, assignment_id: int) -> Optional[UserRole]:
    result = await db.execute(_base_query().where(UserRole.id == assignment_id))
    return result.scalar_one_or_none()


@router.get("/", response_model=ApiResponse[UserRoleListData])
async def list_user_roles(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    user_id: Optional[int] = Query(None),
    role_id: Optional[int] = Query(None)) -> Any:
    query = _base_query()
    if user_id:
        query = query.where(UserRole.user_id == user_id)
    if role_id:
        query = query.where(UserRole.role_id == role_id)

    assignments, total = await fetch_page(db, query.order_by(UserRole.id), page)
    return create_api_response(True, UserRoleListData(
        user_roles=[_build_response(a) for a in assignments],
        total=total,
    ))


@router.get("/{assignment_id}", response_model=ApiResponse[UserRoleResponse])
async def get_user_role(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    assignment_id: int) -> Any:
    assignment = await _load(db, assignment_id)
    if not assignment:
        raise HTTPException(status_code=404, detail="User role assignment not found")
    return create_api_response(True, _build_response(assignment))


@router.post("/", response_model=ApiResponse[UserRoleResponse], status_code=201)
async def assign_role(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_super_admin),
    request: Request,
    assignment_in: UserRoleCreate) -> Any:
    """Assign a role to a user"""
    user = (await db.execute(
        select(User).where(User.id == assignment_in.user_id, User.deleted_at.is_(None))
    )).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    role = await get_live_role(db, assignment_in.role_id)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")

    existing = await db.execute(
        select(UserRole.id).where(
            UserRole.user_id == user.id,
            UserRole.role_id == role.id,
            UserRole.deleted_at.is_(None),
        )
    )
    if existing.first():
        raise HTTPException(status_code=409, detail="User already has this role")

    assignment = UserRole(user_id=user.id, role_id=role.id, assigned_by=current_user.id)
    db.add(assignment)
    await db.flush()
    record_system_log(
        db, "role.assign", f"Role {role.slug} assigned to {user.username}",
        user_id=current_user.id, module="roles", entity_type="user_role",
        entity_id=assignment.id, request=request,
    )
    await db.commit()

    assignment = await _load(db, assignment.id)
    return create_api_response(True, _build_response(assignment), "Role assigned successfully")


@router.delete("/{assignment_id}", response_model=ApiResponse[None])
async def revoke_role(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_super_admin),
    request: Request,
    assignment_id: int) -> Any:
    assignment = await _load(db, assignment_id)
    if not assignment:
        raise HTTPException(status_code=404, detail="User role assignment not found")

    assignment.soft_delete()
    record_system_log(
        db, "role.revoke", f"Role {assignment.role.slug} removed from {assignment.user.username}",
        user_id=current_user.id, module="roles", entity_type="user_role",
        entity_id=assignment.id, request=request,
    )
    await db.commit()
    return create_api_response(True, None, "Role removed successfully")
