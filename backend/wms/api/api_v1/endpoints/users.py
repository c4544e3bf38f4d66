"""User management API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import select, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user, require_admin, user_with_roles_query
from wms.api.pagination import PageParams, fetch_page
from wms.api.api_v1.endpoints.system_logs import record_system_log
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.core.security import get_password_hash
from wms.models.user import User
from wms.schemas.user import UserCreate, UserUpdate, UserResponse, UserListData

router = APIRouter()


def build_user_response(user: User) -> UserResponse:
    """Requires user_roles -> role to be loaded."""
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        address=user.address,
        avatar_url=user.avatar_url,
        is_active=user.is_active,
        email_verified=user.email_verified,
        last_login_at=user.last_login_at,
        role_names=user.active_role_slugs(),
        created_at=user.created_at,
        updated_at=user.updated_at)


async def load_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(
        user_with_roles_query().where(User.id == user_id, User.deleted_at.is_(None))
    )
    return result.scalar_one_or_none()


async def ensure_identity_available(
    db: AsyncSession,
    *,
    email: Optional[str] = None,
    username: Optional[str] = None,
    exclude_id: Optional[int] = None) -> None:
    """409 when another live user already owns the email or username."""
    checks = []
    if email:
        checks.append(User.email == email)
    if username:
        checks.append(User.username == username)
    if not checks:
        return
    query = select(User).where(or_(*checks), User.deleted_at.is_(None))
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    existing = (await db.execute(query)).scalars().first()
    if existing:
        field = "email" if email and existing.email == email else "username"
        raise HTTPException(status_code=409, detail=f"A user with this {field} already exists")


@router.get("/", response_model=ApiResponse[UserListData])
async def list_users(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    search: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None)) -> Any:
    """List users"""
    conditions = [User.deleted_at.is_(None)]
    if search:
        like = f"%{search}%"
        conditions.append(or_(
            User.username.ilike(like),
            User.email.ilike(like),
            User.first_name.ilike(like),
            User.last_name.ilike(like),
        ))
    if is_active is not None:
        conditions.append(User.is_active == is_active)

    query = user_with_roles_query().where(and_(*conditions)).order_by(User.id)
    users, total = await fetch_page(db, query, page)
    return create_api_response(True, UserListData(
        users=[build_user_response(u) for u in users],
        total=total,
    ))


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    user_id: int) -> Any:
    user = await load_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return create_api_response(True, build_user_response(user))


@router.post("/", response_model=ApiResponse[UserResponse], status_code=201)
async def create_user(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    request: Request,
    user_in: UserCreate) -> Any:
    """Create a user (admin)"""
    await ensure_identity_available(db, email=user_in.email, username=user_in.username)

    data = user_in.model_dump(exclude={"password"})
    user = User(**data, password_hash=get_password_hash(user_in.password))
    db.add(user)
    await db.flush()

    record_system_log(
        db, "user.create", f"User {user.username} created",
        user_id=current_user.id, module="users", entity_type="user", entity_id=user.id,
        request=request,
    )
    await db.commit()

    user = await load_user(db, user.id)
    return create_api_response(True, build_user_response(user), "User created successfully")


@router.put("/{user_id}", response_model=ApiResponse[UserResponse])
@router.patch("/{user_id}", response_model=ApiResponse[UserResponse])
async def update_user(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    user_id: int,
    user_in: UserUpdate) -> Any:
    """Update a user (admin); a password resets the stored hash"""
    user = await load_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    update_data = user_in.model_dump(exclude_unset=True)
    await ensure_identity_available(
        db,
        email=update_data.get("email"),
        username=update_data.get("username"),
        exclude_id=user.id,
    )

    password = update_data.pop("password", None)
    if password:
        user.password_hash = get_password_hash(password)
    for field, value in update_data.items():
        setattr(user, field, value)

    await db.commit()
    user = await load_user(db, user.id)
    return create_api_response(True, build_user_response(user), "User updated successfully")


@router.delete("/{user_id}", response_model=ApiResponse[None])
async def delete_user(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    request: Request,
    user_id: int) -> Any:
    """Soft-delete a user (admin)"""
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    user = await load_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user.soft_delete()
    user.is_active = False
    record_system_log(
        db, "user.delete", f"User {user.username} deleted",
        level="warning", user_id=current_user.id, module="users", entity_type="user",
        entity_id=user.id, request=request,
    )
    await db.commit()
    return create_api_response(True, None, "User deleted successfully")
