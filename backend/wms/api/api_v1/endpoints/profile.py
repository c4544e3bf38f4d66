"""The caller's own profile"""

from typing import Any
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user
from wms.api.api_v1.endpoints.system_logs import record_system_log
from wms.api.api_v1.endpoints.users import build_user_response, ensure_identity_available, load_user
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.core.security import get_password_hash, verify_password
from wms.schemas.user import PasswordChange, ProfileUpdate, UserResponse

router = APIRouter()


@router.get("/", response_model=ApiResponse[UserResponse])
async def get_profile(*, current_user: CurrentUser = Depends(get_current_user)) -> Any:
    return create_api_response(True, build_user_response(current_user.user))


@router.put("/", response_model=ApiResponse[UserResponse])
@router.patch("/", response_model=ApiResponse[UserResponse])
async def update_profile(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    profile_in: ProfileUpdate) -> Any:
    update_data = profile_in.model_dump(exclude_unset=True)
    await ensure_identity_available(
        db,
        email=update_data.get("email"),
        username=update_data.get("username"),
        exclude_id=current_user.id,
    )

    user = current_user.user
    for field, value in update_data.items():
        setattr(user, field, value)
    await db.commit()

    user = await load_user(db, user.id)
    return create_api_response(True, build_user_response(user), "Profile updated successfully")


@router.post("/password", response_model=ApiResponse[None])
async def change_password(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    request: Request,
    password_in: PasswordChange) -> Any:
    user = current_user.user
    if not verify_password(password_in.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    user.password_hash = get_password_hash(password_in.new_password)
    record_system_log(
        db, "password.change", f"User {user.username} changed their password",
        user_id=user.id, module="auth", entity_type="user", entity_id=user.id, request=request,
    )
    await db.commit()
    return create_api_response(True, None, "Password changed successfully")
