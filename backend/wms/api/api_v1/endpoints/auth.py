"""Login, registration and the current user"""

from typing import Any
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user, user_with_roles_query
from wms.api.api_v1.endpoints.system_logs import record_system_log
from wms.api.api_v1.endpoints.users import build_user_response, ensure_identity_available, load_user
from wms.core.deps import get_db
from wms.core.logging_config import get_logger
from wms.core.responses import ApiResponse, create_api_response
from wms.core.security import create_access_token, get_password_hash, verify_password
from wms.models.user import User
from wms.schemas.user import AuthData, LoginRequest, RegisterRequest, UserResponse

router = APIRouter()
logger = get_logger(__name__)


def issue_token(user: User) -> str:
    return create_access_token(
        user_id=user.id,
        email=user.email,
        username=user.username,
        role_names=user.active_role_slugs(),
    )


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(
    *,
    db: AsyncSession = Depends(get_db),
    request: Request,
    credentials: LoginRequest) -> Any:
    """Exchange email and password for a token"""
    result = await db.execute(
        user_with_roles_query().where(User.email == credentials.email, User.deleted_at.is_(None))
    )
    user = result.scalar_one_or_none()
    if not user or not user.is_active or not verify_password(credentials.password, user.password_hash):
        logger.info(f"Failed login for {credentials.email}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    user.last_login_at = datetime.utcnow()
    record_system_log(
        db, "login", f"User {user.username} logged in",
        user_id=user.id, module="auth", entity_type="user", entity_id=user.id, request=request,
    )
    await db.commit()

    return create_api_response(
        True,
        AuthData(user=build_user_response(user), token=issue_token(user)),
        "Login successful",
    )


@router.post("/register", response_model=ApiResponse[AuthData], status_code=201)
async def register(
    *,
    db: AsyncSession = Depends(get_db),
    request: Request,
    user_in: RegisterRequest) -> Any:
    """Self-service registration; new accounts start without roles"""
    await ensure_identity_available(db, email=user_in.email, username=user_in.username)

    user = User(
        username=user_in.username,
        email=user_in.email,
        first_name=user_in.first_name,
        last_name=user_in.last_name,
        password_hash=get_password_hash(user_in.password),
        is_active=True,
        email_verified=False)
    db.add(user)
    await db.flush()

    record_system_log(
        db, "register", f"User {user.username} registered",
        user_id=user.id, module="auth", entity_type="user", entity_id=user.id, request=request,
    )
    await db.commit()

    user = await load_user(db, user.id)
    return create_api_response(
        True,
        AuthData(user=build_user_response(user), token=issue_token(user)),
        "User registered successfully",
    )


@router.get("/me", response_model=ApiResponse[UserResponse])
async def me(*, current_user: CurrentUser = Depends(get_current_user)) -> Any:
    return create_api_response(True, build_user_response(current_user.user))
