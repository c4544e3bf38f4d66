"""Authentication and role dependencies."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wms.core.deps import get_db
from wms.core.logging_config import get_logger
from wms.core.security import decode_access_token
from wms.models.role import UserRole
from wms.models.user import User

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    """The authenticated user attached to a request."""
    user: User
    role_names: List[str] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.user.id

    @property
    def email(self) -> str:
        return self.user.email

    @property
    def username(self) -> str:
        return self.user.username

    def has_any_role(self, roles) -> bool:
        owned = {r.lower() for r in self.role_names}
        return any(r.lower() in owned for r in roles)


def user_with_roles_query():
    return select(User).options(selectinload(User.user_roles).selectinload(UserRole.role))


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Authorization token required")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    try:
        result = await db.execute(
            user_with_roles_query().where(User.id == payload["id"], User.deleted_at.is_(None))
        )
        user = result.scalar_one_or_none()
        if user is None or not user.is_active:
            raise HTTPException(status_code=401, detail="User not found or inactive")

        user.last_login_at = datetime.utcnow()
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Failed to load the authenticated user")
        raise HTTPException(status_code=500, detail="Authentication server error")

    return CurrentUser(user=user, role_names=user.active_role_slugs())


def require_roles(*roles: str):
    """Dependency factory: the user must hold at least one of `roles` (case-insensitive)."""
    async def checker(current_user: Optional[CurrentUser] = Depends(get_current_user)) -> CurrentUser:
        if current_user is None:
            raise HTTPException(status_code=401, detail="Authentication required")
        if not current_user.has_any_role(roles):
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return current_user

    return checker


require_admin = require_roles("admin", "super-admin")
require_super_admin = require_roles("super-admin")
