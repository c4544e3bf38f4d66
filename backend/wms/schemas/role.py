from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field

from wms.schemas.common import not_null

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


# ========== roles ==========

class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    is_active: bool = True


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    is_active: Optional[bool] = None

    check_not_null = not_null("name", "slug", "is_active")


class RoleResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RoleListData(BaseModel):
    roles: List[RoleResponse]
    total: int


# ========== permissions ==========

class PermissionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    module: Optional[str] = Field(None, max_length=50)
    is_active: bool = True


class PermissionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    module: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None

    check_not_null = not_null("name", "slug", "is_active")


class PermissionResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    module: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PermissionListData(BaseModel):
    permissions: List[PermissionResponse]
    total: int


# ========== assignments ==========

class UserRoleCreate(BaseModel):
    user_id: int
    role_id: int


class UserRoleResponse(BaseModel):
    id: int
    user_id: int
    role_id: int
    assigned_by: Optional[int] = None
    username: str = ""
    role_slug: str = ""
    created_at: datetime


class UserRoleListData(BaseModel):
    user_roles: List[UserRoleResponse]
    total: int


class RolePermissionCreate(BaseModel):
    role_id: int
    permission_id: int


class RolePermissionResponse(BaseModel):
    id: int
    role_id: int
    permission_id: int
    role_slug: str = ""
    permission_slug: str = ""
    created_at: datetime


class RolePermissionListData(BaseModel):
    role_permissions: List[RolePermissionResponse]
    total: int
