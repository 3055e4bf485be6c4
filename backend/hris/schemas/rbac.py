from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field


class PermissionOut(BaseModel):
    id: int
    name: str
    display_name: Optional[str] = None
    group: Optional[str] = None
    description: Optional[str] = None

    class Config:
        from_attributes = True


class PermissionGroup(BaseModel):
    group: str
    permissions: List[PermissionOut]


class RoleOut(BaseModel):
    id: int
    name: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    level: int
    is_system: bool
    created_at: Optional[datetime] = None
    permissions: List[PermissionOut] = []

    class Config:
        from_attributes = True


class RoleCreate(BaseModel):
    name: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    level: int = 1
    permission_ids: List[int] = []


class RoleUpdate(BaseModel):
    display_name: Optional[str] = None
    description: Optional[str] = None
    level: Optional[int] = None


class AssignPermissionsRequest(BaseModel):
    role_id: int = Field(validation_alias=AliasChoices("role_id", "roleId"))
    permission_ids: List[int] = Field(validation_alias=AliasChoices("permission_ids", "permissionIds"))


class AssignRolesRequest(BaseModel):
    user_id: int = Field(validation_alias=AliasChoices("user_id", "userId"))
    role_ids: List[int] = Field(validation_alias=AliasChoices("role_ids", "roleIds"))


class PermissionCheckResult(BaseModel):
    user_id: int
    permission: str
    hasPermission: bool
