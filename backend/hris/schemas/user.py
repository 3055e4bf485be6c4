from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class RoleSummary(BaseModel):
    id: int
    name: str
    display_name: Optional[str] = None

    class Config:
        from_attributes = True


class UserOut(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    is_active: bool
    force_password_change: bool = False
    employee_id: Optional[int] = None
    company_id: Optional[int] = None
    avatar: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    roles: List[RoleSummary] = []

    class Config:
        from_attributes = True


class UserDetail(UserOut):
    permissions: List[str] = Field(default_factory=list, validation_alias="permission_names")


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None
    is_active: bool = True
    force_password_change: bool = True
    employee_id: Optional[int] = None
    company_id: Optional[int] = None
    role_ids: List[int] = []


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    full_name: Optional[str] = None
    is_active: Optional[bool] = None
    force_password_change: Optional[bool] = None
    employee_id: Optional[int] = None
    company_id: Optional[int] = None
    avatar: Optional[str] = None
    role_ids: Optional[List[int]] = None


class RoleCount(BaseModel):
    role: str
    count: int


class UserStats(BaseModel):
    total: int
    active: int
    inactive: int
    recentLogins: int
    roleDistribution: List[RoleCount]
