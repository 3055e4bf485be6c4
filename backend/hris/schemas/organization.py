from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Status = Literal["active", "inactive"]


class DepartmentCreate(BaseModel):
    company_id: int
    name: str
    code: str
    description: Optional[str] = None
    parent_id: Optional[int] = None
    head_id: Optional[int] = None
    status: Status = "active"


class DepartmentUpdate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[int] = None
    head_id: Optional[int] = None
    status: Optional[Status] = None


class DepartmentOut(BaseModel):
    id: int
    company_id: int
    name: str
    code: str
    description: Optional[str] = None
    parent_id: Optional[int] = None
    head_id: Optional[int] = None
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DepartmentNode(DepartmentOut):
    children: List["DepartmentNode"] = []


class PositionCreate(BaseModel):
    company_id: int
    department_id: Optional[int] = None
    name: str
    code: str
    description: Optional[str] = None
    level: int = Field(1, ge=1, le=7)
    min_salary: Optional[float] = Field(None, ge=0)
    max_salary: Optional[float] = Field(None, ge=0)
    status: Status = "active"


class PositionUpdate(BaseModel):
    department_id: Optional[int] = None
    name: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    level: Optional[int] = Field(None, ge=1, le=7)
    min_salary: Optional[float] = Field(None, ge=0)
    max_salary: Optional[float] = Field(None, ge=0)
    status: Optional[Status] = None


class PositionOut(BaseModel):
    id: int
    company_id: int
    department_id: Optional[int] = None
    name: str
    code: str
    description: Optional[str] = None
    level: int
    level_name: str
    min_salary: Optional[float] = None
    max_salary: Optional[float] = None
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PositionLevel(BaseModel):
    level: int
    name: str
