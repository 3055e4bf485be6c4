from datetime import datetime
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field

CompanyType = Literal["holding", "subsidiary", "branch"]
CompanyStatus = Literal["active", "inactive"]


class CompanyBase(BaseModel):
    name: str
    code: str
    legal_name: Optional[str] = None
    company_type: CompanyType = "subsidiary"
    parent_company_id: Optional[int] = None
    status: CompanyStatus = "active"
    industry: Optional[str] = None
    tax_id: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = "Indonesia"
    logo: Optional[str] = None
    attendance_enabled: bool = True
    leave_enabled: bool = True
    payroll_enabled: bool = True
    performance_enabled: bool = True


class CompanyCreate(CompanyBase):
    pass


class CompanyUpdate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    legal_name: Optional[str] = None
    company_type: Optional[CompanyType] = None
    parent_company_id: Optional[int] = None
    status: Optional[CompanyStatus] = None
    industry: Optional[str] = None
    tax_id: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    logo: Optional[str] = None
    attendance_enabled: Optional[bool] = None
    leave_enabled: Optional[bool] = None
    payroll_enabled: Optional[bool] = None
    performance_enabled: Optional[bool] = None


class CompanyOut(CompanyBase):
    id: int
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CompanyFeatures(BaseModel):
    company_id: int = Field(validation_alias=AliasChoices("company_id", "id"))
    name: str
    attendance_enabled: bool
    leave_enabled: bool
    payroll_enabled: bool
    performance_enabled: bool

    class Config:
        from_attributes = True


class CompanyFeaturesUpdate(BaseModel):
    attendance_enabled: Optional[bool] = None
    leave_enabled: Optional[bool] = None
    payroll_enabled: Optional[bool] = None
    performance_enabled: Optional[bool] = None
