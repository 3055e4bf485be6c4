from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr

EmploymentStatus = Literal["active", "inactive", "terminated", "resigned", "retired"]
EmploymentType = Literal["permanent", "contract", "intern", "freelance"]
PTKPStatus = Literal["TK/0", "TK/1", "TK/2", "TK/3", "K/0", "K/1", "K/2", "K/3"]


class SelfServiceFields(BaseModel):
    """Fields an employee may maintain on their own record."""

    phone: Optional[str] = None
    mobile_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    current_address: Optional[str] = None
    current_city: Optional[str] = None
    current_province: Optional[str] = None
    current_postal_code: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_relationship: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    national_id: Optional[str] = None
    family_card_number: Optional[str] = None
    npwp_number: Optional[str] = None
    bank_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    bank_account_holder: Optional[str] = None
    avatar: Optional[str] = None
    education_level: Optional[str] = None
    education_major: Optional[str] = None
    education_institution: Optional[str] = None
    graduation_year: Optional[int] = None
    spouse_name: Optional[str] = None
    children_count: Optional[int] = None
    number_of_dependents: Optional[int] = None


class EmployeeSelfUpdate(SelfServiceFields):
    class Config:
        extra = "forbid"


class EmployeeFields(SelfServiceFields):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    gender: Optional[Literal["male", "female"]] = None
    date_of_birth: Optional[date] = None
    place_of_birth: Optional[str] = None
    marital_status: Optional[str] = None
    religion: Optional[str] = None
    blood_type: Optional[str] = None
    nationality: Optional[str] = None
    company_id: Optional[int] = None
    department_id: Optional[int] = None
    position_id: Optional[int] = None
    manager_id: Optional[int] = None
    work_location_id: Optional[int] = None
    grade_level: Optional[str] = None
    join_date: Optional[date] = None
    permanent_date: Optional[date] = None
    contract_end_date: Optional[date] = None
    resign_date: Optional[date] = None
    employment_status: Optional[EmploymentStatus] = None
    employment_type: Optional[EmploymentType] = None
    basic_salary: Optional[float] = None
    ptkp_status: Optional[PTKPStatus] = None
    bpjs_kesehatan_number: Optional[str] = None
    bpjs_ketenagakerjaan_number: Optional[str] = None


class EmployeeCreate(EmployeeFields):
    # Generated from the company code when omitted
    employee_id: Optional[str] = None
    first_name: str
    company_id: int
    employment_status: EmploymentStatus = "active"
    employment_type: EmploymentType = "permanent"
    ptkp_status: PTKPStatus = "TK/0"


class EmployeeUpdate(EmployeeFields):
    employee_id: Optional[str] = None


class NamedRef(BaseModel):
    id: int
    name: str
    code: Optional[str] = None

    class Config:
        from_attributes = True


class EmployeeRef(BaseModel):
    id: int
    employee_id: str
    full_name: str
    email: Optional[str] = None

    class Config:
        from_attributes = True


class EmployeeOut(EmployeeFields):
    id: int
    employee_id: str
    first_name: str
    full_name: str
    employment_status: str
    employment_type: str
    ptkp_status: Optional[str] = None
    email: Optional[str] = None
    company: Optional[NamedRef] = None
    department: Optional[NamedRef] = None
    position: Optional[NamedRef] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NextEmployeeId(BaseModel):
    company_id: int
    employee_id: str
