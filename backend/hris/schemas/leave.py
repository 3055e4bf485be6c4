from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class LeaveTypeOut(BaseModel):
    id: int
    company_id: Optional[int] = None
    name: str
    code: str
    description: Optional[str] = None
    default_days: float
    is_paid: bool
    requires_balance: bool
    is_active: bool

    class Config:
        from_attributes = True


class LeaveRequestCreate(BaseModel):
    leave_type_id: int
    start_date: date
    end_date: date
    reason: Optional[str] = None
    # HR may file on behalf of an employee
    employee_id: Optional[int] = None


class LeaveRequestUpdate(BaseModel):
    leave_type_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None


class LeaveApproveRequest(BaseModel):
    approval_notes: Optional[str] = None


class LeaveRejectRequest(BaseModel):
    rejection_reason: str


class LeaveRequestOut(BaseModel):
    id: int
    employee_id: int
    leave_type_id: int
    leave_type: Optional[LeaveTypeOut] = None
    start_date: date
    end_date: date
    total_days: float
    reason: Optional[str] = None
    status: str
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    approval_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LeaveBalanceOut(BaseModel):
    id: int
    employee_id: int
    leave_type_id: int
    leave_type: Optional[LeaveTypeOut] = None
    year: int
    allocated_days: float
    used_days: float
    pending_days: float
    carried_forward_days: float
    remaining_days: float

    class Config:
        from_attributes = True


class AllocateBalanceRequest(BaseModel):
    employee_id: int
    leave_type_id: int
    year: int
    allocated_days: float = Field(..., ge=0)
    carried_forward_days: float = Field(0, ge=0)


class AdjustBalanceRequest(BaseModel):
    employee_id: int
    leave_type_id: int
    year: int
    adjustment_days: float
    adjustment_reason: str
