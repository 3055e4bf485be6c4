from datetime import date as date_type, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

from hris.schemas.employee import EmployeeRef

OvertimeType = Literal["regular", "weekend", "holiday"]

CLOCK_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class OvertimeCreate(BaseModel):
    date: date_type
    start_time: Optional[str] = Field(None, pattern=CLOCK_PATTERN)
    end_time: Optional[str] = Field(None, pattern=CLOCK_PATTERN)
    # Takes precedence over start/end when given
    hours: Optional[float] = Field(None, gt=0, le=24)
    break_minutes: int = Field(0, ge=0)
    reason: str = Field(..., min_length=1)
    task_description: Optional[str] = None
    overtime_type: Optional[OvertimeType] = None
    rate_multiplier: Optional[float] = Field(None, gt=0)
    # HR may file on behalf of an employee
    employee_id: Optional[int] = None


class OvertimeUpdate(BaseModel):
    date: Optional[date_type] = None
    start_time: Optional[str] = Field(None, pattern=CLOCK_PATTERN)
    end_time: Optional[str] = Field(None, pattern=CLOCK_PATTERN)
    hours: Optional[float] = Field(None, gt=0, le=24)
    break_minutes: Optional[int] = Field(None, ge=0)
    reason: Optional[str] = None
    task_description: Optional[str] = None
    overtime_type: Optional[OvertimeType] = None


class OvertimeApproveRequest(BaseModel):
    approval_notes: Optional[str] = None


class OvertimeRejectRequest(BaseModel):
    rejection_reason: str


class OvertimeOut(BaseModel):
    id: int
    employee_id: int
    company_id: Optional[int] = None
    employee: Optional[EmployeeRef] = None
    date: date_type
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    break_minutes: int
    hours: float
    reason: str
    task_description: Optional[str] = None
    overtime_type: str
    rate_multiplier: float
    rate_per_hour: Decimal
    total_amount: Decimal
    status: str
    requested_by: Optional[int] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    approval_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
