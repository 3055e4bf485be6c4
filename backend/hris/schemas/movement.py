from datetime import date, datetime
from typing import Dict, Literal, Optional

from pydantic import BaseModel

from hris.schemas.employee import EmployeeRef

MovementType = Literal[
    "promotion",
    "demotion",
    "transfer",
    "mutation",
    "salary_adjustment",
    "grade_change",
    "status_change",
    "department_change",
    "position_change",
    "company_transfer",
]
MovementStatus = Literal["draft", "pending", "approved", "rejected", "cancelled", "applied"]


class MovementRequestedChanges(BaseModel):
    new_position_id: Optional[int] = None
    new_department_id: Optional[int] = None
    new_company_id: Optional[int] = None
    new_salary: Optional[float] = None
    new_grade: Optional[str] = None
    new_status: Optional[Literal["active", "inactive", "terminated", "resigned", "retired"]] = None


class MovementCreate(MovementRequestedChanges):
    employee_id: int
    movement_type: MovementType
    effective_date: date
    reason: Optional[str] = None
    notes: Optional[str] = None
    save_as_draft: bool = False


class MovementUpdate(MovementRequestedChanges):
    movement_type: Optional[MovementType] = None
    effective_date: Optional[date] = None
    reason: Optional[str] = None
    notes: Optional[str] = None


class ApproveMovementRequest(BaseModel):
    approval_notes: Optional[str] = None


class RejectMovementRequest(BaseModel):
    rejection_reason: str


class MovementOut(MovementRequestedChanges):
    id: int
    employee_id: int
    company_id: Optional[int] = None
    movement_type: str
    effective_date: date
    previous_position_id: Optional[int] = None
    previous_department_id: Optional[int] = None
    previous_company_id: Optional[int] = None
    previous_salary: Optional[float] = None
    previous_grade: Optional[str] = None
    previous_status: Optional[str] = None
    new_status: Optional[str] = None
    salary_change: Optional[float] = None
    salary_change_percentage: Optional[float] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    status: str
    requested_by: Optional[int] = None
    requested_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    approval_notes: Optional[str] = None
    rejected_by: Optional[int] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    is_applied: bool
    applied_at: Optional[datetime] = None
    applied_by: Optional[int] = None
    version: int
    employee: Optional[EmployeeRef] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MovementStatistics(BaseModel):
    total_movements: int
    pending_count: int
    ready_to_apply_count: int
    applied_count: int
    avg_salary_change_percentage: float
    by_type: Dict[str, int]
    by_status: Dict[str, int]
