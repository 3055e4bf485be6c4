"""
Employee movements: approvable changes to an employee's placement or pay.

Lifecycle::

    draft -> pending -> approved -> applied
                     -> rejected
    draft | pending  -> cancelled
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Text, ForeignKey, Numeric, Float, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from hris.db.base_class import Base

MOVEMENT_TYPES = (
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
)

STATUS_DRAFT = "draft"
STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
STATUS_CANCELLED = "cancelled"
STATUS_APPLIED = "applied"

MOVEMENT_STATUSES = (
    STATUS_DRAFT,
    STATUS_PENDING,
    STATUS_APPROVED,
    STATUS_REJECTED,
    STATUS_CANCELLED,
    STATUS_APPLIED,
)
TERMINAL_STATUSES = frozenset({STATUS_APPLIED, STATUS_REJECTED, STATUS_CANCELLED})
EDITABLE_STATUSES = frozenset({STATUS_DRAFT, STATUS_PENDING})

# Requested field on the movement -> column it overwrites on the employee
APPLY_FIELD_MAP = {
    "new_position_id": "position_id",
    "new_department_id": "department_id",
    "new_company_id": "company_id",
    "new_salary": "basic_salary",
    "new_grade": "grade_level",
    "new_status": "employment_status",
}


class EmployeeMovement(Base):
    __tablename__ = "employee_movements"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True, index=True)
    movement_type = Column(String(30), nullable=False, index=True)
    effective_date = Column(Date, nullable=False)

    # Snapshot taken when the movement is created
    previous_position_id = Column(Integer, nullable=True)
    previous_department_id = Column(Integer, nullable=True)
    previous_company_id = Column(Integer, nullable=True)
    previous_salary = Column(Numeric(15, 2), nullable=True)
    previous_grade = Column(String(20), nullable=True)
    previous_status = Column(String(20), nullable=True)

    new_position_id = Column(Integer, ForeignKey("positions.id", ondelete="SET NULL"), nullable=True)
    new_department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    new_company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    new_salary = Column(Numeric(15, 2), nullable=True)
    new_grade = Column(String(20), nullable=True)
    new_status = Column(String(20), nullable=True)

    salary_change = Column(Numeric(15, 2), nullable=True)
    salary_change_percentage = Column(Float, nullable=True)

    reason = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(20), default=STATUS_PENDING, nullable=False, index=True)

    requested_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    requested_at = Column(DateTime, nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    approval_notes = Column(Text, nullable=True)
    rejected_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    rejected_at = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    is_applied = Column(Boolean, default=False, nullable=False)
    applied_at = Column(DateTime, nullable=True)
    applied_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    version = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    employee = relationship("Employee", foreign_keys=[employee_id])

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_employee_movements_status_applied", "status", "is_applied"),
    )
