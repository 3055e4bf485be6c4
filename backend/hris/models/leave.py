from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Text, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from hris.db.base_class import Base

LEAVE_STATUSES = ("pending", "approved", "rejected", "cancelled")


class LeaveType(Base):
    __tablename__ = "leave_types"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=True)
    name = Column(String(100), nullable=False)
    code = Column(String(30), nullable=False)
    description = Column(Text, nullable=True)
    default_days = Column(Float, default=12, nullable=False)
    is_paid = Column(Boolean, default=True, nullable=False)
    requires_balance = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    leave_type_id = Column(Integer, ForeignKey("leave_types.id", ondelete="RESTRICT"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_days = Column(Float, nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(String(20), default="pending", nullable=False, index=True)
    approved_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    approval_notes = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    leave_type = relationship("LeaveType", lazy="selectin")


class LeaveBalance(Base):
    __tablename__ = "leave_balances"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    leave_type_id = Column(Integer, ForeignKey("leave_types.id", ondelete="CASCADE"), nullable=False)
    year = Column(Integer, nullable=False)
    allocated_days = Column(Float, default=0, nullable=False)
    used_days = Column(Float, default=0, nullable=False)
    pending_days = Column(Float, default=0, nullable=False)
    carried_forward_days = Column(Float, default=0, nullable=False)

    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    leave_type = relationship("LeaveType", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("employee_id", "leave_type_id", "year", name="uq_leave_balance_employee_type_year"),
    )

    @property
    def remaining_days(self) -> float:
        return (self.allocated_days or 0) + (self.carried_forward_days or 0) - (self.used_days or 0) - (self.pending_days or 0)
