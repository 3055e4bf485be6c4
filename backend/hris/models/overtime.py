from sqlalchemy import Column, Integer, String, DateTime, Date, Text, Float, ForeignKey, Numeric, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from hris.db.base_class import Base

OVERTIME_TYPES = ("regular", "weekend", "holiday")
OVERTIME_STATUSES = ("pending", "approved", "rejected", "cancelled")


class OvertimeRequest(Base):
    __tablename__ = "overtime_requests"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=True)  # HH:MM
    end_time = Column(String(5), nullable=True)
    break_minutes = Column(Integer, default=0, nullable=False)
    hours = Column(Float, nullable=False)
    reason = Column(Text, nullable=False)
    task_description = Column(Text, nullable=True)

    overtime_type = Column(String(20), default="regular", nullable=False)
    rate_multiplier = Column(Float, nullable=False)
    rate_per_hour = Column(Numeric(15, 2), default=0, nullable=False)
    total_amount = Column(Numeric(15, 2), default=0, nullable=False)

    status = Column(String(20), default="pending", nullable=False, index=True)
    requested_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    approval_notes = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    employee = relationship("Employee", lazy="selectin")

    __table_args__ = (
        Index("ix_overtime_requests_employee_date", "employee_id", "date"),
    )
