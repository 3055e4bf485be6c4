from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Text, Float, ForeignKey, UniqueConstraint

from sqlalchemy.sql import func

from hris.db.base_class import Base

ATTENDANCE_STATUSES = ("present", "absent", "late", "early_leave", "half_day", "on_leave")


class Attendance(Base):
    __tablename__ = "attendances"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    work_location_id = Column(Integer, ForeignKey("work_locations.id", ondelete="SET NULL"), nullable=True)
    date = Column(Date, nullable=False, index=True)

    check_in_time = Column(DateTime, nullable=True)
    check_in_latitude = Column(Float, nullable=True)
    check_in_longitude = Column(Float, nullable=True)
    check_in_distance_meters = Column(Float, nullable=True)
    check_out_time = Column(DateTime, nullable=True)
    check_out_latitude = Column(Float, nullable=True)
    check_out_longitude = Column(Float, nullable=True)
    break_start = Column(DateTime, nullable=True)
    break_end = Column(DateTime, nullable=True)

    status = Column(String(20), default="present", nullable=False)
    is_late = Column(Boolean, default=False, nullable=False)
    late_minutes = Column(Integer, default=0, nullable=False)
    work_hours = Column(Float, nullable=True)
    overtime_hours = Column(Float, default=0.0, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),
    )
