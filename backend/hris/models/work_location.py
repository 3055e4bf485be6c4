from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, Float, ForeignKey
from sqlalchemy.sql import func

from hris.db.base_class import Base


class WorkLocation(Base):
    """Office or site an employee checks in at, with its geofence."""
    __tablename__ = "work_locations"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    province = Column(String(100), nullable=True)

    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    radius_meters = Column(Integer, default=100, nullable=False)

    require_gps = Column(Boolean, default=True, nullable=False)
    allow_remote = Column(Boolean, default=False, nullable=False)

    # "HH:MM" local times
    work_start_time = Column(String(5), default="08:00", nullable=False)
    work_end_time = Column(String(5), default="17:00", nullable=False)
    break_start_time = Column(String(5), default="12:00", nullable=True)
    break_end_time = Column(String(5), default="13:00", nullable=True)
    late_tolerance_minutes = Column(Integer, default=15, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
