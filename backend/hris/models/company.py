from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.sql import func

from hris.db.base_class import Base

COMPANY_TYPES = ("holding", "subsidiary", "branch")
COMPANY_STATUSES = ("active", "inactive")

# Feature toggles exposed by /companies/{id}/features
COMPANY_FEATURES = (
    "attendance_enabled",
    "leave_enabled",
    "payroll_enabled",
    "performance_enabled",
)


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50), unique=True, nullable=False, index=True)
    legal_name = Column(String(255), nullable=True)
    company_type = Column(String(20), default="subsidiary", nullable=False)
    parent_company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(20), default="active", nullable=False, index=True)

    industry = Column(String(100), nullable=True)
    tax_id = Column(String(50), nullable=True)  # company NPWP
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    website = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    province = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    country = Column(String(100), default="Indonesia", nullable=True)
    logo = Column(String(500), nullable=True)

    attendance_enabled = Column(Boolean, default=True, nullable=False)
    leave_enabled = Column(Boolean, default=True, nullable=False)
    payroll_enabled = Column(Boolean, default=True, nullable=False)
    performance_enabled = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
