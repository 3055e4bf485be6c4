"""Organizational structure: departments and positions."""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.sql import func

from hris.db.base_class import Base

POSITION_LEVELS = {
    1: "Entry",
    2: "Junior",
    3: "Mid",
    4: "Senior",
    5: "Lead",
    6: "Manager",
    7: "Director",
}


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    parent_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    # Employee heading the department; not a DB-level FK to keep the
    # departments/employees tables free of a creation cycle.
    head_id = Column(Integer, nullable=True)
    status = Column(String(20), default="active", nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    __table_args__ = (
        UniqueConstraint("company_id", "code", name="uq_departments_company_code"),
    )


class Position(Base):
    __tablename__ = "positions"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    level = Column(Integer, default=1, nullable=False)  # 1..7, see POSITION_LEVELS
    min_salary = Column(Numeric(15, 2), nullable=True)
    max_salary = Column(Numeric(15, 2), nullable=True)
    status = Column(String(20), default="active", nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    __table_args__ = (
        UniqueConstraint("company_id", "code", name="uq_positions_company_code"),
    )

    @property
    def level_name(self) -> str:
        return POSITION_LEVELS.get(self.level, "Unknown")
