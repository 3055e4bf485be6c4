from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Text, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from hris.db.base_class import Base

HOLIDAY_TYPES = ("national", "religious", "cuti_bersama", "company")
HOLIDAY_SOURCES = ("manual", "seed", "import")


class Holiday(Base):
    """A non-working day. ``company_id`` is None for holidays every company observes."""
    __tablename__ = "holidays"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    type = Column(String(20), default="national", nullable=False)
    description = Column(Text, nullable=True)
    # Recurring holidays repeat on the same month and day every year
    is_recurring = Column(Boolean, default=False, nullable=False)
    source = Column(String(20), default="manual", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    __table_args__ = (
        UniqueConstraint("company_id", "date", "name", name="uq_holiday_company_date_name"),
    )
