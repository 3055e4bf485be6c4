from sqlalchemy import Column, Integer, String, DateTime, Date, Text, Float, ForeignKey
from sqlalchemy.sql import func

from hris.db.base_class import Base

REVIEW_STATUSES = ("draft", "pending_review", "in_progress", "completed")


class PerformanceReview(Base):
    __tablename__ = "performance_reviews"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    review_period = Column(String(50), nullable=False)  # e.g. "2024-H1"
    period_start = Column(Date, nullable=True)
    period_end = Column(Date, nullable=True)
    review_date = Column(Date, nullable=True)

    overall_rating = Column(Integer, nullable=True)  # 1..5
    goals_achievement = Column(Float, nullable=True)  # percent
    competency_score = Column(Float, nullable=True)
    strengths = Column(Text, nullable=True)
    areas_for_improvement = Column(Text, nullable=True)
    comments = Column(Text, nullable=True)
    status = Column(String(20), default="draft", nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
