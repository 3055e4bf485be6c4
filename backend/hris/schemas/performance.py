from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

ReviewStatus = Literal["draft", "pending_review", "in_progress", "completed"]


class ReviewCreate(BaseModel):
    employee_id: int
    reviewer_id: Optional[int] = None
    review_period: str
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    review_date: Optional[date] = None
    overall_rating: Optional[int] = Field(None, ge=1, le=5)
    goals_achievement: Optional[float] = Field(None, ge=0, le=100)
    competency_score: Optional[float] = Field(None, ge=0)
    strengths: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    comments: Optional[str] = None
    status: ReviewStatus = "draft"


class ReviewUpdate(BaseModel):
    reviewer_id: Optional[int] = None
    review_period: Optional[str] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    review_date: Optional[date] = None
    overall_rating: Optional[int] = Field(None, ge=1, le=5)
    goals_achievement: Optional[float] = Field(None, ge=0, le=100)
    competency_score: Optional[float] = Field(None, ge=0)
    strengths: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    comments: Optional[str] = None


class ReviewStatusChange(BaseModel):
    status: ReviewStatus


class ReviewOut(ReviewCreate):
    id: int
    overall_rating: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
