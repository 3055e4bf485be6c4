from datetime import date as date_type, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

HolidayType = Literal["national", "religious", "cuti_bersama", "company"]


class HolidayCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    date: date_type
    type: HolidayType = "national"
    company_id: Optional[int] = None
    description: Optional[str] = None
    is_recurring: bool = False


class HolidayUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[date_type] = None
    type: Optional[HolidayType] = None
    description: Optional[str] = None
    is_recurring: Optional[bool] = None
    is_active: Optional[bool] = None


class HolidayBulkCreate(BaseModel):
    holidays: List[HolidayCreate]
    company_id: Optional[int] = None
    skip_duplicates: bool = True


class HolidayOut(BaseModel):
    id: int
    company_id: Optional[int] = None
    name: str
    date: date_type
    type: str
    description: Optional[str] = None
    is_recurring: bool
    source: str
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class HolidayImportResult(BaseModel):
    created: int
    skipped: int
    errors: List[str] = []


class HolidayCalendar(BaseModel):
    year: int
    month: Optional[int] = None
    total: int
    holidays: List[HolidayOut]


class WorkingDaysSummary(BaseModel):
    year: int
    month: int
    total_days: int
    working_days: int
    holiday_count: int
    actual_working_days: int
    holidays: List[HolidayOut]
