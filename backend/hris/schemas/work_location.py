from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class WorkLocationCreate(BaseModel):
    company_id: int
    name: str
    code: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    radius_meters: int = Field(100, gt=0)
    require_gps: bool = True
    allow_remote: bool = False
    work_start_time: str = Field("08:00", pattern=TIME_PATTERN)
    work_end_time: str = Field("17:00", pattern=TIME_PATTERN)
    break_start_time: Optional[str] = Field("12:00", pattern=TIME_PATTERN)
    break_end_time: Optional[str] = Field("13:00", pattern=TIME_PATTERN)
    late_tolerance_minutes: int = Field(15, ge=0)
    is_active: bool = True


class WorkLocationUpdate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    radius_meters: Optional[int] = Field(None, gt=0)
    require_gps: Optional[bool] = None
    allow_remote: Optional[bool] = None
    work_start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    work_end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    break_start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    break_end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    late_tolerance_minutes: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class WorkLocationOut(WorkLocationCreate):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
