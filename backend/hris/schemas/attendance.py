from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

AttendanceStatus = Literal["present", "absent", "late", "early_leave", "half_day", "on_leave"]


class CheckInRequest(BaseModel):
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    notes: Optional[str] = None


class CheckOutRequest(CheckInRequest):
    pass


class AttendanceCreate(BaseModel):
    employee_id: int
    date: date
    work_location_id: Optional[int] = None
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    status: AttendanceStatus = "present"
    notes: Optional[str] = None


class AttendanceUpdate(BaseModel):
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None


class AttendanceOut(BaseModel):
    id: int
    employee_id: int
    work_location_id: Optional[int] = None
    date: date
    check_in_time: Optional[datetime] = None
    check_in_latitude: Optional[float] = None
    check_in_longitude: Optional[float] = None
    check_in_distance_meters: Optional[float] = None
    check_out_time: Optional[datetime] = None
    check_out_latitude: Optional[float] = None
    check_out_longitude: Optional[float] = None
    break_start: Optional[datetime] = None
    break_end: Optional[datetime] = None
    status: str
    is_late: bool
    late_minutes: int
    work_hours: Optional[float] = None
    overtime_hours: float
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class AttendanceSummary(BaseModel):
    employee_id: int
    year: int
    month: int
    total_days: int
    present_days: int
    late_days: int
    absent_days: int
    early_leave_days: int
    on_leave_days: int
    total_work_hours: float
    total_overtime_hours: float
