"""
Attendance: GPS check-in/out against the work location geofence, breaks,
late and early-leave detection, overtime and monthly summaries.
"""

import logging
import math
from calendar import monthrange
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.config import settings
from hris.core.exceptions import BusinessRuleError, ConflictError, NotFoundError
from hris.models.attendance import Attendance
from hris.models.employee import Employee
from hris.models.work_location import WorkLocation
from hris.services.pagination import PageParams, apply_updates, paginate

logger = logging.getLogger("hris.attendance")

EARTH_RADIUS_METERS = 6371000.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in meters."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(a))


def parse_clock(value: Optional[str], fallback: str) -> time:
    hours, minutes = (value or fallback).split(":")
    return time(int(hours), int(minutes))


def late_minutes(check_in: datetime, location: Optional[WorkLocation]) -> int:
    """Minutes after the scheduled start, or 0 when within the tolerance."""
    start = parse_clock(location.work_start_time if location else None, "08:00")
    tolerance = location.late_tolerance_minutes if location else 0
    scheduled = datetime.combine(check_in.date(), start)
    minutes = int((check_in - scheduled).total_seconds() // 60)
    return minutes if minutes > tolerance else 0


def worked_hours(record: Attendance, check_out: datetime) -> float:
    elapsed = check_out - record.check_in_time
    if record.break_start and record.break_end:
        elapsed -= record.break_end - record.break_start
    return round(max(elapsed.total_seconds(), 0) / 3600, 2)


class AttendanceService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, attendance_id: int) -> Attendance:
        record = await self.db.get(Attendance, attendance_id, populate_existing=True)
        if record is None:
            raise NotFoundError(f"Attendance {attendance_id} not found")
        return record

    async def get_for_day(self, employee_id: int, day: date) -> Optional[Attendance]:
        result = await self.db.execute(
            select(Attendance).where(Attendance.employee_id == employee_id, Attendance.date == day)
        )
        return result.scalar_one_or_none()

    async def current_shift(self, employee_id: int, now: datetime) -> Optional[Attendance]:
        """Today's record, or yesterday's if that shift is still open past midnight."""
        record = await self.get_for_day(employee_id, now.date())
        if record is not None:
            return record
        previous = await self.get_for_day(employee_id, now.date() - timedelta(days=1))
        if previous is not None and previous.check_in_time is not None and previous.check_out_time is None:
            return previous
        return None

    async def history(
        self,
        employee_id: int,
        params: PageParams,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Tuple[List[Attendance], int]:
        return await self.list(params, employee_id=employee_id, start_date=start_date, end_date=end_date)

    async def list(
        self,
        params: PageParams,
        employee_id: Optional[int] = None,
        employee_ids: Optional[List[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[Attendance], int]:
        query = select(Attendance)
        if employee_id is not None:
            query = query.where(Attendance.employee_id == employee_id)
        if employee_ids is not None:
            query = query.where(Attendance.employee_id.in_(employee_ids))
        if start_date:
            query = query.where(Attendance.date >= start_date)
        if end_date:
            query = query.where(Attendance.date <= end_date)
        if status:
            query = query.where(Attendance.status == status)
        return await paginate(self.db, query.order_by(Attendance.date.desc(), Attendance.id.desc()), params)

    async def team(self, manager_id: int, params: PageParams, day: Optional[date] = None):
        result = await self.db.execute(select(Employee.id).where(Employee.manager_id == manager_id))
        member_ids = [member_id for (member_id,) in result.all()]
        target = day or date.today()
        return await self.list(params, employee_ids=member_ids, start_date=target, end_date=target)

    async def summary(self, employee_id: int, year: int, month: int) -> Dict:
        first = date(year, month, 1)
        last = date(year, month, monthrange(year, month)[1])
        result = await self.db.execute(
            select(Attendance).where(
                Attendance.employee_id == employee_id,
                Attendance.date >= first,
                Attendance.date <= last,
            )
        )
        records = result.scalars().all()
        return {
            "employee_id": employee_id,
            "year": year,
            "month": month,
            "total_days": len(records),
            "present_days": sum(1 for r in records if r.status in ("present", "late", "early_leave")),
            "late_days": sum(1 for r in records if r.is_late),
            "absent_days": sum(1 for r in records if r.status == "absent"),
            "early_leave_days": sum(1 for r in records if r.status == "early_leave"),
            "on_leave_days": sum(1 for r in records if r.status == "on_leave"),
            "total_work_hours": round(sum(r.work_hours or 0 for r in records), 2),
            "total_overtime_hours": round(sum(r.overtime_hours or 0 for r in records), 2),
        }

    async def check_in(
        self,
        employee: Employee,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Attendance:
        now = now or datetime.now()
        if await self.get_for_day(employee.id, now.date()):
            raise ConflictError("Already checked in today", code="ALREADY_CHECKED_IN")

        location = None
        if employee.work_location_id:
            location = await self.db.get(WorkLocation, employee.work_location_id)
        distance = self._verify_location(location, latitude, longitude)

        minutes_late = late_minutes(now, location)
        record = Attendance(
            employee_id=employee.id,
            work_location_id=location.id if location else None,
            date=now.date(),
            check_in_time=now,
            check_in_latitude=latitude,
            check_in_longitude=longitude,
            check_in_distance_meters=distance,
            status="late" if minutes_late else "present",
            is_late=bool(minutes_late),
            late_minutes=minutes_late,
            overtime_hours=0.0,
            notes=notes,
        )
        self.db.add(record)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Already checked in today", code="ALREADY_CHECKED_IN")
        await self.db.refresh(record)
        logger.info(f"Employee {employee.id} checked in (late={minutes_late}m, distance={distance})")
        return record

    async def check_out(
        self,
        employee: Employee,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Attendance:
        now = now or datetime.now()
        record = await self.current_shift(employee.id, now)
        if record is None or record.check_in_time is None:
            raise BusinessRuleError("You have not checked in today", code="NOT_CHECKED_IN")
        if record.check_out_time is not None:
            raise ConflictError("Already checked out today", code="ALREADY_CHECKED_OUT")
        if record.break_start and not record.break_end:
            record.break_end = now

        location = await self.db.get(WorkLocation, record.work_location_id) if record.work_location_id else None

        record.check_out_time = now
        record.check_out_latitude = latitude
        record.check_out_longitude = longitude
        record.work_hours = worked_hours(record, now)
        record.overtime_hours = round(max(record.work_hours - settings.STANDARD_WORK_HOURS, 0), 2)

        scheduled_end = datetime.combine(record.date, parse_clock(location.work_end_time if location else None, "17:00"))
        if now < scheduled_end and record.status == "present":
            record.status = "early_leave"
        if notes:
            record.notes = f"{record.notes}\n{notes}" if record.notes else notes

        await self.db.commit()
        await self.db.refresh(record)
        logger.info(f"Employee {employee.id} checked out after {record.work_hours}h")
        return record

    async def start_break(self, employee: Employee, now: Optional[datetime] = None) -> Attendance:
        now = now or datetime.now()
        record = await self._open_record(employee, now)
        if record.break_start is not None:
            raise ConflictError("Break already started", code="BREAK_ALREADY_STARTED")
        record.break_start = now
        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def end_break(self, employee: Employee, now: Optional[datetime] = None) -> Attendance:
        now = now or datetime.now()
        record = await self._open_record(employee, now)
        if record.break_start is None:
            raise BusinessRuleError("Break has not been started", code="BREAK_NOT_STARTED")
        if record.break_end is not None:
            raise ConflictError("Break already ended", code="BREAK_ALREADY_ENDED")
        record.break_end = now
        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def create(self, values: dict) -> Attendance:
        record = Attendance(**values)
        if record.check_in_time and record.check_out_time:
            record.work_hours = worked_hours(record, record.check_out_time)
            record.overtime_hours = round(max(record.work_hours - settings.STANDARD_WORK_HOURS, 0), 2)
        self.db.add(record)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Attendance for this employee and date already exists")
        await self.db.refresh(record)
        return record

    async def update(self, attendance_id: int, changes: dict) -> Attendance:
        record = await self.get(attendance_id)
        apply_updates(record, changes)
        if record.check_in_time and record.check_out_time:
            record.work_hours = worked_hours(record, record.check_out_time)
            record.overtime_hours = round(max(record.work_hours - settings.STANDARD_WORK_HOURS, 0), 2)
        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def delete(self, attendance_id: int) -> None:
        record = await self.get(attendance_id)
        await self.db.delete(record)
        await self.db.commit()

    async def _open_record(self, employee: Employee, now: datetime) -> Attendance:
        record = await self.current_shift(employee.id, now)
        if record is None:
            raise BusinessRuleError("You have not checked in today", code="NOT_CHECKED_IN")
        if record.check_out_time is not None:
            raise ConflictError("Already checked out today", code="ALREADY_CHECKED_OUT")
        return record

    @staticmethod
    def _verify_location(
        location: Optional[WorkLocation], latitude: Optional[float], longitude: Optional[float]
    ) -> Optional[float]:
        """Distance to the work location, raising when outside its radius."""
        has_coords = latitude is not None and longitude is not None
        if location is None or location.latitude is None or location.longitude is None:
            return None
        if not has_coords:
            if location.require_gps and not location.allow_remote:
                raise BusinessRuleError("GPS location is required to check in", code="GPS_REQUIRED")
            return None

        distance = round(haversine_distance(location.latitude, location.longitude, latitude, longitude), 1)
        if distance > location.radius_meters and not location.allow_remote:
            raise BusinessRuleError(
                f"You are {distance:.0f} m from {location.name}; "
                f"check-in is allowed within {location.radius_meters} m",
                code="OUTSIDE_GEOFENCE",
            )
        return distance

