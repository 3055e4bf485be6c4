from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import get_current_employee, get_db, get_page_params, require_permission
from hris.models.employee import Employee
from hris.models.user import User
from hris.schemas.attendance import (
    AttendanceCreate,
    AttendanceOut,
    AttendanceSummary,
    AttendanceUpdate,
    CheckInRequest,
    CheckOutRequest,
)
from hris.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, ok, paginated
from hris.services.attendance_service import AttendanceService
from hris.services.pagination import PageParams

router = APIRouter()


@router.get("/me/today", response_model=ApiResponse[Optional[AttendanceOut]])
async def my_attendance_today(
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    return ok(await AttendanceService(db).get_for_day(employee.id, date.today()))


@router.get("/me/history", response_model=PaginatedResponse[AttendanceOut])
async def my_attendance_history(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    items, total = await AttendanceService(db).history(employee.id, params, start_date, end_date)
    return paginated(items, params.page, params.limit, total)


@router.get("/me/summary", response_model=ApiResponse[AttendanceSummary])
async def my_attendance_summary(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    today = date.today()
    summary = await AttendanceService(db).summary(employee.id, year or today.year, month or today.month)
    return ok(summary)


@router.post("/check-in", response_model=ApiResponse[AttendanceOut])
async def check_in(
    payload: CheckInRequest,
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    record = await AttendanceService(db).check_in(
        employee, payload.latitude, payload.longitude, payload.notes
    )
    message = f"Checked in {record.late_minutes} minutes late" if record.is_late else "Checked in"
    return ok(record, message=message)


@router.post("/check-out", response_model=ApiResponse[AttendanceOut])
async def check_out(
    payload: CheckOutRequest,
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    record = await AttendanceService(db).check_out(
        employee, payload.latitude, payload.longitude, payload.notes
    )
    return ok(record, message="Checked out")


@router.post("/break/start", response_model=ApiResponse[AttendanceOut])
async def start_break(
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    return ok(await AttendanceService(db).start_break(employee), message="Break started")


@router.post("/break/end", response_model=ApiResponse[AttendanceOut])
async def end_break(
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    return ok(await AttendanceService(db).end_break(employee), message="Break ended")


@router.get("/team", response_model=PaginatedResponse[AttendanceOut])
async def team_attendance(
    day: Optional[date] = Query(None, alias="date"),
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    """Attendance of the caller's direct reports for one day (default today)."""
    items, total = await AttendanceService(db).team(employee.id, params, day)
    return paginated(items, params.page, params.limit, total)


@router.get("", response_model=PaginatedResponse[AttendanceOut])
async def list_attendance(
    employee_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("attendance:read")),
) -> Any:
    items, total = await AttendanceService(db).list(
        params, employee_id=employee_id, start_date=start_date, end_date=end_date, status=status
    )
    return paginated(items, params.page, params.limit, total)


@router.get("/{attendance_id}", response_model=ApiResponse[AttendanceOut])
async def get_attendance(
    attendance_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("attendance:read")),
) -> Any:
    return ok(await AttendanceService(db).get(attendance_id))


@router.post("", response_model=ApiResponse[AttendanceOut], status_code=201)
async def create_attendance(
    payload: AttendanceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("attendance:manage")),
) -> Any:
    record = await AttendanceService(db).create(payload.model_dump(exclude_none=True))
    return ok(record, message="Attendance recorded")


@router.put("/{attendance_id}", response_model=ApiResponse[AttendanceOut])
async def update_attendance(
    attendance_id: int,
    payload: AttendanceUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("attendance:manage")),
) -> Any:
    record = await AttendanceService(db).update(attendance_id, payload.model_dump(exclude_unset=True))
    return ok(record, message="Attendance updated")


@router.delete("/{attendance_id}", response_model=MessageResponse)
async def delete_attendance(
    attendance_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("attendance:manage")),
) -> Any:
    await AttendanceService(db).delete(attendance_id)
    return {"success": True, "message": "Attendance deleted"}
