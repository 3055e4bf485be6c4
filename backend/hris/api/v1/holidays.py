from datetime import date
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import get_current_user, get_db, get_page_params, require_permission
from hris.models.user import User
from hris.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, ok, paginated
from hris.schemas.holiday import (
    HolidayBulkCreate,
    HolidayCalendar,
    HolidayCreate,
    HolidayImportResult,
    HolidayOut,
    HolidayUpdate,
    WorkingDaysSummary,
)
from hris.services.holiday_service import HolidayService
from hris.services.pagination import PageParams

router = APIRouter()


@router.get("", response_model=PaginatedResponse[HolidayOut])
async def list_holidays(
    year: Optional[int] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    type: Optional[str] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    company_id: Optional[int] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    items, total = await HolidayService(db).list(
        params, company_id=company_id or current_user.company_id, year=year, month=month,
        type=type, is_active=is_active, search=search,
    )
    return paginated(items, params.page, params.limit, total)


@router.get("/calendar", response_model=ApiResponse[HolidayCalendar])
async def holiday_calendar(
    year: Optional[int] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return ok(await HolidayService(db).calendar(year or date.today().year, month, current_user.company_id))


@router.get("/upcoming", response_model=ApiResponse[List[HolidayOut]])
async def upcoming_holidays(
    days: int = Query(30, ge=1, le=366),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return ok(await HolidayService(db).upcoming(days, current_user.company_id))


@router.get("/working-days", response_model=ApiResponse[WorkingDaysSummary])
async def working_days(
    year: int,
    month: int = Query(..., ge=1, le=12),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Weekdays in the month, before and after holidays."""
    return ok(await HolidayService(db).working_days_summary(year, month, current_user.company_id))


@router.post("/bulk", response_model=ApiResponse[HolidayImportResult])
async def bulk_create_holidays(
    payload: HolidayBulkCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("holiday:manage")),
) -> Any:
    result = await HolidayService(db).bulk_create(
        [h.model_dump() for h in payload.holidays], payload.company_id, payload.skip_duplicates,
    )
    return ok(result, message=f"{result['created']} holidays imported")


@router.post("/seed/{year}", response_model=ApiResponse[HolidayImportResult])
async def seed_national_holidays(
    year: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("holiday:manage")),
) -> Any:
    result = await HolidayService(db).seed_national(year)
    return ok(result, message=f"{result['created']} national holidays added for {year}")


@router.post("", response_model=ApiResponse[HolidayOut], status_code=201)
async def create_holiday(
    payload: HolidayCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("holiday:manage")),
) -> Any:
    return ok(await HolidayService(db).create(payload.model_dump()), message="Holiday created")


@router.get("/{holiday_id}", response_model=ApiResponse[HolidayOut])
async def get_holiday(
    holiday_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return ok(await HolidayService(db).get(holiday_id))


@router.put("/{holiday_id}", response_model=ApiResponse[HolidayOut])
async def update_holiday(
    holiday_id: int,
    payload: HolidayUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("holiday:manage")),
) -> Any:
    holiday = await HolidayService(db).update(holiday_id, payload.model_dump(exclude_unset=True))
    return ok(holiday, message="Holiday updated")


@router.delete("/{holiday_id}", response_model=MessageResponse)
async def delete_holiday(
    holiday_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("holiday:manage")),
) -> Any:
    await HolidayService(db).delete(holiday_id)
    return {"success": True, "message": "Holiday deleted"}
