"""
Holiday calendar.

National holidays are shared by every company (``company_id`` is None); a
company can add its own days on top. Leave day counts and overtime
classification both read the calendar through :meth:`HolidayService.holiday_dates`.
"""

import logging
from calendar import monthrange
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import extract, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.exceptions import ConflictError, NotFoundError
from hris.models.holiday import Holiday
from hris.services.pagination import PageParams, apply_updates, paginate

logger = logging.getLogger("hris.holidays")

# Same calendar date every year
FIXED_NATIONAL_HOLIDAYS = [
    ((1, 1), "Tahun Baru Masehi", "national"),
    ((5, 1), "Hari Buruh Internasional", "national"),
    ((6, 1), "Hari Lahir Pancasila", "national"),
    ((8, 17), "Hari Kemerdekaan RI", "national"),
    ((12, 25), "Hari Raya Natal", "religious"),
]

# Lunar and religious dates, published yearly by SKB 3 Menteri
MOVABLE_NATIONAL_HOLIDAYS = {
    2026: [
        (date(2026, 2, 17), "Tahun Baru Imlek", "religious"),
        (date(2026, 3, 19), "Hari Raya Nyepi", "religious"),
        (date(2026, 3, 20), "Hari Raya Idul Fitri (Hari 1)", "religious"),
        (date(2026, 3, 21), "Hari Raya Idul Fitri (Hari 2)", "religious"),
        (date(2026, 4, 3), "Wafat Isa Almasih", "religious"),
        (date(2026, 5, 14), "Kenaikan Isa Almasih", "religious"),
        (date(2026, 5, 27), "Hari Raya Idul Adha", "religious"),
        (date(2026, 6, 1), "Hari Raya Waisak", "religious"),
        (date(2026, 6, 17), "Tahun Baru Islam 1448 H", "religious"),
        (date(2026, 8, 26), "Maulid Nabi Muhammad SAW", "religious"),
    ],
}

RELIGIOUS_KEYWORDS = ("idul", "natal", "waisak", "nyepi", "imlek", "maulid", "isra", "wafat", "kenaikan")


def detect_holiday_type(name: str) -> str:
    """Classify an imported holiday by its Indonesian name."""
    lowered = name.lower()
    if "cuti bersama" in lowered:
        return "cuti_bersama"
    if any(keyword in lowered for keyword in RELIGIOUS_KEYWORDS):
        return "religious"
    return "national"


def national_holidays(year: int) -> List[Tuple[date, str, str]]:
    """(date, name, type) for every national holiday known for ``year``."""
    fixed = [(date(year, month, day), name, kind) for (month, day), name, kind in FIXED_NATIONAL_HOLIDAYS]
    return sorted(fixed + MOVABLE_NATIONAL_HOLIDAYS.get(year, []))


def count_working_days(start: date, end: date, holidays: Iterable[date] = ()) -> int:
    """Monday to Friday days between start and end inclusive, minus holidays."""
    excluded = set(holidays)
    days = 0
    current = start
    while current <= end:
        if current.weekday() < 5 and current not in excluded:
            days += 1
        current += timedelta(days=1)
    return days


def _occurrences(holiday: Holiday, start: date, end: date) -> List[date]:
    """Dates on which ``holiday`` falls inside [start, end]."""
    if not holiday.is_recurring:
        return [holiday.date] if start <= holiday.date <= end else []
    found = []
    for year in range(start.year, end.year + 1):
        try:
            day = holiday.date.replace(year=year)
        except ValueError:
            # 29 February outside a leap year
            continue
        if start <= day <= end:
            found.append(day)
    return found


class HolidayService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, holiday_id: int) -> Holiday:
        holiday = await self.db.get(Holiday, holiday_id, populate_existing=True)
        if holiday is None:
            raise NotFoundError(f"Holiday {holiday_id} not found")
        return holiday

    async def list(
        self,
        params: PageParams,
        company_id: Optional[int] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
        type: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Holiday], int]:
        query = select(Holiday)
        if company_id is not None:
            query = query.where(or_(Holiday.company_id == company_id, Holiday.company_id.is_(None)))
        if year is not None:
            query = query.where(extract("year", Holiday.date) == year)
        if month is not None:
            query = query.where(extract("month", Holiday.date) == month)
        if type:
            query = query.where(Holiday.type == type)
        if is_active is not None:
            query = query.where(Holiday.is_active == is_active)
        if search:
            query = query.where(Holiday.name.ilike(f"%{search}%"))
        return await paginate(self.db, query.order_by(Holiday.date, Holiday.id), params)

    async def in_range(self, start: date, end: date, company_id: Optional[int] = None) -> List[Holiday]:
        """Active holidays observed by ``company_id`` between start and end, recurring ones included."""
        scope = Holiday.company_id.is_(None)
        if company_id is not None:
            scope = or_(scope, Holiday.company_id == company_id)
        result = await self.db.execute(
            select(Holiday)
            .where(
                Holiday.is_active.is_(True),
                scope,
                or_(Holiday.is_recurring.is_(True), Holiday.date.between(start, end)),
            )
            .order_by(Holiday.date, Holiday.id)
        )
        return [h for h in result.scalars().all() if _occurrences(h, start, end)]

    async def holiday_dates(self, start: date, end: date, company_id: Optional[int] = None) -> Set[date]:
        dates: Set[date] = set()
        for holiday in await self.in_range(start, end, company_id):
            dates.update(_occurrences(holiday, start, end))
        return dates

    async def calendar(self, year: int, month: Optional[int] = None, company_id: Optional[int] = None) -> Dict:
        if month:
            start, end = date(year, month, 1), date(year, month, monthrange(year, month)[1])
        else:
            start, end = date(year, 1, 1), date(year, 12, 31)
        holidays = await self.in_range(start, end, company_id)
        return {"year": year, "month": month, "total": len(holidays), "holidays": holidays}

    async def upcoming(self, days: int = 30, company_id: Optional[int] = None,
                       today: Optional[date] = None) -> List[Holiday]:
        start = today or date.today()
        return await self.in_range(start, start + timedelta(days=days), company_id)

    async def working_days_summary(self, year: int, month: int, company_id: Optional[int] = None) -> Dict:
        start, end = date(year, month, 1), date(year, month, monthrange(year, month)[1])
        holidays = await self.in_range(start, end, company_id)
        holiday_dates = set()
        for holiday in holidays:
            holiday_dates.update(_occurrences(holiday, start, end))
        return {
            "year": year,
            "month": month,
            "total_days": end.day,
            "working_days": count_working_days(start, end),
            "holiday_count": len(holidays),
            "actual_working_days": count_working_days(start, end, holiday_dates),
            "holidays": holidays,
        }

    async def create(self, values: dict, source: str = "manual") -> Holiday:
        # NULL company ids never collide in the unique constraint
        if await self._exists(values.get("company_id"), values["date"], values["name"]):
            raise ConflictError(f"Holiday '{values['name']}' on {values['date']} already exists")
        holiday = Holiday(**values, source=source, is_active=True)
        self.db.add(holiday)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(f"Holiday '{values['name']}' on {values['date']} already exists")
        await self.db.refresh(holiday)
        return holiday

    async def update(self, holiday_id: int, changes: dict) -> Holiday:
        holiday = await self.get(holiday_id)
        apply_updates(holiday, changes)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Another holiday with this name already exists on that date")
        await self.db.refresh(holiday)
        return holiday

    async def delete(self, holiday_id: int) -> None:
        holiday = await self.get(holiday_id)
        await self.db.delete(holiday)
        await self.db.commit()

    async def bulk_create(self, items: List[dict], company_id: Optional[int] = None,
                          skip_duplicates: bool = True, source: str = "import") -> Dict:
        """Insert many holidays in one transaction; duplicates are skipped or reported."""
        created, skipped, errors = 0, 0, []
        for item in items:
            owner = item.get("company_id") or company_id
            if await self._exists(owner, item["date"], item["name"]):
                if skip_duplicates:
                    skipped += 1
                else:
                    errors.append(f"{item['date']} {item['name']}: already exists")
                continue
            self.db.add(Holiday(
                company_id=owner,
                name=item["name"],
                date=item["date"],
                type=item.get("type") or detect_holiday_type(item["name"]),
                description=item.get("description"),
                is_recurring=item.get("is_recurring", False),
                source=source,
                is_active=True,
            ))
            # Keeps duplicates inside one payload visible to _exists
            await self.db.flush()
            created += 1
        await self.db.commit()
        logger.info(f"Holiday import: {created} created, {skipped} skipped, {len(errors)} errors")
        return {"created": created, "skipped": skipped, "errors": errors}

    async def seed_national(self, year: int) -> Dict:
        items = [{"date": day, "name": name, "type": kind} for day, name, kind in national_holidays(year)]
        return await self.bulk_create(items, company_id=None, skip_duplicates=True, source="seed")

    async def _exists(self, company_id: Optional[int], day: date, name: str) -> bool:
        owner = Holiday.company_id.is_(None) if company_id is None else Holiday.company_id == company_id
        result = await self.db.execute(
            select(Holiday.id).where(owner, Holiday.date == day, Holiday.name == name)
        )
        return result.first() is not None
