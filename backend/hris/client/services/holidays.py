from typing import List, Optional

from hris.client.services.base import CrudService


class HolidayService(CrudService):
    path = "/holidays"

    async def calendar(self, year: Optional[int] = None, month: Optional[int] = None) -> dict:
        return await self._fetch("/holidays/calendar", {"year": year, "month": month})

    async def upcoming(self, days: int = 30) -> List[dict]:
        return await self._fetch("/holidays/upcoming", {"days": days})

    async def working_days(self, year: int, month: int) -> dict:
        return await self._fetch("/holidays/working-days", {"year": year, "month": month})

    async def bulk_create(self, holidays: List[dict], company_id: Optional[int] = None,
                          skip_duplicates: bool = True) -> dict:
        return await self._send(
            "POST",
            "/holidays/bulk",
            {"holidays": holidays, "company_id": company_id, "skip_duplicates": skip_duplicates},
        )

    async def seed(self, year: int) -> dict:
        return await self._send("POST", f"/holidays/seed/{year}")
