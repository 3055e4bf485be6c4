from datetime import date
from typing import Optional

from hris.client.pagination import Page
from hris.client.services.base import CrudService, page_params


class AttendanceService(CrudService):
    path = "/attendance"

    async def today(self) -> Optional[dict]:
        return await self._fetch("/attendance/me/today")

    async def history(
        self,
        page: int = 1,
        limit: int = 10,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Page:
        return await self._fetch_page(
            "/attendance/me/history",
            page_params(page, limit, {"start_date": start_date, "end_date": end_date}),
        )

    async def summary(self, year: Optional[int] = None, month: Optional[int] = None) -> dict:
        return await self._fetch("/attendance/me/summary", {"year": year, "month": month})

    async def check_in(
        self, latitude: Optional[float] = None, longitude: Optional[float] = None, notes: Optional[str] = None
    ) -> dict:
        return await self._send(
            "POST", "/attendance/check-in", {"latitude": latitude, "longitude": longitude, "notes": notes}
        )

    async def check_out(
        self, latitude: Optional[float] = None, longitude: Optional[float] = None, notes: Optional[str] = None
    ) -> dict:
        return await self._send(
            "POST", "/attendance/check-out", {"latitude": latitude, "longitude": longitude, "notes": notes}
        )

    async def start_break(self) -> dict:
        return await self._send("POST", "/attendance/break/start")

    async def end_break(self) -> dict:
        return await self._send("POST", "/attendance/break/end")

    async def team(self, day: Optional[date] = None, page: int = 1, limit: int = 10) -> Page:
        return await self._fetch_page("/attendance/team", page_params(page, limit, {"date": day}))
