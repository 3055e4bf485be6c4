from datetime import date
from typing import List, Optional

from hris.client.pagination import Page
from hris.client.services.base import CrudService, page_params


class EmployeeMovementService(CrudService):
    path = "/employee-movements"

    async def pending(self, page: int = 1, limit: int = 10, company_id: Optional[int] = None) -> Page:
        return await self._fetch_page(
            "/employee-movements/pending", page_params(page, limit, {"company_id": company_id})
        )

    async def ready_to_apply(
        self, page: int = 1, limit: int = 10, company_id: Optional[int] = None, as_of: Optional[date] = None
    ) -> Page:
        return await self._fetch_page(
            "/employee-movements/ready-to-apply",
            page_params(page, limit, {"company_id": company_id, "as_of": as_of}),
        )

    async def statistics(self, company_id: Optional[int] = None) -> dict:
        return await self._fetch("/employee-movements/statistics", {"company_id": company_id})

    async def by_employee(self, employee_id: int) -> List[dict]:
        return await self._fetch(f"/employee-movements/employee/{employee_id}")

    async def submit(self, movement_id: int) -> dict:
        return await self._send("POST", f"/employee-movements/{movement_id}/submit")

    async def approve(self, movement_id: int, notes: Optional[str] = None) -> dict:
        payload = {"approval_notes": notes} if notes else None
        return await self._send("POST", f"/employee-movements/{movement_id}/approve", payload)

    async def reject(self, movement_id: int, reason: str) -> dict:
        return await self._send(
            "POST", f"/employee-movements/{movement_id}/reject", {"rejection_reason": reason}
        )

    async def cancel(self, movement_id: int) -> dict:
        return await self._send("POST", f"/employee-movements/{movement_id}/cancel")

    async def apply(self, movement_id: int) -> dict:
        return await self._send("POST", f"/employee-movements/{movement_id}/apply")
