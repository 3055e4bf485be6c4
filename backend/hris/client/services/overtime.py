from typing import Optional

from hris.client.pagination import Page
from hris.client.services.base import CrudService, page_params


class OvertimeService(CrudService):
    path = "/overtime"

    async def my_requests(self, page: int = 1, limit: int = 10, **filters) -> Page:
        return await self._fetch_page("/overtime/me", page_params(page, limit, filters))

    async def pending_approvals(self, page: int = 1, limit: int = 10) -> Page:
        return await self._fetch_page("/overtime/pending-approvals", page_params(page, limit, {}))

    async def create_for_employee(self, employee_id: int, data: dict) -> dict:
        return await self._send("POST", "/overtime/employee", {**data, "employee_id": employee_id})

    async def approve(self, overtime_id: int, notes: Optional[str] = None) -> dict:
        payload = {"approval_notes": notes} if notes else None
        return await self._send("POST", f"/overtime/{overtime_id}/approve", payload)

    async def reject(self, overtime_id: int, reason: str) -> dict:
        return await self._send("POST", f"/overtime/{overtime_id}/reject", {"rejection_reason": reason})

    async def cancel(self, overtime_id: int) -> dict:
        return await self._send("POST", f"/overtime/{overtime_id}/cancel")
