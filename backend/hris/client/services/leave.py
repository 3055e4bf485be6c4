from typing import List, Optional

from hris.client.pagination import Page
from hris.client.services.base import CrudService, page_params


class LeaveService(CrudService):
    path = "/leaves"

    async def types(self, company_id: Optional[int] = None) -> List[dict]:
        return await self._fetch("/leaves/types", {"company_id": company_id})

    async def my_requests(self, page: int = 1, limit: int = 10, status: Optional[str] = None) -> Page:
        return await self._fetch_page("/leaves/me", page_params(page, limit, {"status": status}))

    async def my_balances(self, year: Optional[int] = None) -> List[dict]:
        return await self._fetch("/leaves/me/balances", {"year": year})

    async def pending_approvals(self, page: int = 1, limit: int = 10) -> Page:
        return await self._fetch_page("/leaves/pending-approvals", page_params(page, limit, {}))

    async def approve(self, request_id: int, notes: Optional[str] = None) -> dict:
        payload = {"approval_notes": notes} if notes else None
        return await self._send("POST", f"/leaves/{request_id}/approve", payload)

    async def reject(self, request_id: int, reason: str) -> dict:
        return await self._send("POST", f"/leaves/{request_id}/reject", {"rejection_reason": reason})

    async def cancel(self, request_id: int) -> dict:
        return await self._send("POST", f"/leaves/{request_id}/cancel")

    async def balances(self, page: int = 1, limit: int = 10, **filters) -> Page:
        return await self._fetch_page("/leaves/balances/list", page_params(page, limit, filters))

    async def allocate_balance(self, data: dict) -> dict:
        return await self._send("POST", "/leaves/balances/allocate", data)

    async def adjust_balance(
        self, employee_id: int, leave_type_id: int, year: int, adjustment_days: float, adjustment_reason: str
    ) -> dict:
        return await self._send(
            "POST",
            "/leaves/balances/adjust",
            {
                "employee_id": employee_id,
                "leave_type_id": leave_type_id,
                "year": year,
                "adjustment_days": adjustment_days,
                "adjustment_reason": adjustment_reason,
            },
        )
