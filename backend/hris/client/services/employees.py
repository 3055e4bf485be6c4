from typing import List, Optional

from hris.client.pagination import Page
from hris.client.services.base import CrudService, page_params


class EmployeeService(CrudService):
    path = "/employees"

    async def me(self) -> dict:
        return await self._fetch("/employees/me")

    async def update_me(self, data: dict) -> dict:
        """Self-service update; the server only accepts whitelisted fields."""
        return await self._send("PUT", "/employees/me", data)

    async def by_employee_number(self, employee_number: str) -> dict:
        return await self._fetch(f"/employees/by-employee-id/{employee_number}")

    async def by_company(self, company_id: int, page: int = 1, limit: int = 10) -> Page:
        return await self._fetch_page(f"/employees/company/{company_id}", page_params(page, limit, {}))

    async def by_department(self, department_id: int, page: int = 1, limit: int = 10) -> Page:
        return await self._fetch_page(f"/employees/department/{department_id}", page_params(page, limit, {}))

    async def subordinates(self, employee_id: int) -> List[dict]:
        return await self._fetch(f"/employees/{employee_id}/subordinates")

    async def next_employee_id(self, company_id: int) -> str:
        data = await self._fetch(f"/employees/next-id/{company_id}")
        return data["employee_id"]

    async def leadership_team(self, company_id: Optional[int] = None) -> List[dict]:
        return await self._fetch("/employees/leadership-team", {"company_id": company_id})

    async def deactivate(self, employee_id: int) -> dict:
        return await self._send("DELETE", f"/employees/{employee_id}")
