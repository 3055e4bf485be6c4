from typing import List

from hris.client.services.base import CrudService


class DepartmentService(CrudService):
    path = "/departments"

    async def by_company(self, company_id: int) -> List[dict]:
        return await self._fetch(f"/departments/company/{company_id}")

    async def hierarchy(self, company_id: int) -> List[dict]:
        """Department tree; each node carries its ``children``."""
        return await self._fetch(f"/departments/company/{company_id}/hierarchy")
