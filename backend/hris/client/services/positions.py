from typing import List

from hris.client.services.base import CrudService


class PositionService(CrudService):
    path = "/positions"

    async def by_company(self, company_id: int) -> List[dict]:
        return await self._fetch(f"/positions/company/{company_id}")

    async def levels(self) -> List[dict]:
        return await self._fetch("/positions/levels")
