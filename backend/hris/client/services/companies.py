from typing import List

from hris.client.services.base import CrudService


class CompanyService(CrudService):
    path = "/companies"

    async def all_feature_toggles(self) -> List[dict]:
        return await self._fetch("/companies/feature-toggles/all")

    async def feature_toggles(self, company_id: int) -> dict:
        return await self._fetch(f"/companies/{company_id}/feature-toggles")

    async def update_feature_toggles(self, company_id: int, data: dict) -> dict:
        return await self._send("PUT", f"/companies/{company_id}/feature-toggles", data)
