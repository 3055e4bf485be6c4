from typing import List

from hris.client.services.base import CrudService


class WorkLocationService(CrudService):
    path = "/work-locations"

    async def by_company(self, company_id: int) -> List[dict]:
        return await self._fetch(f"/work-locations/company/{company_id}")
