from typing import List, Optional

from hris.client.services.base import CrudService


class TemplateService(CrudService):
    path = "/templates"

    async def statistics(self, company_id: Optional[int] = None) -> dict:
        return await self._fetch("/templates/statistics", {"company_id": company_id})

    async def by_company(self, company_id: int) -> List[dict]:
        return await self._fetch(f"/templates/company/{company_id}")

    async def by_category(self, category: str, company_id: Optional[int] = None) -> List[dict]:
        return await self._fetch(f"/templates/category/{category}", {"company_id": company_id})

    async def duplicate(self, template_id: int) -> dict:
        return await self._send("POST", f"/templates/{template_id}/duplicate")

    async def track_download(self, template_id: int) -> dict:
        return await self._send("POST", f"/templates/{template_id}/download")
