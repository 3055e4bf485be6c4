from typing import Optional

from hris.client.pagination import Page
from hris.client.services.base import BaseService, page_params

BASE = "/payroll-settings"


class PayrollSettingsService(BaseService):
    """Company payroll settings and the shared tax tables."""

    async def company_settings(self, company_id: int) -> dict:
        return await self._fetch(f"{BASE}/company/{company_id}")

    async def init_company_settings(self, company_id: int) -> dict:
        return await self._fetch(f"{BASE}/company/{company_id}/init")

    async def create_company_settings(self, company_id: int, data: dict) -> dict:
        return await self._send("POST", BASE, {"company_id": company_id, **data})

    async def update_company_settings(self, company_id: int, data: dict) -> dict:
        return await self._send("PUT", f"{BASE}/company/{company_id}", data)

    async def upsert_company_settings(self, company_id: int, data: dict) -> dict:
        return await self._send("PATCH", f"{BASE}/company/{company_id}", data)

    async def reset_company_settings(self, company_id: int) -> dict:
        return await self._send("POST", f"{BASE}/company/{company_id}/reset")

    # TER rates

    async def tax_configurations(
        self, page: int = 1, limit: int = 20, category: Optional[str] = None, is_active: Optional[bool] = None
    ) -> Page:
        return await self._fetch_page(
            f"{BASE}/tax-configurations",
            page_params(page, limit, {"category": category, "is_active": is_active}),
        )

    async def get_tax_configuration(self, config_id: int) -> dict:
        return await self._fetch(f"{BASE}/tax-configurations/{config_id}")

    async def create_tax_configuration(self, data: dict) -> dict:
        return await self._send("POST", f"{BASE}/tax-configurations", data)

    async def update_tax_configuration(self, config_id: int, data: dict) -> dict:
        return await self._send("PUT", f"{BASE}/tax-configurations/{config_id}", data)

    async def delete_tax_configuration(self, config_id: int) -> None:
        await self.api.delete(f"{BASE}/tax-configurations/{config_id}")

    async def seed_tax_configurations(self) -> dict:
        return await self._send("POST", f"{BASE}/tax-configurations/seed")

    # Progressive brackets

    async def tax_brackets(self, page: int = 1, limit: int = 10, is_active: Optional[bool] = None) -> Page:
        return await self._fetch_page(f"{BASE}/tax-brackets", page_params(page, limit, {"is_active": is_active}))

    async def get_tax_bracket(self, bracket_id: int) -> dict:
        return await self._fetch(f"{BASE}/tax-brackets/{bracket_id}")

    async def create_tax_bracket(self, data: dict) -> dict:
        return await self._send("POST", f"{BASE}/tax-brackets", data)

    async def update_tax_bracket(self, bracket_id: int, data: dict) -> dict:
        return await self._send("PUT", f"{BASE}/tax-brackets/{bracket_id}", data)

    async def delete_tax_bracket(self, bracket_id: int) -> None:
        await self.api.delete(f"{BASE}/tax-brackets/{bracket_id}")

    async def seed_tax_brackets(self) -> dict:
        return await self._send("POST", f"{BASE}/tax-brackets/seed")

    # PTKP

    async def ptkp_list(self, page: int = 1, limit: int = 20, is_active: Optional[bool] = None) -> Page:
        return await self._fetch_page(f"{BASE}/ptkp", page_params(page, limit, {"is_active": is_active}))

    async def get_ptkp(self, ptkp_id: int) -> dict:
        return await self._fetch(f"{BASE}/ptkp/{ptkp_id}")

    async def ptkp_by_status(self, status: str) -> dict:
        return await self._fetch(f"{BASE}/ptkp/status/{status}")

    async def create_ptkp(self, data: dict) -> dict:
        return await self._send("POST", f"{BASE}/ptkp", data)

    async def update_ptkp(self, ptkp_id: int, data: dict) -> dict:
        return await self._send("PUT", f"{BASE}/ptkp/{ptkp_id}", data)

    async def delete_ptkp(self, ptkp_id: int) -> None:
        await self.api.delete(f"{BASE}/ptkp/{ptkp_id}")

    async def seed_ptkp(self) -> dict:
        return await self._send("POST", f"{BASE}/ptkp/seed")

    # Calculators

    async def calculate_ter(self, gross_monthly: float, ptkp_status: str) -> dict:
        return await self._fetch(
            f"{BASE}/calculate/ter", {"gross_monthly": gross_monthly, "ptkp_status": ptkp_status}
        )

    async def calculate_progressive(self, pkp: float) -> dict:
        return await self._fetch(f"{BASE}/calculate/progressive", {"pkp": pkp})

    async def seed_all(self) -> dict:
        return await self._send("POST", f"{BASE}/seed-all")
