from typing import List, Optional

from hris.client.services.base import CrudService


class EmployeeDocumentService(CrudService):
    path = "/documents/employee"

    async def mine(self) -> List[dict]:
        return await self._fetch("/documents/employee/me")

    async def my_completeness(self) -> dict:
        return await self._fetch("/documents/employee/me/completeness")

    async def completeness(self, employee_id: int) -> dict:
        return await self._fetch(f"/documents/employee/completeness/{employee_id}")

    async def statistics(self, employee_id: Optional[int] = None) -> dict:
        return await self._fetch("/documents/employee/statistics", {"employee_id": employee_id})

    async def expiring(self, days: int = 30) -> List[dict]:
        return await self._fetch("/documents/employee/expiring", {"days": days})

    async def expired(self) -> List[dict]:
        return await self._fetch("/documents/employee/expired")

    async def verify(self, document_id: int, notes: Optional[str] = None) -> dict:
        payload = {"verification_notes": notes} if notes else None
        return await self._send("POST", f"/documents/employee/{document_id}/verify", payload)

    async def unverify(self, document_id: int) -> dict:
        return await self._send("POST", f"/documents/employee/{document_id}/unverify")
