from hris.client.services.base import CrudService


class PerformanceReviewService(CrudService):
    path = "/performance-reviews"

    async def change_status(self, review_id: int, status: str) -> dict:
        return await self._send("PATCH", f"/performance-reviews/{review_id}/status", {"status": status})
