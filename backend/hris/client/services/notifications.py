from typing import Optional

from hris.client.pagination import Page
from hris.client.services.base import BaseService, page_params


class NotificationService(BaseService):
    async def list(self, page: int = 1, limit: int = 10, is_read: Optional[bool] = None) -> Page:
        """Page of notifications; ``page.extra["unread_count"]`` holds the unread total."""
        return await self._fetch_page("/notifications", page_params(page, limit, {"is_read": is_read}))

    async def unread_count(self) -> int:
        data = await self._fetch("/notifications/unread-count")
        return data["count"]

    async def mark_as_read(self, notification_id: int) -> dict:
        return await self._send("POST", f"/notifications/{notification_id}/read")

    async def mark_all_as_read(self) -> int:
        data = await self._send("POST", "/notifications/mark-all-read")
        return data["count"]

    async def delete(self, notification_id: int) -> None:
        await self.api.delete(f"/notifications/{notification_id}")

    async def delete_all_read(self) -> int:
        body = await self.api.delete("/notifications/read")
        return body["data"]["count"]
