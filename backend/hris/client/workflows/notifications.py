"""Unread-count polling and read-state bookkeeping for the notification bell."""

import asyncio
import logging
from typing import List, Optional

from hris.client.config import client_settings
from hris.client.http import ApiError
from hris.client.services.notifications import NotificationService

logger = logging.getLogger("hris.client.notifications")

DROPDOWN_SIZE = 10


class NotificationPoller:
    def __init__(self, service: NotificationService, interval: Optional[float] = None):
        self.service = service
        self.interval = interval or client_settings.NOTIFICATION_POLL_INTERVAL_SECONDS
        self.unread_count = 0
        self.notifications: List[dict] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh_count(self) -> None:
        try:
            self.unread_count = await self.service.unread_count()
        except ApiError as e:
            logger.error(f"Failed to fetch unread count: {e.message}")

    async def open(self) -> List[dict]:
        """Load the latest notifications, as when the dropdown is opened."""
        try:
            page = await self.service.list(limit=DROPDOWN_SIZE)
        except ApiError as e:
            logger.error(f"Failed to fetch notifications: {e.message}")
            return self.notifications
        self.notifications = page.items
        self.unread_count = page.extra.get("unread_count", self.unread_count)
        return self.notifications

    async def mark_as_read(self, notification: dict) -> None:
        """Optimistic: local state changes first and is kept if the call fails."""
        if notification.get("is_read"):
            return
        for item in self.notifications:
            if item.get("id") == notification["id"]:
                item["is_read"] = True
        notification["is_read"] = True
        self.unread_count = max(0, self.unread_count - 1)
        try:
            await self.service.mark_as_read(notification["id"])
        except ApiError as e:
            logger.error(f"Failed to mark as read: {e.message}")

    async def mark_all_as_read(self) -> None:
        try:
            await self.service.mark_all_as_read()
        except ApiError as e:
            logger.error(f"Failed to mark all as read: {e.message}")
            return
        for item in self.notifications:
            item["is_read"] = True
        self.unread_count = 0

    async def _run(self) -> None:
        while True:
            await self.refresh_count()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if not self.running:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
