"""
In-app notifications.

Other services call :meth:`NotificationService.notify_employee` inside their
own unit of work; the notification is committed with the change it reports.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.exceptions import NotFoundError
from hris.models.notification import Notification
from hris.models.user import User
from hris.services.pagination import PageParams, paginate

logger = logging.getLogger("hris.notifications")


class NotificationService:
    def __init__(self, db: AsyncSession):
        self.db = db

    def notify(
        self,
        user_id: int,
        title: str,
        message: Optional[str] = None,
        type: str = "info",
        link: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            link=link,
            data=data,
            is_read=False,
        )
        self.db.add(notification)
        return notification

    async def notify_employee(self, employee_id: int, title: str, **kwargs) -> Optional[Notification]:
        """Notify the user account linked to an employee, if there is one."""
        result = await self.db.execute(select(User.id).where(User.employee_id == employee_id))
        user_id = result.scalar_one_or_none()
        if user_id is None:
            logger.debug(f"Employee {employee_id} has no user account; notification skipped")
            return None
        return self.notify(user_id, title, **kwargs)

    async def list_for_user(
        self, user_id: int, params: PageParams, is_read: Optional[bool] = None
    ) -> Tuple[List[Notification], int, int]:
        """Return (page of notifications, total, unread count)."""
        query = select(Notification).where(Notification.user_id == user_id)
        if is_read is not None:
            query = query.where(Notification.is_read == is_read)
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
        items, total = await paginate(self.db, query, params)
        return items, total, await self.unread_count(user_id)

    async def unread_count(self, user_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        )
        return result.scalar() or 0

    async def _get_owned(self, notification_id: int, user_id: int) -> Notification:
        result = await self.db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        notification = result.scalar_one_or_none()
        if notification is None:
            raise NotFoundError("Notification not found")
        return notification

    async def mark_as_read(self, notification_id: int, user_id: int) -> Notification:
        notification = await self._get_owned(notification_id, user_id)
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.utcnow()
            await self.db.commit()
        return notification

    async def mark_all_as_read(self, user_id: int) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True, read_at=datetime.utcnow())
        )
        await self.db.commit()
        return result.rowcount or 0

    async def delete(self, notification_id: int, user_id: int) -> None:
        notification = await self._get_owned(notification_id, user_id)
        await self.db.delete(notification)
        await self.db.commit()

    async def delete_all_read(self, user_id: int) -> int:
        result = await self.db.execute(
            delete(Notification).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(True),
            )
        )
        await self.db.commit()
        return result.rowcount or 0
