from typing import Any, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import get_current_user, get_db, get_page_params
from hris.models.user import User
from hris.schemas.common import ApiResponse, PaginationMeta, ok
from hris.schemas.notification import BulkCount, NotificationListResponse, NotificationOut, UnreadCount
from hris.services.notification_service import NotificationService
from hris.services.pagination import PageParams

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    is_read: Optional[bool] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    items, total, unread = await NotificationService(db).list_for_user(current_user.id, params, is_read)
    return {
        "success": True,
        "data": items,
        "unread_count": unread,
        "pagination": PaginationMeta.build(params.page, params.limit, total),
    }


@router.get("/unread-count", response_model=ApiResponse[UnreadCount])
async def unread_count(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return ok({"count": await NotificationService(db).unread_count(current_user.id)})


@router.post("/mark-all-read", response_model=ApiResponse[BulkCount])
async def mark_all_read(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    count = await NotificationService(db).mark_all_as_read(current_user.id)
    return ok({"count": count}, message="All notifications marked as read")


@router.delete("/read", response_model=ApiResponse[BulkCount])
async def delete_read_notifications(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    count = await NotificationService(db).delete_all_read(current_user.id)
    return ok({"count": count}, message="Read notifications deleted")


@router.post("/{notification_id}/read", response_model=ApiResponse[NotificationOut])
async def mark_read(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return ok(await NotificationService(db).mark_as_read(notification_id, current_user.id))


@router.delete("/{notification_id}", response_model=ApiResponse[None])
async def delete_notification(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    await NotificationService(db).delete(notification_id, current_user.id)
    return ok(None, message="Notification deleted")
