from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from hris.schemas.common import PaginationMeta


class NotificationOut(BaseModel):
    id: int
    user_id: int
    type: str
    title: str
    message: Optional[str] = None
    link: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    success: bool = True
    data: List[NotificationOut]
    unread_count: int
    pagination: PaginationMeta


class UnreadCount(BaseModel):
    count: int


class BulkCount(BaseModel):
    count: int
