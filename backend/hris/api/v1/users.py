from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import get_db, get_page_params, require_permission
from hris.core.config import settings
from hris.models.user import User
from hris.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, ok, paginated
from hris.schemas.user import UserCreate, UserDetail, UserOut, UserStats, UserUpdate
from hris.services.pagination import PageParams
from hris.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=PaginatedResponse[UserOut])
async def list_users(
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
    role: Optional[str] = None,
    company_id: Optional[int] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("user:read")),
) -> Any:
    items, total = await UserService(db).list(
        params, search=search, is_active=is_active, role=role, company_id=company_id
    )
    return paginated(items, params.page, params.limit, total)


@router.get("/stats", response_model=ApiResponse[UserStats])
async def user_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("user:read")),
) -> Any:
    return ok(await UserService(db).stats())


@router.get("/{user_id}", response_model=ApiResponse[UserDetail])
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("user:read")),
) -> Any:
    return ok(await UserService(db).get(user_id))


@router.post("", response_model=ApiResponse[UserDetail], status_code=201)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("user:manage")),
) -> Any:
    user = await UserService(db).create(payload, settings.MIN_PASSWORD_LENGTH)
    return ok(user, message="User created")


@router.put("/{user_id}", response_model=ApiResponse[UserDetail])
async def update_user(
    user_id: int,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("user:manage")),
) -> Any:
    user = await UserService(db).update(user_id, payload, settings.MIN_PASSWORD_LENGTH)
    return ok(user, message="User updated")


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("user:manage")),
) -> Any:
    await UserService(db).delete(user_id, current_user)
    return {"success": True, "message": "User deleted"}


@router.patch("/{user_id}/toggle-status", response_model=ApiResponse[UserOut])
async def toggle_user_status(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("user:manage")),
) -> Any:
    user = await UserService(db).toggle_status(user_id, current_user)
    state = "activated" if user.is_active else "deactivated"
    return ok(user, message=f"User {state}")
