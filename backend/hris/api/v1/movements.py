"""
Employee movement endpoints.

Transitions map one-to-one onto :class:`EmployeeMovementService` methods;
invalid transitions and concurrent edits surface as 409.
"""

from datetime import date
from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import get_db, get_page_params, require_permission
from hris.models.user import User
from hris.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, ok, paginated
from hris.schemas.movement import (
    ApproveMovementRequest,
    MovementCreate,
    MovementOut,
    MovementStatistics,
    MovementUpdate,
    RejectMovementRequest,
)
from hris.services.movement_service import EmployeeMovementService
from hris.services.pagination import PageParams

router = APIRouter()


@router.get("", response_model=PaginatedResponse[MovementOut])
async def list_movements(
    company_id: Optional[int] = None,
    employee_id: Optional[int] = None,
    movement_type: Optional[str] = None,
    status: Optional[str] = None,
    effective_from: Optional[date] = None,
    effective_to: Optional[date] = None,
    is_applied: Optional[bool] = None,
    search: Optional[str] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:read")),
) -> Any:
    items, total = await EmployeeMovementService(db).list(
        params,
        company_id=company_id,
        employee_id=employee_id,
        movement_type=movement_type,
        status=status,
        effective_from=effective_from,
        effective_to=effective_to,
        is_applied=is_applied,
        search=search,
    )
    return paginated(items, params.page, params.limit, total)


@router.get("/pending", response_model=PaginatedResponse[MovementOut])
async def list_pending_movements(
    company_id: Optional[int] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:approve")),
) -> Any:
    items, total = await EmployeeMovementService(db).list_pending(params, company_id=company_id)
    return paginated(items, params.page, params.limit, total)


@router.get("/ready-to-apply", response_model=PaginatedResponse[MovementOut])
async def list_ready_to_apply(
    company_id: Optional[int] = None,
    as_of: Optional[date] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:apply")),
) -> Any:
    items, total = await EmployeeMovementService(db).list_ready_to_apply(
        params, company_id=company_id, as_of=as_of
    )
    return paginated(items, params.page, params.limit, total)


@router.get("/statistics", response_model=ApiResponse[MovementStatistics])
async def movement_statistics(
    company_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:read")),
) -> Any:
    return ok(await EmployeeMovementService(db).statistics(company_id))


@router.get("/employee/{employee_id}", response_model=ApiResponse[List[MovementOut]])
async def list_employee_movements(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:read")),
) -> Any:
    return ok(await EmployeeMovementService(db).list_by_employee(employee_id))


@router.get("/{movement_id}", response_model=ApiResponse[MovementOut])
async def get_movement(
    movement_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:read")),
) -> Any:
    return ok(await EmployeeMovementService(db).get(movement_id))


@router.post("", response_model=ApiResponse[MovementOut], status_code=201)
async def create_movement(
    payload: MovementCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:create")),
) -> Any:
    movement = await EmployeeMovementService(db).create(payload, current_user)
    message = "Movement saved as draft" if payload.save_as_draft else "Movement submitted for approval"
    return ok(movement, message=message)


@router.put("/{movement_id}", response_model=ApiResponse[MovementOut])
async def update_movement(
    movement_id: int,
    payload: MovementUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:create")),
) -> Any:
    movement = await EmployeeMovementService(db).update(movement_id, payload, current_user)
    return ok(movement, message="Movement updated")


@router.post("/{movement_id}/submit", response_model=ApiResponse[MovementOut])
async def submit_movement(
    movement_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:create")),
) -> Any:
    movement = await EmployeeMovementService(db).submit(movement_id, current_user)
    return ok(movement, message="Movement submitted for approval")


@router.post("/{movement_id}/approve", response_model=ApiResponse[MovementOut])
async def approve_movement(
    movement_id: int,
    payload: Optional[ApproveMovementRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:approve")),
) -> Any:
    notes = payload.approval_notes if payload else None
    movement = await EmployeeMovementService(db).approve(movement_id, current_user, notes)
    return ok(movement, message="Movement approved")


@router.post("/{movement_id}/reject", response_model=ApiResponse[MovementOut])
async def reject_movement(
    movement_id: int,
    payload: RejectMovementRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:approve")),
) -> Any:
    movement = await EmployeeMovementService(db).reject(movement_id, current_user, payload.rejection_reason)
    return ok(movement, message="Movement rejected")


@router.post("/{movement_id}/cancel", response_model=ApiResponse[MovementOut])
async def cancel_movement(
    movement_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:create")),
) -> Any:
    movement = await EmployeeMovementService(db).cancel(movement_id, current_user)
    return ok(movement, message="Movement cancelled")


@router.post("/{movement_id}/apply", response_model=ApiResponse[MovementOut])
async def apply_movement(
    movement_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:apply")),
) -> Any:
    """Copy the approved changes onto the employee record."""
    movement = await EmployeeMovementService(db).apply(movement_id, current_user)
    return ok(movement, message="Movement applied to employee record")


@router.delete("/{movement_id}", response_model=MessageResponse)
async def delete_movement(
    movement_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("movement:create")),
) -> Any:
    await EmployeeMovementService(db).delete(movement_id, current_user)
    return {"success": True, "message": "Movement deleted"}
