from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import (
    get_current_employee,
    get_current_user,
    get_db,
    get_page_params,
    has_permission,
    require_permission,
)
from hris.models.employee import Employee
from hris.models.user import User
from hris.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, ok, paginated
from hris.schemas.overtime import (
    OvertimeApproveRequest,
    OvertimeCreate,
    OvertimeOut,
    OvertimeRejectRequest,
    OvertimeUpdate,
)
from hris.services.overtime_service import OvertimeService
from hris.services.pagination import PageParams

router = APIRouter()


@router.get("/me", response_model=PaginatedResponse[OvertimeOut])
async def my_overtime(
    status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    items, total = await OvertimeService(db).list(
        params, employee_id=employee.id, status=status, start_date=start_date, end_date=end_date
    )
    return paginated(items, params.page, params.limit, total)


@router.get("/pending-approvals", response_model=PaginatedResponse[OvertimeOut])
async def pending_approvals(
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("overtime:approve")),
) -> Any:
    """HR sees every pending request; managers only their direct reports."""
    manager_id = None
    if not has_permission(current_user, "employee:update"):
        manager_id = current_user.employee_id or 0
    items, total = await OvertimeService(db).pending_for_approver(params, manager_id)
    return paginated(items, params.page, params.limit, total)


@router.get("", response_model=PaginatedResponse[OvertimeOut])
async def list_overtime(
    employee_id: Optional[int] = None,
    status: Optional[str] = None,
    overtime_type: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("overtime:read")),
) -> Any:
    items, total = await OvertimeService(db).list(
        params, employee_id=employee_id, status=status, overtime_type=overtime_type,
        start_date=start_date, end_date=end_date,
    )
    return paginated(items, params.page, params.limit, total)


@router.post("", response_model=ApiResponse[OvertimeOut], status_code=201)
async def create_overtime(
    payload: OvertimeCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    """File overtime for yourself."""
    values = payload.model_dump(exclude={"employee_id", "rate_multiplier"})
    overtime = await OvertimeService(db).create(employee.id, values, current_user)
    return ok(overtime, message="Overtime request submitted")


@router.post("/employee", response_model=ApiResponse[OvertimeOut], status_code=201)
async def create_overtime_for_employee(
    payload: OvertimeCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("overtime:approve")),
) -> Any:
    """File overtime on behalf of an employee; a custom rate multiplier is allowed here."""
    if payload.employee_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="employee_id is required"
        )
    overtime = await OvertimeService(db).create(payload.employee_id, payload.model_dump(), current_user)
    return ok(overtime, message="Overtime request submitted")


@router.get("/{overtime_id}", response_model=ApiResponse[OvertimeOut])
async def get_overtime(
    overtime_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    overtime = await OvertimeService(db).get(overtime_id)
    _ensure_owner_or(current_user, overtime.employee_id, "overtime:read")
    return ok(overtime)


@router.put("/{overtime_id}", response_model=ApiResponse[OvertimeOut])
async def update_overtime(
    overtime_id: int,
    payload: OvertimeUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    service = OvertimeService(db)
    _ensure_owner_or(current_user, (await service.get(overtime_id)).employee_id, "overtime:approve")
    overtime = await service.update(overtime_id, payload.model_dump(exclude_unset=True))
    return ok(overtime, message="Overtime request updated")


@router.post("/{overtime_id}/cancel", response_model=ApiResponse[OvertimeOut])
async def cancel_overtime(
    overtime_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    service = OvertimeService(db)
    _ensure_owner_or(current_user, (await service.get(overtime_id)).employee_id, "overtime:approve")
    return ok(await service.cancel(overtime_id), message="Overtime request cancelled")


@router.post("/{overtime_id}/approve", response_model=ApiResponse[OvertimeOut])
async def approve_overtime(
    overtime_id: int,
    payload: Optional[OvertimeApproveRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("overtime:approve")),
) -> Any:
    notes = payload.approval_notes if payload else None
    overtime = await OvertimeService(db).approve(overtime_id, current_user, notes)
    return ok(overtime, message="Overtime request approved")


@router.post("/{overtime_id}/reject", response_model=ApiResponse[OvertimeOut])
async def reject_overtime(
    overtime_id: int,
    payload: OvertimeRejectRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("overtime:approve")),
) -> Any:
    overtime = await OvertimeService(db).reject(overtime_id, current_user, payload.rejection_reason)
    return ok(overtime, message="Overtime request rejected")


@router.delete("/{overtime_id}", response_model=MessageResponse)
async def delete_overtime(
    overtime_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    service = OvertimeService(db)
    _ensure_owner_or(current_user, (await service.get(overtime_id)).employee_id, "overtime:approve")
    await service.delete(overtime_id)
    return {"success": True, "message": "Overtime request deleted"}


def _ensure_owner_or(user: User, employee_id: int, permission: str) -> None:
    if user.employee_id == employee_id or has_permission(user, permission):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Permission denied. Required: {permission}"
    )
