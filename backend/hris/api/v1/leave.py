from typing import Any, List, Optional
from datetime import date

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
from hris.schemas.leave import (
    AdjustBalanceRequest,
    AllocateBalanceRequest,
    LeaveApproveRequest,
    LeaveBalanceOut,
    LeaveRejectRequest,
    LeaveRequestCreate,
    LeaveRequestOut,
    LeaveRequestUpdate,
    LeaveTypeOut,
)
from hris.services.leave_service import LeaveService
from hris.services.pagination import PageParams

router = APIRouter()


@router.get("/types", response_model=ApiResponse[List[LeaveTypeOut]])
async def list_leave_types(
    company_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return ok(await LeaveService(db).list_types(company_id or current_user.company_id))


@router.get("/me", response_model=PaginatedResponse[LeaveRequestOut])
async def my_leave_requests(
    status: Optional[str] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    items, total = await LeaveService(db).list(params, employee_id=employee.id, status=status)
    return paginated(items, params.page, params.limit, total)


@router.get("/me/balances", response_model=ApiResponse[List[LeaveBalanceOut]])
async def my_leave_balances(
    year: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    return ok(await LeaveService(db).balances_for_employee(employee.id, year))


@router.get("/pending-approvals", response_model=PaginatedResponse[LeaveRequestOut])
async def pending_approvals(
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("leave:approve")),
) -> Any:
    """HR sees every pending request; managers only their direct reports."""
    manager_id = None
    if not has_permission(current_user, "leave:manage"):
        manager_id = current_user.employee_id or 0
    items, total = await LeaveService(db).pending_for_approver(params, manager_id)
    return paginated(items, params.page, params.limit, total)


@router.get("/balances/list", response_model=PaginatedResponse[LeaveBalanceOut])
async def list_balances(
    employee_id: Optional[int] = None,
    year: Optional[int] = None,
    leave_type_id: Optional[int] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("leave:read", "leave:manage")),
) -> Any:
    items, total = await LeaveService(db).list_balances(
        params, employee_id=employee_id, year=year, leave_type_id=leave_type_id
    )
    return paginated(items, params.page, params.limit, total)


@router.post("/balances/allocate", response_model=ApiResponse[LeaveBalanceOut])
async def allocate_balance(
    payload: AllocateBalanceRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("leave:manage")),
) -> Any:
    balance = await LeaveService(db).allocate_balance(
        payload.employee_id, payload.leave_type_id, payload.year,
        payload.allocated_days, payload.carried_forward_days,
    )
    return ok(balance, message="Leave balance allocated")


@router.post("/balances/adjust", response_model=ApiResponse[LeaveBalanceOut])
async def adjust_balance(
    payload: AdjustBalanceRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("leave:manage")),
) -> Any:
    balance = await LeaveService(db).adjust_balance(
        payload.employee_id, payload.leave_type_id, payload.year,
        payload.adjustment_days, current_user, payload.adjustment_reason,
    )
    return ok(balance, message="Leave balance adjusted")


@router.get("", response_model=PaginatedResponse[LeaveRequestOut])
async def list_leave_requests(
    employee_id: Optional[int] = None,
    status: Optional[str] = None,
    leave_type_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("leave:read")),
) -> Any:
    items, total = await LeaveService(db).list(
        params, employee_id=employee_id, status=status, leave_type_id=leave_type_id,
        start_date=start_date, end_date=end_date,
    )
    return paginated(items, params.page, params.limit, total)


@router.post("", response_model=ApiResponse[LeaveRequestOut], status_code=201)
async def create_leave_request(
    payload: LeaveRequestCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """File a leave request for yourself, or for another employee with leave:manage."""
    employee_id = payload.employee_id or current_user.employee_id
    if employee_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No employee record is linked to this account"
        )
    if employee_id != current_user.employee_id and not has_permission(current_user, "leave:manage"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Permission denied. Required: leave:manage"
        )
    leave = await LeaveService(db).create(
        employee_id, payload.leave_type_id, payload.start_date, payload.end_date, payload.reason
    )
    return ok(leave, message="Leave request submitted")


@router.get("/{request_id}", response_model=ApiResponse[LeaveRequestOut])
async def get_leave_request(
    request_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    leave = await LeaveService(db).get(request_id)
    _ensure_owner_or(current_user, leave.employee_id, "leave:read")
    return ok(leave)


@router.put("/{request_id}", response_model=ApiResponse[LeaveRequestOut])
async def update_leave_request(
    request_id: int,
    payload: LeaveRequestUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    service = LeaveService(db)
    _ensure_owner_or(current_user, (await service.get(request_id)).employee_id, "leave:manage")
    leave = await service.update(request_id, payload.model_dump(exclude_unset=True))
    return ok(leave, message="Leave request updated")


@router.post("/{request_id}/cancel", response_model=ApiResponse[LeaveRequestOut])
async def cancel_leave_request(
    request_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    service = LeaveService(db)
    _ensure_owner_or(current_user, (await service.get(request_id)).employee_id, "leave:manage")
    return ok(await service.cancel(request_id, current_user), message="Leave request cancelled")


@router.post("/{request_id}/approve", response_model=ApiResponse[LeaveRequestOut])
async def approve_leave_request(
    request_id: int,
    payload: Optional[LeaveApproveRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("leave:approve")),
) -> Any:
    notes = payload.approval_notes if payload else None
    leave = await LeaveService(db).approve(request_id, current_user, notes)
    return ok(leave, message="Leave request approved")


@router.post("/{request_id}/reject", response_model=ApiResponse[LeaveRequestOut])
async def reject_leave_request(
    request_id: int,
    payload: LeaveRejectRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("leave:approve")),
) -> Any:
    leave = await LeaveService(db).reject(request_id, current_user, payload.rejection_reason)
    return ok(leave, message="Leave request rejected")


@router.delete("/{request_id}", response_model=MessageResponse)
async def delete_leave_request(
    request_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("leave:manage")),
) -> Any:
    await LeaveService(db).delete(request_id)
    return {"success": True, "message": "Leave request deleted"}


def _ensure_owner_or(user: User, employee_id: int, permission: str) -> None:
    if user.employee_id == employee_id or has_permission(user, permission):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Permission denied. Required: {permission}"
    )
