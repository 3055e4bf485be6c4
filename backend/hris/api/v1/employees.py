from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import get_current_employee, get_db, get_page_params, require_permission
from hris.models.employee import Employee
from hris.models.user import User
from hris.schemas.common import ApiResponse, PaginatedResponse, ok, paginated
from hris.schemas.employee import (
    EmployeeCreate,
    EmployeeOut,
    EmployeeSelfUpdate,
    EmployeeUpdate,
    NextEmployeeId,
)
from hris.services.employee_service import EmployeeService
from hris.services.pagination import PageParams

router = APIRouter()


@router.get("", response_model=PaginatedResponse[EmployeeOut])
async def list_employees(
    company_id: Optional[int] = None,
    department_id: Optional[int] = None,
    position_id: Optional[int] = None,
    work_location_id: Optional[int] = None,
    manager_id: Optional[int] = None,
    employment_status: Optional[str] = None,
    employment_type: Optional[str] = None,
    search: Optional[str] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("employee:read")),
) -> Any:
    items, total = await EmployeeService(db).list(
        params,
        company_id=company_id,
        department_id=department_id,
        position_id=position_id,
        work_location_id=work_location_id,
        manager_id=manager_id,
        employment_status=employment_status,
        employment_type=employment_type,
        search=search,
    )
    return paginated(items, params.page, params.limit, total)


@router.get("/me", response_model=ApiResponse[EmployeeOut])
async def get_my_profile(
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    return ok(await EmployeeService(db).get(employee.id))


@router.put("/me", response_model=ApiResponse[EmployeeOut])
async def update_my_profile(
    payload: EmployeeSelfUpdate,
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    """Update the caller's own contact, family and bank details."""
    updated = await EmployeeService(db).update_self(employee.id, payload)
    return ok(updated, message="Profile updated")


@router.get("/next-id/{company_id}", response_model=ApiResponse[NextEmployeeId])
async def next_employee_id(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("employee:create")),
) -> Any:
    number = await EmployeeService(db).next_employee_number(company_id)
    return ok({"company_id": company_id, "employee_id": number})


@router.get("/leadership-team", response_model=ApiResponse[List[EmployeeOut]])
async def leadership_team(
    company_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("employee:read")),
) -> Any:
    return ok(await EmployeeService(db).leadership(company_id))


@router.get("/by-employee-id/{employee_number}", response_model=ApiResponse[EmployeeOut])
async def get_employee_by_number(
    employee_number: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("employee:read")),
) -> Any:
    return ok(await EmployeeService(db).get_by_number(employee_number))


@router.get("/company/{company_id}", response_model=PaginatedResponse[EmployeeOut])
async def list_company_employees(
    company_id: int,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("employee:read")),
) -> Any:
    items, total = await EmployeeService(db).list(params, company_id=company_id)
    return paginated(items, params.page, params.limit, total)


@router.get("/department/{department_id}", response_model=PaginatedResponse[EmployeeOut])
async def list_department_employees(
    department_id: int,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("employee:read")),
) -> Any:
    items, total = await EmployeeService(db).list(params, department_id=department_id)
    return paginated(items, params.page, params.limit, total)


@router.get("/{employee_id}", response_model=ApiResponse[EmployeeOut])
async def get_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("employee:read")),
) -> Any:
    return ok(await EmployeeService(db).get(employee_id))


@router.get("/{employee_id}/subordinates", response_model=ApiResponse[List[EmployeeOut]])
async def list_subordinates(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("employee:read")),
) -> Any:
    return ok(await EmployeeService(db).subordinates(employee_id))


@router.post("", response_model=ApiResponse[EmployeeOut], status_code=201)
async def create_employee(
    payload: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("employee:create")),
) -> Any:
    """Create an employee; the employee number is generated when omitted."""
    employee = await EmployeeService(db).create(payload)
    return ok(employee, message="Employee created")


@router.put("/{employee_id}", response_model=ApiResponse[EmployeeOut])
async def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("employee:update")),
) -> Any:
    employee = await EmployeeService(db).update(employee_id, payload)
    return ok(employee, message="Employee updated")


@router.delete("/{employee_id}", response_model=ApiResponse[EmployeeOut])
async def deactivate_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("employee:delete")),
) -> Any:
    employee = await EmployeeService(db).deactivate(employee_id)
    return ok(employee, message="Employee deactivated")
