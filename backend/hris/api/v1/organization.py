"""Departments, positions and work locations."""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import get_db, get_page_params, require_permission
from hris.models.organization import POSITION_LEVELS
from hris.models.user import User
from hris.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, ok, paginated
from hris.schemas.organization import (
    DepartmentCreate,
    DepartmentNode,
    DepartmentOut,
    DepartmentUpdate,
    PositionCreate,
    PositionLevel,
    PositionOut,
    PositionUpdate,
)
from hris.schemas.work_location import WorkLocationCreate, WorkLocationOut, WorkLocationUpdate
from hris.services.organization_service import DepartmentService, PositionService, WorkLocationService
from hris.services.pagination import PageParams

departments_router = APIRouter()
positions_router = APIRouter()
work_locations_router = APIRouter()


# ------------------------------------------------------------ departments

@departments_router.get("", response_model=PaginatedResponse[DepartmentOut])
async def list_departments(
    company_id: Optional[int] = None,
    parent_id: Optional[int] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("department:read")),
) -> Any:
    items, total = await DepartmentService(db).list(
        params, company_id=company_id, parent_id=parent_id, status=status, search=search
    )
    return paginated(items, params.page, params.limit, total)


@departments_router.get("/company/{company_id}", response_model=ApiResponse[List[DepartmentOut]])
async def list_company_departments(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("department:read")),
) -> Any:
    return ok(await DepartmentService(db).list_by_company(company_id))


@departments_router.get("/company/{company_id}/hierarchy", response_model=ApiResponse[List[DepartmentNode]])
async def department_hierarchy(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("department:read")),
) -> Any:
    return ok(await DepartmentService(db).hierarchy(company_id))


@departments_router.get("/{department_id}", response_model=ApiResponse[DepartmentOut])
async def get_department(
    department_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("department:read")),
) -> Any:
    return ok(await DepartmentService(db).get(department_id))


@departments_router.post("", response_model=ApiResponse[DepartmentOut], status_code=201)
async def create_department(
    payload: DepartmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("department:manage")),
) -> Any:
    department = await DepartmentService(db).create(payload.model_dump())
    return ok(department, message="Department created")


@departments_router.put("/{department_id}", response_model=ApiResponse[DepartmentOut])
async def update_department(
    department_id: int,
    payload: DepartmentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("department:manage")),
) -> Any:
    department = await DepartmentService(db).update(department_id, payload.model_dump(exclude_unset=True))
    return ok(department, message="Department updated")


@departments_router.delete("/{department_id}", response_model=MessageResponse)
async def delete_department(
    department_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("department:manage")),
) -> Any:
    await DepartmentService(db).delete(department_id)
    return {"success": True, "message": "Department deleted"}


# -------------------------------------------------------------- positions

@positions_router.get("", response_model=PaginatedResponse[PositionOut])
async def list_positions(
    company_id: Optional[int] = None,
    department_id: Optional[int] = None,
    level: Optional[int] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("position:read")),
) -> Any:
    items, total = await PositionService(db).list(
        params, company_id=company_id, department_id=department_id,
        level=level, status=status, search=search,
    )
    return paginated(items, params.page, params.limit, total)


@positions_router.get("/levels", response_model=ApiResponse[List[PositionLevel]])
async def list_position_levels(
    current_user: User = Depends(require_permission("position:read")),
) -> Any:
    return ok([{"level": level, "name": name} for level, name in sorted(POSITION_LEVELS.items())])


@positions_router.get("/company/{company_id}", response_model=ApiResponse[List[PositionOut]])
async def list_company_positions(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("position:read")),
) -> Any:
    return ok(await PositionService(db).list_by_company(company_id))


@positions_router.get("/{position_id}", response_model=ApiResponse[PositionOut])
async def get_position(
    position_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("position:read")),
) -> Any:
    return ok(await PositionService(db).get(position_id))


@positions_router.post("", response_model=ApiResponse[PositionOut], status_code=201)
async def create_position(
    payload: PositionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("position:manage")),
) -> Any:
    position = await PositionService(db).create(payload.model_dump())
    return ok(position, message="Position created")


@positions_router.put("/{position_id}", response_model=ApiResponse[PositionOut])
async def update_position(
    position_id: int,
    payload: PositionUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("position:manage")),
) -> Any:
    position = await PositionService(db).update(position_id, payload.model_dump(exclude_unset=True))
    return ok(position, message="Position updated")


@positions_router.delete("/{position_id}", response_model=MessageResponse)
async def delete_position(
    position_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("position:manage")),
) -> Any:
    await PositionService(db).delete(position_id)
    return {"success": True, "message": "Position deleted"}


# --------------------------------------------------------- work locations

@work_locations_router.get("", response_model=PaginatedResponse[WorkLocationOut])
async def list_work_locations(
    company_id: Optional[int] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("work_location:read")),
) -> Any:
    items, total = await WorkLocationService(db).list(
        params, company_id=company_id, is_active=is_active, search=search
    )
    return paginated(items, params.page, params.limit, total)


@work_locations_router.get("/company/{company_id}", response_model=ApiResponse[List[WorkLocationOut]])
async def list_company_work_locations(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("work_location:read")),
) -> Any:
    return ok(await WorkLocationService(db).list_by_company(company_id))


@work_locations_router.get("/{location_id}", response_model=ApiResponse[WorkLocationOut])
async def get_work_location(
    location_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("work_location:read")),
) -> Any:
    return ok(await WorkLocationService(db).get(location_id))


@work_locations_router.post("", response_model=ApiResponse[WorkLocationOut], status_code=201)
async def create_work_location(
    payload: WorkLocationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("work_location:manage")),
) -> Any:
    location = await WorkLocationService(db).create(payload.model_dump())
    return ok(location, message="Work location created")


@work_locations_router.put("/{location_id}", response_model=ApiResponse[WorkLocationOut])
async def update_work_location(
    location_id: int,
    payload: WorkLocationUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("work_location:manage")),
) -> Any:
    location = await WorkLocationService(db).update(location_id, payload.model_dump(exclude_unset=True))
    return ok(location, message="Work location updated")


@work_locations_router.delete("/{location_id}", response_model=MessageResponse)
async def delete_work_location(
    location_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("work_location:manage")),
) -> Any:
    await WorkLocationService(db).delete(location_id)
    return {"success": True, "message": "Work location deleted"}
