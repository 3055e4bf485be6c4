from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import get_current_user, get_db, get_page_params, require_permission
from hris.models.user import User
from hris.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, ok, paginated
from hris.schemas.company import (
    CompanyCreate,
    CompanyFeatures,
    CompanyFeaturesUpdate,
    CompanyOut,
    CompanyUpdate,
)
from hris.services.organization_service import CompanyService
from hris.services.pagination import PageParams

router = APIRouter()


@router.get("", response_model=PaginatedResponse[CompanyOut])
async def list_companies(
    search: Optional[str] = None,
    company_type: Optional[str] = None,
    status: Optional[str] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("company:read")),
) -> Any:
    items, total = await CompanyService(db).list(
        params, search=search, company_type=company_type, status=status
    )
    return paginated(items, params.page, params.limit, total)


@router.get("/feature-toggles/all", response_model=ApiResponse[List[CompanyFeatures]])
async def list_company_features(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Feature toggles of every company; readable by any signed-in user."""
    return ok(await CompanyService(db).list_features())


@router.get("/{company_id}/feature-toggles", response_model=ApiResponse[CompanyFeatures])
async def get_company_features(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return ok(await CompanyService(db).get(company_id))


@router.put("/{company_id}/feature-toggles", response_model=ApiResponse[CompanyFeatures])
async def update_company_features(
    company_id: int,
    payload: CompanyFeaturesUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("company:manage")),
) -> Any:
    company = await CompanyService(db).update(company_id, payload.model_dump(exclude_unset=True))
    return ok(company, message="Company features updated")


@router.get("/{company_id}", response_model=ApiResponse[CompanyOut])
async def get_company(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("company:read")),
) -> Any:
    return ok(await CompanyService(db).get(company_id))


@router.post("", response_model=ApiResponse[CompanyOut], status_code=201)
async def create_company(
    payload: CompanyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("company:manage")),
) -> Any:
    company = await CompanyService(db).create(payload.model_dump(exclude_none=True))
    return ok(company, message="Company created")


@router.put("/{company_id}", response_model=ApiResponse[CompanyOut])
async def update_company(
    company_id: int,
    payload: CompanyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("company:manage")),
) -> Any:
    company = await CompanyService(db).update(company_id, payload.model_dump(exclude_unset=True))
    return ok(company, message="Company updated")


@router.delete("/{company_id}", response_model=MessageResponse)
async def delete_company(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("company:manage")),
) -> Any:
    await CompanyService(db).delete(company_id)
    return {"success": True, "message": "Company deleted"}
