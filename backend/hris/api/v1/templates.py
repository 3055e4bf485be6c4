from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import get_current_user, get_db, get_page_params, require_permission
from hris.models.user import User
from hris.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, ok, paginated
from hris.schemas.template import TemplateCreate, TemplateOut, TemplateStatistics, TemplateUpdate
from hris.services.pagination import PageParams
from hris.services.template_service import TemplateService

router = APIRouter()


@router.get("", response_model=PaginatedResponse[TemplateOut])
async def list_templates(
    company_id: Optional[int] = None,
    category: Optional[str] = None,
    file_type: Optional[str] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    items, total = await TemplateService(db).list(
        params,
        company_id=company_id,
        category=category,
        file_type=file_type,
        is_active=is_active,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return paginated(items, params.page, params.limit, total)


@router.get("/statistics", response_model=ApiResponse[TemplateStatistics])
async def template_statistics(
    company_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return ok(await TemplateService(db).statistics(company_id))


@router.get("/company/{company_id}", response_model=ApiResponse[List[TemplateOut]])
async def company_templates(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return ok(await TemplateService(db).by_company(company_id))


@router.get("/category/{category}", response_model=ApiResponse[List[TemplateOut]])
async def category_templates(
    category: str,
    company_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return ok(await TemplateService(db).by_category(category, company_id))


@router.get("/{template_id}", response_model=ApiResponse[TemplateOut])
async def get_template(
    template_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return ok(await TemplateService(db).get(template_id))


@router.post("", response_model=ApiResponse[TemplateOut], status_code=201)
async def create_template(
    payload: TemplateCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("template:manage")),
) -> Any:
    template = await TemplateService(db).create(payload.model_dump(), current_user)
    return ok(template, message="Template created")


@router.put("/{template_id}", response_model=ApiResponse[TemplateOut])
async def update_template(
    template_id: int,
    payload: TemplateUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("template:manage")),
) -> Any:
    template = await TemplateService(db).update(
        template_id, payload.model_dump(exclude_unset=True), current_user
    )
    return ok(template, message="Template updated")


@router.post("/{template_id}/duplicate", response_model=ApiResponse[TemplateOut], status_code=201)
async def duplicate_template(
    template_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("template:manage")),
) -> Any:
    return ok(await TemplateService(db).duplicate(template_id, current_user), message="Template duplicated")


@router.post("/{template_id}/download", response_model=ApiResponse[TemplateOut])
async def track_template_download(
    template_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Count a download and return the template with its file location."""
    return ok(await TemplateService(db).track_download(template_id))


@router.delete("/{template_id}", response_model=MessageResponse)
async def delete_template(
    template_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("template:manage")),
) -> Any:
    await TemplateService(db).delete(template_id)
    return {"success": True, "message": "Template deleted"}
