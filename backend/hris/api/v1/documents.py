from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
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
from hris.schemas.document import (
    DocumentCompleteness,
    DocumentStatistics,
    EmployeeDocumentCreate,
    EmployeeDocumentOut,
    EmployeeDocumentUpdate,
    VerifyDocumentRequest,
)
from hris.services.document_service import DocumentService
from hris.services.pagination import PageParams

router = APIRouter()


@router.get("/me", response_model=ApiResponse[List[EmployeeDocumentOut]])
async def my_documents(
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    return ok(await DocumentService(db).for_employee(employee.id))


@router.get("/me/completeness", response_model=ApiResponse[DocumentCompleteness])
async def my_completeness(
    db: AsyncSession = Depends(get_db),
    employee: Employee = Depends(get_current_employee),
) -> Any:
    return ok(await DocumentService(db).completeness(employee.id))


@router.get("/statistics", response_model=ApiResponse[DocumentStatistics])
async def document_statistics(
    employee_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("document:read")),
) -> Any:
    company_id = None if employee_id else current_user.company_id
    return ok(await DocumentService(db).statistics(employee_id, company_id))


@router.get("/expiring", response_model=ApiResponse[List[EmployeeDocumentOut]])
async def expiring_documents(
    days: int = Query(30, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("document:read")),
) -> Any:
    return ok(await DocumentService(db).expiring(days, current_user.company_id))


@router.get("/expired", response_model=ApiResponse[List[EmployeeDocumentOut]])
async def expired_documents(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("document:read")),
) -> Any:
    return ok(await DocumentService(db).expired(current_user.company_id))


@router.get("/completeness/{employee_id}", response_model=ApiResponse[DocumentCompleteness])
async def employee_completeness(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    _ensure_owner_or(current_user, employee_id, "document:read")
    return ok(await DocumentService(db).completeness(employee_id))


@router.get("", response_model=PaginatedResponse[EmployeeDocumentOut])
async def list_documents(
    employee_id: Optional[int] = None,
    document_type: Optional[str] = None,
    category: Optional[str] = Query(None, pattern="^(employee|hr)$"),
    is_verified: Optional[bool] = None,
    is_required: Optional[bool] = None,
    search: Optional[str] = None,
    sort_by: str = "created_at",
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("document:read")),
) -> Any:
    items, total = await DocumentService(db).list(
        params, employee_id=employee_id, company_id=current_user.company_id,
        document_type=document_type, category=category, is_verified=is_verified,
        is_required=is_required, search=search, sort_by=sort_by, sort_order=sort_order,
    )
    return paginated(items, params.page, params.limit, total)


@router.post("", response_model=ApiResponse[EmployeeDocumentOut], status_code=201)
async def create_document(
    payload: EmployeeDocumentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Attach an uploaded file to an employee record; your own, or anyone's with document:manage."""
    employee_id = payload.employee_id or current_user.employee_id
    if employee_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No employee record is linked to this account"
        )
    manager = has_permission(current_user, "document:manage")
    if employee_id != current_user.employee_id and not manager:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Permission denied. Required: document:manage"
        )
    document = await DocumentService(db).create(
        employee_id, payload.model_dump(), current_user, self_service=not manager
    )
    return ok(document, message="Document saved")


@router.get("/{document_id}", response_model=ApiResponse[EmployeeDocumentOut])
async def get_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    document = await DocumentService(db).get(document_id)
    _ensure_owner_or(current_user, document.employee_id, "document:read")
    return ok(document)


@router.put("/{document_id}", response_model=ApiResponse[EmployeeDocumentOut])
async def update_document(
    document_id: int,
    payload: EmployeeDocumentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("document:manage")),
) -> Any:
    document = await DocumentService(db).update(document_id, payload.model_dump(exclude_unset=True))
    return ok(document, message="Document updated")


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    service = DocumentService(db)
    _ensure_owner_or(current_user, (await service.get(document_id)).employee_id, "document:manage")
    await service.delete(document_id, current_user,
                         self_service=not has_permission(current_user, "document:manage"))
    return {"success": True, "message": "Document deleted"}


@router.post("/{document_id}/verify", response_model=ApiResponse[EmployeeDocumentOut])
async def verify_document(
    document_id: int,
    payload: Optional[VerifyDocumentRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("document:manage")),
) -> Any:
    notes = payload.verification_notes if payload else None
    document = await DocumentService(db).verify(document_id, current_user, notes)
    return ok(document, message="Document verified")


@router.post("/{document_id}/unverify", response_model=ApiResponse[EmployeeDocumentOut])
async def unverify_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("document:manage")),
) -> Any:
    document = await DocumentService(db).unverify(document_id, current_user)
    return ok(document, message="Document verification removed")


def _ensure_owner_or(user: User, employee_id: int, permission: str) -> None:
    if user.employee_id == employee_id or has_permission(user, permission):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Permission denied. Required: {permission}"
    )
