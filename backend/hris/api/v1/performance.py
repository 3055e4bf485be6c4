from typing import Any, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import get_db, get_page_params, require_permission
from hris.models.user import User
from hris.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, ok, paginated
from hris.schemas.performance import ReviewCreate, ReviewOut, ReviewStatusChange, ReviewUpdate
from hris.services.pagination import PageParams
from hris.services.performance_service import PerformanceReviewService

router = APIRouter()


@router.get("", response_model=PaginatedResponse[ReviewOut])
async def list_reviews(
    employee_id: Optional[int] = None,
    reviewer_id: Optional[int] = None,
    status: Optional[str] = None,
    review_period: Optional[str] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("performance:read")),
) -> Any:
    items, total = await PerformanceReviewService(db).list(
        params, employee_id=employee_id, reviewer_id=reviewer_id, status=status, review_period=review_period
    )
    return paginated(items, params.page, params.limit, total)


@router.get("/{review_id}", response_model=ApiResponse[ReviewOut])
async def get_review(
    review_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("performance:read")),
) -> Any:
    return ok(await PerformanceReviewService(db).get(review_id))


@router.post("", response_model=ApiResponse[ReviewOut], status_code=201)
async def create_review(
    payload: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("performance:manage")),
) -> Any:
    values = payload.model_dump(exclude_none=True)
    values.setdefault("reviewer_id", current_user.employee_id)
    review = await PerformanceReviewService(db).create(values)
    return ok(review, message="Performance review created")


@router.put("/{review_id}", response_model=ApiResponse[ReviewOut])
async def update_review(
    review_id: int,
    payload: ReviewUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("performance:manage")),
) -> Any:
    review = await PerformanceReviewService(db).update(review_id, payload.model_dump(exclude_unset=True))
    return ok(review, message="Performance review updated")


@router.patch("/{review_id}/status", response_model=ApiResponse[ReviewOut])
async def change_review_status(
    review_id: int,
    payload: ReviewStatusChange,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("performance:manage")),
) -> Any:
    review = await PerformanceReviewService(db).change_status(review_id, payload.status)
    return ok(review, message=f"Review status changed to {payload.status}")


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review(
    review_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("performance:manage")),
) -> Any:
    await PerformanceReviewService(db).delete(review_id)
    return {"success": True, "message": "Performance review deleted"}
