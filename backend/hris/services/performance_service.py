import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.exceptions import InvalidTransitionError, NotFoundError
from hris.models.employee import Employee
from hris.models.performance import PerformanceReview
from hris.services.notification_service import NotificationService
from hris.services.pagination import PageParams, apply_updates, paginate

logger = logging.getLogger("hris.performance")

# completed reviews are read-only
ALLOWED_STATUS_CHANGES = {
    "draft": {"pending_review", "in_progress"},
    "pending_review": {"draft", "in_progress", "completed"},
    "in_progress": {"pending_review", "completed"},
    "completed": set(),
}


class PerformanceReviewService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, review_id: int) -> PerformanceReview:
        review = await self.db.get(PerformanceReview, review_id, populate_existing=True)
        if review is None:
            raise NotFoundError(f"Performance review {review_id} not found")
        return review

    async def list(
        self,
        params: PageParams,
        employee_id: Optional[int] = None,
        reviewer_id: Optional[int] = None,
        status: Optional[str] = None,
        review_period: Optional[str] = None,
    ) -> Tuple[List[PerformanceReview], int]:
        query = select(PerformanceReview)
        if employee_id is not None:
            query = query.where(PerformanceReview.employee_id == employee_id)
        if reviewer_id is not None:
            query = query.where(PerformanceReview.reviewer_id == reviewer_id)
        if status:
            query = query.where(PerformanceReview.status == status)
        if review_period:
            query = query.where(PerformanceReview.review_period == review_period)
        query = query.order_by(PerformanceReview.created_at.desc(), PerformanceReview.id.desc())
        return await paginate(self.db, query, params)

    async def create(self, values: dict) -> PerformanceReview:
        if await self.db.get(Employee, values["employee_id"]) is None:
            raise NotFoundError(f"Employee {values['employee_id']} not found")
        review = PerformanceReview(**values)
        self.db.add(review)
        await self.db.commit()
        await self.db.refresh(review)
        return review

    async def update(self, review_id: int, changes: dict) -> PerformanceReview:
        review = await self.get(review_id)
        if review.status == "completed":
            raise InvalidTransitionError("Completed reviews cannot be edited")
        apply_updates(review, changes)
        await self.db.commit()
        await self.db.refresh(review)
        return review

    async def change_status(self, review_id: int, status: str) -> PerformanceReview:
        review = await self.get(review_id)
        if status not in ALLOWED_STATUS_CHANGES.get(review.status, set()):
            raise InvalidTransitionError(f"Cannot move review from '{review.status}' to '{status}'")
        review.status = status
        if status == "completed":
            await NotificationService(self.db).notify_employee(
                review.employee_id,
                title="Performance review completed",
                message=f"Your {review.review_period} review is available.",
                type="performance_review",
                link=f"/performance/{review.id}",
                data={"review_id": review.id},
            )
        await self.db.commit()
        await self.db.refresh(review)
        logger.info(f"Review {review.id} moved to {status}")
        return review

    async def delete(self, review_id: int) -> None:
        review = await self.get(review_id)
        await self.db.delete(review)
        await self.db.commit()
