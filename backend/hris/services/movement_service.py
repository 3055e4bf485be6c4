"""
Employee movement workflow.

A movement captures the employee's current placement when it is requested,
goes through approval, and is finally applied, which copies the requested
values onto the employee record. Every transition commits the movement, its
audit entry and its notification together. Concurrent transitions on the same
movement are detected through the ``version`` column.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from hris.core.audit import AuditLogger
from hris.core.exceptions import (
    BusinessRuleError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
)
from hris.models.employee import Employee
from hris.models.movement import (
    APPLY_FIELD_MAP,
    EDITABLE_STATUSES,
    STATUS_APPLIED,
    STATUS_APPROVED,
    STATUS_CANCELLED,
    STATUS_DRAFT,
    STATUS_PENDING,
    STATUS_REJECTED,
    TERMINAL_STATUSES,
    EmployeeMovement,
)
from hris.models.user import User
from hris.schemas.movement import MovementCreate, MovementUpdate
from hris.services.notification_service import NotificationService
from hris.services.pagination import PageParams, paginate

logger = logging.getLogger("hris.movements")

MOVEMENT_LABELS = {
    "promotion": "Promotion",
    "demotion": "Demotion",
    "transfer": "Transfer",
    "mutation": "Mutation",
    "salary_adjustment": "Salary adjustment",
    "grade_change": "Grade change",
    "status_change": "Status change",
    "department_change": "Department change",
    "position_change": "Position change",
    "company_transfer": "Company transfer",
}


def compute_salary_change(
    previous_salary: Optional[Decimal], new_salary: Optional[Decimal]
) -> Tuple[Optional[Decimal], Optional[float]]:
    """Return (absolute change, percentage change) or (None, None) without a new salary."""
    if new_salary is None:
        return None, None
    new_salary = Decimal(str(new_salary))
    if previous_salary is None:
        return new_salary, None
    previous_salary = Decimal(str(previous_salary))
    change = new_salary - previous_salary
    if previous_salary == 0:
        return change, None
    percentage = float(round(change / previous_salary * 100, 2))
    return change, percentage


class EmployeeMovementService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.notifications = NotificationService(db)

    # ---------------------------------------------------------------- reads

    def _query(self):
        return select(EmployeeMovement).options(selectinload(EmployeeMovement.employee))

    async def get(self, movement_id: int) -> EmployeeMovement:
        result = await self.db.execute(
            self._query()
            .where(EmployeeMovement.id == movement_id)
            .execution_options(populate_existing=True)
        )
        movement = result.scalar_one_or_none()
        if movement is None:
            raise NotFoundError(f"Employee movement {movement_id} not found")
        return movement

    async def list(
        self,
        params: PageParams,
        company_id: Optional[int] = None,
        employee_id: Optional[int] = None,
        movement_type: Optional[str] = None,
        status: Optional[str] = None,
        effective_from: Optional[date] = None,
        effective_to: Optional[date] = None,
        is_applied: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[EmployeeMovement], int]:
        query = self._query()
        if company_id is not None:
            query = query.where(EmployeeMovement.company_id == company_id)
        if employee_id is not None:
            query = query.where(EmployeeMovement.employee_id == employee_id)
        if movement_type:
            query = query.where(EmployeeMovement.movement_type == movement_type)
        if status:
            query = query.where(EmployeeMovement.status == status)
        if effective_from is not None:
            query = query.where(EmployeeMovement.effective_date >= effective_from)
        if effective_to is not None:
            query = query.where(EmployeeMovement.effective_date <= effective_to)
        if is_applied is not None:
            query = query.where(EmployeeMovement.is_applied == is_applied)
        if search:
            pattern = f"%{search}%"
            query = query.join(Employee, Employee.id == EmployeeMovement.employee_id).where(
                or_(
                    Employee.first_name.ilike(pattern),
                    Employee.last_name.ilike(pattern),
                    Employee.employee_id.ilike(pattern),
                    EmployeeMovement.reason.ilike(pattern),
                )
            )
        query = query.order_by(EmployeeMovement.created_at.desc(), EmployeeMovement.id.desc())
        return await paginate(self.db, query, params)

    async def list_by_employee(self, employee_id: int) -> List[EmployeeMovement]:
        result = await self.db.execute(
            self._query()
            .where(EmployeeMovement.employee_id == employee_id)
            .order_by(EmployeeMovement.effective_date.desc(), EmployeeMovement.id.desc())
        )
        return list(result.scalars().all())

    async def list_pending(
        self, params: PageParams, company_id: Optional[int] = None
    ) -> Tuple[List[EmployeeMovement], int]:
        return await self.list(params, company_id=company_id, status=STATUS_PENDING)

    async def list_ready_to_apply(
        self,
        params: PageParams,
        company_id: Optional[int] = None,
        as_of: Optional[date] = None,
    ) -> Tuple[List[EmployeeMovement], int]:
        """Approved, not yet applied movements whose effective date has been reached."""
        return await self.list(
            params,
            company_id=company_id,
            status=STATUS_APPROVED,
            is_applied=False,
            effective_to=as_of or date.today(),
        )

    async def statistics(self, company_id: Optional[int] = None) -> Dict:
        filters = []
        if company_id is not None:
            filters.append(EmployeeMovement.company_id == company_id)

        by_type_rows = await self.db.execute(
            select(EmployeeMovement.movement_type, func.count(EmployeeMovement.id))
            .where(*filters)
            .group_by(EmployeeMovement.movement_type)
        )
        by_type = {row[0]: row[1] for row in by_type_rows.all()}

        by_status_rows = await self.db.execute(
            select(EmployeeMovement.status, func.count(EmployeeMovement.id))
            .where(*filters)
            .group_by(EmployeeMovement.status)
        )
        by_status = {row[0]: row[1] for row in by_status_rows.all()}

        avg_result = await self.db.execute(
            select(func.avg(EmployeeMovement.salary_change_percentage)).where(
                *filters, EmployeeMovement.salary_change_percentage.is_not(None)
            )
        )
        avg_change = avg_result.scalar()

        ready_result = await self.db.execute(
            select(func.count(EmployeeMovement.id)).where(
                *filters,
                EmployeeMovement.status == STATUS_APPROVED,
                EmployeeMovement.is_applied.is_(False),
            )
        )

        return {
            "total_movements": sum(by_type.values()),
            "pending_count": by_status.get(STATUS_PENDING, 0),
            "ready_to_apply_count": ready_result.scalar() or 0,
            "applied_count": by_status.get(STATUS_APPLIED, 0),
            "avg_salary_change_percentage": round(float(avg_change), 2) if avg_change is not None else 0.0,
            "by_type": by_type,
            "by_status": by_status,
        }

    # --------------------------------------------------------------- writes

    async def create(self, data: MovementCreate, actor: User) -> EmployeeMovement:
        employee = await self.db.get(Employee, data.employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {data.employee_id} not found")

        requested = data.model_dump(include=set(APPLY_FIELD_MAP))
        if all(value is None for value in requested.values()):
            raise BusinessRuleError(
                "A movement must request at least one change",
                errors=[{"field": "new_position_id", "message": "No requested change"}],
            )

        salary_change, salary_change_percentage = compute_salary_change(
            employee.basic_salary, data.new_salary
        )
        now = datetime.utcnow()
        movement = EmployeeMovement(
            employee_id=employee.id,
            company_id=employee.company_id,
            movement_type=data.movement_type,
            effective_date=data.effective_date,
            previous_position_id=employee.position_id,
            previous_department_id=employee.department_id,
            previous_company_id=employee.company_id,
            previous_salary=employee.basic_salary,
            previous_grade=employee.grade_level,
            previous_status=employee.employment_status,
            salary_change=salary_change,
            salary_change_percentage=salary_change_percentage,
            reason=data.reason,
            notes=data.notes,
            status=STATUS_DRAFT if data.save_as_draft else STATUS_PENDING,
            requested_by=actor.id,
            requested_at=None if data.save_as_draft else now,
            is_applied=False,
            **requested,
        )
        self.db.add(movement)
        await self.db.flush()
        AuditLogger.log(
            self.db,
            action="movement.create",
            user_id=actor.id,
            username=actor.email,
            resource_type="employee_movement",
            resource_id=movement.id,
            metadata={"employee_id": employee.id, "movement_type": data.movement_type, "status": movement.status},
        )
        await self.db.commit()
        logger.info(f"Movement {movement.id} ({data.movement_type}) created for employee {employee.id}")
        return await self.get(movement.id)

    async def update(self, movement_id: int, data: MovementUpdate, actor: User) -> EmployeeMovement:
        movement = await self.get(movement_id)
        self._require_status(movement, EDITABLE_STATUSES, "update")

        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(movement, field, value)

        if all(getattr(movement, field) is None for field in APPLY_FIELD_MAP):
            raise BusinessRuleError("A movement must request at least one change")

        if "new_salary" in changes:
            movement.salary_change, movement.salary_change_percentage = compute_salary_change(
                movement.previous_salary, movement.new_salary
            )

        await self._commit()
        return await self.get(movement_id)

    async def submit(self, movement_id: int, actor: User) -> EmployeeMovement:
        movement = await self.get(movement_id)
        self._require_status(movement, {STATUS_DRAFT}, "submit")
        movement.status = STATUS_PENDING
        movement.requested_at = datetime.utcnow()
        self._audit(movement, actor, "movement.submit")
        await self._commit()
        return await self.get(movement_id)

    async def approve(self, movement_id: int, actor: User, approval_notes: Optional[str] = None) -> EmployeeMovement:
        movement = await self.get(movement_id)
        self._require_status(movement, {STATUS_PENDING}, "approve")

        movement.status = STATUS_APPROVED
        movement.approved_by = actor.id
        movement.approved_at = datetime.utcnow()
        movement.approval_notes = approval_notes

        self._audit(movement, actor, "movement.approve", {"approval_notes": approval_notes})
        await self._flush()
        await self.notifications.notify_employee(
            movement.employee_id,
            f"{MOVEMENT_LABELS.get(movement.movement_type, 'Movement')} approved",
            message=f"Your {movement.movement_type.replace('_', ' ')} effective {movement.effective_date} was approved.",
            type="movement_approved",
            link=f"/employee-movements/{movement.id}",
            data={"movement_id": movement.id},
        )
        await self._commit()
        logger.info(f"Movement {movement_id} approved by user {actor.id}")
        return await self.get(movement_id)

    async def reject(self, movement_id: int, actor: User, rejection_reason: str) -> EmployeeMovement:
        if not rejection_reason or not rejection_reason.strip():
            raise BusinessRuleError(
                "Rejection reason is required",
                errors=[{"field": "rejection_reason", "message": "Rejection reason is required"}],
            )

        movement = await self.get(movement_id)
        self._require_status(movement, {STATUS_PENDING}, "reject")

        movement.status = STATUS_REJECTED
        movement.rejected_by = actor.id
        movement.rejected_at = datetime.utcnow()
        movement.rejection_reason = rejection_reason.strip()

        self._audit(movement, actor, "movement.reject", {"rejection_reason": movement.rejection_reason})
        await self._flush()
        await self.notifications.notify_employee(
            movement.employee_id,
            f"{MOVEMENT_LABELS.get(movement.movement_type, 'Movement')} rejected",
            message=movement.rejection_reason,
            type="movement_rejected",
            link=f"/employee-movements/{movement.id}",
            data={"movement_id": movement.id},
        )
        await self._commit()
        logger.info(f"Movement {movement_id} rejected by user {actor.id}")
        return await self.get(movement_id)

    async def cancel(self, movement_id: int, actor: User) -> EmployeeMovement:
        movement = await self.get(movement_id)
        self._require_status(movement, EDITABLE_STATUSES, "cancel")
        movement.status = STATUS_CANCELLED
        movement.cancelled_at = datetime.utcnow()
        self._audit(movement, actor, "movement.cancel")
        await self._commit()
        return await self.get(movement_id)

    async def apply(self, movement_id: int, actor: User) -> EmployeeMovement:
        """Copy the requested values onto the employee and close the movement."""
        movement = await self.get(movement_id)
        if movement.status != STATUS_APPROVED or movement.is_applied:
            raise InvalidTransitionError(
                f"Only approved movements that have not been applied can be applied "
                f"(status: {movement.status})"
            )

        employee = await self.db.get(Employee, movement.employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {movement.employee_id} not found")

        applied_changes = {}
        for movement_field, employee_field in APPLY_FIELD_MAP.items():
            value = getattr(movement, movement_field)
            if value is not None:
                setattr(employee, employee_field, value)
                applied_changes[employee_field] = value

        movement.status = STATUS_APPLIED
        movement.is_applied = True
        movement.applied_at = datetime.utcnow()
        movement.applied_by = actor.id

        self._audit(movement, actor, "movement.apply", {"changes": applied_changes})
        await self._flush()
        await self.notifications.notify_employee(
            movement.employee_id,
            f"{MOVEMENT_LABELS.get(movement.movement_type, 'Movement')} applied",
            message=f"Your employee record was updated effective {movement.effective_date}.",
            type="movement_applied",
            link=f"/employee-movements/{movement.id}",
            data={"movement_id": movement.id},
        )
        await self._commit()
        logger.info(f"Movement {movement_id} applied to employee {employee.id}: {sorted(applied_changes)}")
        return await self.get(movement_id)

    async def delete(self, movement_id: int, actor: User) -> None:
        movement = await self.get(movement_id)
        self._require_status(movement, EDITABLE_STATUSES, "delete")
        await self.db.delete(movement)
        self._audit(movement, actor, "movement.delete")
        await self._commit()

    # -------------------------------------------------------------- helpers

    @staticmethod
    def _require_status(movement: EmployeeMovement, allowed, action: str) -> None:
        if movement.status in allowed:
            return
        if movement.status in TERMINAL_STATUSES:
            raise InvalidTransitionError(
                f"Cannot {action} a movement with status '{movement.status}': the movement is closed"
            )
        raise InvalidTransitionError(
            f"Cannot {action} a movement with status '{movement.status}'"
        )

    def _audit(self, movement: EmployeeMovement, actor: User, action: str, metadata: Optional[dict] = None) -> None:
        AuditLogger.log(
            self.db,
            action=action,
            user_id=actor.id,
            username=actor.email,
            resource_type="employee_movement",
            resource_id=movement.id,
            metadata={"employee_id": movement.employee_id, "status": movement.status, **(metadata or {})},
        )

    async def _flush(self) -> None:
        """Write the versioned UPDATE now, before any query can autoflush it."""
        try:
            await self.db.flush()
        except StaleDataError as exc:
            await self._stale(exc)

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except StaleDataError as exc:
            await self._stale(exc)

    async def _stale(self, exc: StaleDataError) -> None:
        await self.db.rollback()
        logger.warning(f"Optimistic lock lost on movement update: {exc}")
        raise ConflictError(
            "The movement was modified by another request. Reload and try again.",
            code="STALE_MOVEMENT",
        ) from exc
