import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.audit import AuditLogger
from hris.core.exceptions import BusinessRuleError, ConflictError, InvalidTransitionError, NotFoundError
from hris.models.employee import Employee
from hris.models.leave import LeaveBalance, LeaveRequest, LeaveType
from hris.models.user import User
from hris.services.holiday_service import HolidayService, count_working_days
from hris.services.notification_service import NotificationService
from hris.services.pagination import PageParams, paginate

logger = logging.getLogger("hris.leave")


def working_days(start: date, end: date, holidays: Iterable[date] = ()) -> int:
    """Monday to Friday days between start and end, inclusive, skipping holidays."""
    if end < start:
        raise BusinessRuleError("end_date cannot be before start_date", code="INVALID_DATE_RANGE")
    return count_working_days(start, end, holidays)


class LeaveService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.notifications = NotificationService(db)

    # ----------------------------------------------------------- types

    async def list_types(self, company_id: Optional[int] = None) -> List[LeaveType]:
        query = select(LeaveType).where(LeaveType.is_active.is_(True))
        if company_id is not None:
            query = query.where(or_(LeaveType.company_id == company_id, LeaveType.company_id.is_(None)))
        result = await self.db.execute(query.order_by(LeaveType.name))
        return list(result.scalars().all())

    async def get_type(self, leave_type_id: int) -> LeaveType:
        leave_type = await self.db.get(LeaveType, leave_type_id)
        if leave_type is None or not leave_type.is_active:
            raise NotFoundError(f"Leave type {leave_type_id} not found")
        return leave_type

    # -------------------------------------------------------- requests

    async def get(self, request_id: int) -> LeaveRequest:
        leave = await self.db.get(LeaveRequest, request_id, populate_existing=True)
        if leave is None:
            raise NotFoundError(f"Leave request {request_id} not found")
        return leave

    async def list(
        self,
        params: PageParams,
        employee_id: Optional[int] = None,
        employee_ids: Optional[List[int]] = None,
        status: Optional[str] = None,
        leave_type_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Tuple[List[LeaveRequest], int]:
        query = select(LeaveRequest)
        if employee_id is not None:
            query = query.where(LeaveRequest.employee_id == employee_id)
        if employee_ids is not None:
            query = query.where(LeaveRequest.employee_id.in_(employee_ids))
        if status:
            query = query.where(LeaveRequest.status == status)
        if leave_type_id is not None:
            query = query.where(LeaveRequest.leave_type_id == leave_type_id)
        if start_date:
            query = query.where(LeaveRequest.end_date >= start_date)
        if end_date:
            query = query.where(LeaveRequest.start_date <= end_date)
        query = query.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
        return await paginate(self.db, query, params)

    async def pending_for_approver(self, params: PageParams, manager_id: Optional[int] = None):
        """Pending requests; limited to direct reports when a manager id is given."""
        employee_ids = None
        if manager_id is not None:
            result = await self.db.execute(select(Employee.id).where(Employee.manager_id == manager_id))
            employee_ids = [employee_id for (employee_id,) in result.all()]
        return await self.list(params, employee_ids=employee_ids, status="pending")

    async def create(
        self,
        employee_id: int,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        leave_type = await self.get_type(leave_type_id)
        total_days = await self._count_days(employee_id, start_date, end_date, leave_type)
        if total_days == 0:
            raise BusinessRuleError("The requested period contains no working days", code="NO_WORKING_DAYS")
        await self._check_overlap(employee_id, start_date, end_date)

        if leave_type.requires_balance:
            balance = await self._balance_for(employee_id, leave_type_id, start_date.year)
            if balance.remaining_days < total_days:
                raise BusinessRuleError(
                    f"Insufficient leave balance: {balance.remaining_days:g} days remaining, "
                    f"{total_days} requested",
                    code="INSUFFICIENT_BALANCE",
                )
            balance.pending_days += total_days

        leave = LeaveRequest(
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            reason=reason,
            status="pending",
        )
        self.db.add(leave)
        await self.db.commit()
        logger.info(f"Leave request created for employee {employee_id}: {total_days} days of {leave_type.code}")
        return await self.get(leave.id)

    async def update(self, request_id: int, changes: dict) -> LeaveRequest:
        leave = await self.get(request_id)
        if leave.status != "pending":
            raise InvalidTransitionError(f"Cannot edit a leave request in status '{leave.status}'")

        start = changes.get("start_date") or leave.start_date
        end = changes.get("end_date") or leave.end_date
        leave_type_id = changes.get("leave_type_id") or leave.leave_type_id
        leave_type = await self.get_type(leave_type_id)
        total_days = await self._count_days(leave.employee_id, start, end, leave_type)
        await self._check_overlap(leave.employee_id, start, end, exclude_id=leave.id)

        await self._release_pending(leave)
        if leave_type.requires_balance:
            balance = await self._balance_for(leave.employee_id, leave_type_id, start.year)
            if balance.remaining_days < total_days:
                raise BusinessRuleError("Insufficient leave balance", code="INSUFFICIENT_BALANCE")
            balance.pending_days += total_days

        leave.start_date = start
        leave.end_date = end
        leave.leave_type_id = leave_type_id
        leave.total_days = total_days
        if "reason" in changes:
            leave.reason = changes["reason"]
        await self.db.commit()
        return await self.get(request_id)

    async def cancel(self, request_id: int, actor: User) -> LeaveRequest:
        leave = await self.get(request_id)
        if leave.status == "pending":
            await self._release_pending(leave)
        elif leave.status == "approved" and leave.start_date > date.today():
            balance = await self._find_balance(leave)
            if balance is not None:
                balance.used_days = max((balance.used_days or 0) - leave.total_days, 0)
        else:
            raise InvalidTransitionError(f"Cannot cancel a leave request in status '{leave.status}'")
        leave.status = "cancelled"
        AuditLogger.log(self.db, action="leave.cancel", user_id=actor.id, username=actor.email,
                        resource_type="leave_request", resource_id=leave.id)
        await self.db.commit()
        return await self.get(request_id)

    async def approve(self, request_id: int, actor: User, notes: Optional[str] = None) -> LeaveRequest:
        leave = await self._pending(request_id)
        balance = await self._find_balance(leave)
        if balance is not None:
            balance.pending_days = max((balance.pending_days or 0) - leave.total_days, 0)
            balance.used_days = (balance.used_days or 0) + leave.total_days

        leave.status = "approved"
        leave.approved_by = actor.id
        leave.approved_at = datetime.utcnow()
        leave.approval_notes = notes
        AuditLogger.log(self.db, action="leave.approve", user_id=actor.id, username=actor.email,
                        resource_type="leave_request", resource_id=leave.id)
        await self.notifications.notify_employee(
            leave.employee_id,
            title="Leave request approved",
            message=f"Your leave from {leave.start_date} to {leave.end_date} was approved.",
            type="leave_approved",
            link=f"/leave/{leave.id}",
            data={"leave_request_id": leave.id},
        )
        await self.db.commit()
        return await self.get(request_id)

    async def reject(self, request_id: int, actor: User, reason: str) -> LeaveRequest:
        if not reason or not reason.strip():
            raise BusinessRuleError("Rejection reason is required", code="REASON_REQUIRED")
        leave = await self._pending(request_id)
        await self._release_pending(leave)

        leave.status = "rejected"
        leave.approved_by = actor.id
        leave.approved_at = datetime.utcnow()
        leave.rejection_reason = reason.strip()
        AuditLogger.log(self.db, action="leave.reject", user_id=actor.id, username=actor.email,
                        resource_type="leave_request", resource_id=leave.id)
        await self.notifications.notify_employee(
            leave.employee_id,
            title="Leave request rejected",
            message=f"Your leave request was rejected: {leave.rejection_reason}",
            type="leave_rejected",
            link=f"/leave/{leave.id}",
            data={"leave_request_id": leave.id},
        )
        await self.db.commit()
        return await self.get(request_id)

    async def delete(self, request_id: int) -> None:
        leave = await self.get(request_id)
        if leave.status == "approved":
            raise InvalidTransitionError("Approved leave must be cancelled, not deleted")
        if leave.status == "pending":
            await self._release_pending(leave)
        await self.db.delete(leave)
        await self.db.commit()

    # -------------------------------------------------------- balances

    async def list_balances(
        self,
        params: PageParams,
        employee_id: Optional[int] = None,
        year: Optional[int] = None,
        leave_type_id: Optional[int] = None,
    ) -> Tuple[List[LeaveBalance], int]:
        query = select(LeaveBalance)
        if employee_id is not None:
            query = query.where(LeaveBalance.employee_id == employee_id)
        if year is not None:
            query = query.where(LeaveBalance.year == year)
        if leave_type_id is not None:
            query = query.where(LeaveBalance.leave_type_id == leave_type_id)
        query = query.order_by(LeaveBalance.year.desc(), LeaveBalance.leave_type_id)
        return await paginate(self.db, query, params)

    async def balances_for_employee(self, employee_id: int, year: Optional[int] = None) -> List[LeaveBalance]:
        year = year or date.today().year
        result = await self.db.execute(
            select(LeaveBalance)
            .where(LeaveBalance.employee_id == employee_id, LeaveBalance.year == year)
            .order_by(LeaveBalance.leave_type_id)
        )
        return list(result.scalars().all())

    async def allocate_balance(
        self,
        employee_id: int,
        leave_type_id: int,
        year: int,
        allocated_days: float,
        carried_forward_days: float = 0,
    ) -> LeaveBalance:
        await self.get_type(leave_type_id)
        if await self.db.get(Employee, employee_id) is None:
            raise NotFoundError(f"Employee {employee_id} not found")

        balance = await self._get_balance(employee_id, leave_type_id, year)
        if balance is None:
            balance = LeaveBalance(
                employee_id=employee_id, leave_type_id=leave_type_id, year=year,
                used_days=0, pending_days=0,
            )
            self.db.add(balance)
        balance.allocated_days = allocated_days
        balance.carried_forward_days = carried_forward_days
        await self.db.commit()
        return await self._reload_balance(balance.id)

    async def adjust_balance(self, employee_id: int, leave_type_id: int, year: int,
                             adjustment: float, actor: User, reason: Optional[str] = None) -> LeaveBalance:
        balance = await self._get_balance(employee_id, leave_type_id, year)
        if balance is None:
            raise NotFoundError(f"No leave balance for employee {employee_id} in {year}")
        new_allocation = (balance.allocated_days or 0) + adjustment
        if new_allocation < 0:
            raise BusinessRuleError("Adjustment would make the allocation negative", code="INVALID_ADJUSTMENT")
        balance.allocated_days = new_allocation
        AuditLogger.log(self.db, action="leave.balance.adjust", user_id=actor.id, username=actor.email,
                        resource_type="leave_balance", resource_id=balance.id,
                        metadata={"adjustment": adjustment, "reason": reason})
        await self.db.commit()
        return await self._reload_balance(balance.id)

    # --------------------------------------------------------- helpers

    async def _pending(self, request_id: int) -> LeaveRequest:
        leave = await self.get(request_id)
        if leave.status != "pending":
            raise InvalidTransitionError(f"Leave request is '{leave.status}', expected 'pending'")
        return leave

    async def _count_days(self, employee_id: int, start: date, end: date, leave_type: LeaveType) -> int:
        """Working days in the period, net of the company's holidays."""
        if end < start:
            raise BusinessRuleError("end_date cannot be before start_date", code="INVALID_DATE_RANGE")
        if leave_type.requires_balance and start.year != end.year:
            # Balances are per calendar year
            raise BusinessRuleError(
                f"Leave cannot span {start.year} and {end.year}; submit one request per year",
                code="CROSS_YEAR_LEAVE",
            )
        employee = await self.db.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        holidays = await HolidayService(self.db).holiday_dates(start, end, employee.company_id)
        return working_days(start, end, holidays)

    async def _check_overlap(self, employee_id: int, start: date, end: date,
                             exclude_id: Optional[int] = None) -> None:
        query = select(LeaveRequest.id).where(
            LeaveRequest.employee_id == employee_id,
            LeaveRequest.status.in_(("pending", "approved")),
            LeaveRequest.start_date <= end,
            LeaveRequest.end_date >= start,
        )
        if exclude_id is not None:
            query = query.where(LeaveRequest.id != exclude_id)
        if (await self.db.execute(query)).first():
            raise ConflictError("Leave request overlaps an existing request", code="LEAVE_OVERLAP")

    async def _get_balance(self, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        result = await self.db.execute(
            select(LeaveBalance).where(
                LeaveBalance.employee_id == employee_id,
                LeaveBalance.leave_type_id == leave_type_id,
                LeaveBalance.year == year,
            )
        )
        return result.scalar_one_or_none()

    async def _balance_for(self, employee_id: int, leave_type_id: int, year: int) -> LeaveBalance:
        balance = await self._get_balance(employee_id, leave_type_id, year)
        if balance is None:
            raise BusinessRuleError(
                f"No leave balance allocated for {year}", code="INSUFFICIENT_BALANCE"
            )
        return balance

    async def _find_balance(self, leave: LeaveRequest) -> Optional[LeaveBalance]:
        return await self._get_balance(leave.employee_id, leave.leave_type_id, leave.start_date.year)

    async def _release_pending(self, leave: LeaveRequest) -> None:
        balance = await self._find_balance(leave)
        if balance is not None:
            balance.pending_days = max((balance.pending_days or 0) - leave.total_days, 0)

    async def _reload_balance(self, balance_id: int) -> LeaveBalance:
        return await self.db.get(LeaveBalance, balance_id, populate_existing=True)
