"""
Overtime requests.

Hours come from the clock times (a shift may run past midnight) or are given
directly. Pay follows the statutory hourly base of monthly salary / 173,
multiplied by a rate that depends on whether the day is a working day, a
weekend or a holiday.
"""

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.audit import AuditLogger
from hris.core.exceptions import BusinessRuleError, ConflictError, InvalidTransitionError, NotFoundError
from hris.models.employee import Employee
from hris.models.overtime import OvertimeRequest
from hris.models.user import User
from hris.services.holiday_service import HolidayService
from hris.services.notification_service import NotificationService
from hris.services.pagination import PageParams, apply_updates, paginate

logger = logging.getLogger("hris.overtime")

OVERTIME_MULTIPLIERS = {"regular": 1.5, "weekend": 2.0, "holiday": 3.0}

# Monthly salary divisor for the hourly rate (Kepmenakertrans 102/2004)
MONTHLY_HOURS_DIVISOR = 173


def calculate_hours(start_time: str, end_time: str, break_minutes: int = 0) -> float:
    """Hours between two HH:MM clock times, minus the break."""
    start_h, start_m = (int(part) for part in start_time.split(":"))
    end_h, end_m = (int(part) for part in end_time.split(":"))
    minutes = (end_h * 60 + end_m) - (start_h * 60 + start_m)
    if minutes <= 0:
        minutes += 24 * 60
    minutes -= break_minutes or 0
    if minutes <= 0:
        raise BusinessRuleError("Break is longer than the overtime period", code="INVALID_OVERTIME_HOURS")
    return round(minutes / 60, 2)


def hourly_rate(basic_salary) -> Decimal:
    if not basic_salary:
        return Decimal("0")
    return (Decimal(basic_salary) / MONTHLY_HOURS_DIVISOR).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def overtime_amount(hours: float, rate_per_hour: Decimal, multiplier: float) -> Decimal:
    amount = Decimal(str(hours)) * rate_per_hour * Decimal(str(multiplier))
    return amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


class OvertimeService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.notifications = NotificationService(db)

    async def get(self, overtime_id: int) -> OvertimeRequest:
        overtime = await self.db.get(OvertimeRequest, overtime_id, populate_existing=True)
        if overtime is None:
            raise NotFoundError(f"Overtime request {overtime_id} not found")
        return overtime

    async def list(
        self,
        params: PageParams,
        employee_id: Optional[int] = None,
        employee_ids: Optional[List[int]] = None,
        company_id: Optional[int] = None,
        status: Optional[str] = None,
        overtime_type: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Tuple[List[OvertimeRequest], int]:
        query = select(OvertimeRequest)
        if employee_id is not None:
            query = query.where(OvertimeRequest.employee_id == employee_id)
        if employee_ids is not None:
            query = query.where(OvertimeRequest.employee_id.in_(employee_ids))
        if company_id is not None:
            query = query.where(OvertimeRequest.company_id == company_id)
        if status:
            query = query.where(OvertimeRequest.status == status)
        if overtime_type:
            query = query.where(OvertimeRequest.overtime_type == overtime_type)
        if start_date:
            query = query.where(OvertimeRequest.date >= start_date)
        if end_date:
            query = query.where(OvertimeRequest.date <= end_date)
        query = query.order_by(OvertimeRequest.date.desc(), OvertimeRequest.id.desc())
        return await paginate(self.db, query, params)

    async def pending_for_approver(self, params: PageParams, manager_id: Optional[int] = None):
        """Pending requests; limited to direct reports when a manager id is given."""
        employee_ids = None
        if manager_id is not None:
            result = await self.db.execute(select(Employee.id).where(Employee.manager_id == manager_id))
            employee_ids = [employee_id for (employee_id,) in result.all()]
        return await self.list(params, employee_ids=employee_ids, status="pending")

    async def classify(self, day: date, company_id: Optional[int]) -> str:
        if await HolidayService(self.db).holiday_dates(day, day, company_id):
            return "holiday"
        if day.weekday() >= 5:
            return "weekend"
        return "regular"

    async def create(self, employee_id: int, values: dict, actor: User) -> OvertimeRequest:
        employee = await self.db.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        values = {k: v for k, v in values.items() if k != "employee_id"}
        reason = (values.get("reason") or "").strip()
        if not reason:
            raise BusinessRuleError("A reason is required", code="REASON_REQUIRED")
        await self._check_duplicate(employee_id, values["date"])

        overtime = OvertimeRequest(
            employee_id=employee_id,
            company_id=employee.company_id,
            date=values["date"],
            start_time=values.get("start_time"),
            end_time=values.get("end_time"),
            break_minutes=values.get("break_minutes") or 0,
            reason=reason,
            task_description=values.get("task_description"),
            status="pending",
            requested_by=actor.id,
        )
        await self._price(overtime, employee, values.get("hours"), values.get("overtime_type"),
                          values.get("rate_multiplier"))
        self.db.add(overtime)
        await self.db.commit()
        logger.info(f"Overtime filed for employee {employee_id} on {overtime.date}: "
                    f"{overtime.hours}h {overtime.overtime_type}")
        return await self.get(overtime.id)

    async def update(self, overtime_id: int, changes: dict) -> OvertimeRequest:
        overtime = await self._pending(overtime_id)
        if "reason" in changes:
            if not (changes["reason"] or "").strip():
                raise BusinessRuleError("A reason is required", code="REASON_REQUIRED")
            changes["reason"] = changes["reason"].strip()
        if changes.get("date") and changes["date"] != overtime.date:
            await self._check_duplicate(overtime.employee_id, changes["date"], exclude_id=overtime.id)

        hours = changes.pop("hours", None)
        overtime_type = changes.pop("overtime_type", None)
        apply_updates(overtime, changes)
        if hours is None and not {"start_time", "end_time", "break_minutes"} & changes.keys():
            hours = overtime.hours
        keep_rate = overtime_type is None and "date" not in changes
        if keep_rate:
            overtime_type = overtime.overtime_type
        employee = await self.db.get(Employee, overtime.employee_id)
        await self._price(overtime, employee, hours, overtime_type,
                          overtime.rate_multiplier if keep_rate else None)
        await self.db.commit()
        return await self.get(overtime_id)

    async def approve(self, overtime_id: int, actor: User, notes: Optional[str] = None) -> OvertimeRequest:
        overtime = await self._pending(overtime_id)
        overtime.status = "approved"
        overtime.approved_by = actor.id
        overtime.approved_at = datetime.utcnow()
        overtime.approval_notes = notes
        AuditLogger.log(self.db, action="overtime.approve", user_id=actor.id, username=actor.email,
                        resource_type="overtime_request", resource_id=overtime.id,
                        metadata={"hours": overtime.hours, "amount": str(overtime.total_amount)})
        await self.notifications.notify_employee(
            overtime.employee_id,
            title="Overtime approved",
            message=f"Your {overtime.hours:g}h overtime on {overtime.date} was approved.",
            type="overtime_approved",
            link=f"/overtime/{overtime.id}",
            data={"overtime_request_id": overtime.id},
        )
        await self.db.commit()
        return await self.get(overtime_id)

    async def reject(self, overtime_id: int, actor: User, reason: str) -> OvertimeRequest:
        if not reason or not reason.strip():
            raise BusinessRuleError("Rejection reason is required", code="REASON_REQUIRED")
        overtime = await self._pending(overtime_id)
        overtime.status = "rejected"
        overtime.approved_by = actor.id
        overtime.approved_at = datetime.utcnow()
        overtime.rejection_reason = reason.strip()
        AuditLogger.log(self.db, action="overtime.reject", user_id=actor.id, username=actor.email,
                        resource_type="overtime_request", resource_id=overtime.id)
        await self.notifications.notify_employee(
            overtime.employee_id,
            title="Overtime rejected",
            message=f"Your overtime on {overtime.date} was rejected: {overtime.rejection_reason}",
            type="overtime_rejected",
            link=f"/overtime/{overtime.id}",
            data={"overtime_request_id": overtime.id},
        )
        await self.db.commit()
        return await self.get(overtime_id)

    async def cancel(self, overtime_id: int) -> OvertimeRequest:
        overtime = await self._pending(overtime_id)
        overtime.status = "cancelled"
        await self.db.commit()
        return await self.get(overtime_id)

    async def delete(self, overtime_id: int) -> None:
        overtime = await self.get(overtime_id)
        if overtime.status == "approved":
            raise InvalidTransitionError("Approved overtime cannot be deleted")
        await self.db.delete(overtime)
        await self.db.commit()

    async def _pending(self, overtime_id: int) -> OvertimeRequest:
        overtime = await self.get(overtime_id)
        if overtime.status != "pending":
            raise InvalidTransitionError(f"Overtime request is '{overtime.status}', expected 'pending'")
        return overtime

    async def _check_duplicate(self, employee_id: int, day: date, exclude_id: Optional[int] = None) -> None:
        query = select(OvertimeRequest.id).where(
            OvertimeRequest.employee_id == employee_id,
            OvertimeRequest.date == day,
            OvertimeRequest.status.in_(("pending", "approved")),
        )
        if exclude_id is not None:
            query = query.where(OvertimeRequest.id != exclude_id)
        if (await self.db.execute(query)).first():
            raise ConflictError(f"Overtime for {day} has already been filed", code="OVERTIME_EXISTS")

    async def _price(self, overtime: OvertimeRequest, employee: Employee, hours: Optional[float],
                     overtime_type: Optional[str], multiplier: Optional[float] = None) -> None:
        """Fill hours, type, rate and amount on ``overtime``."""
        if hours is None:
            if not (overtime.start_time and overtime.end_time):
                raise BusinessRuleError("Give either hours or both start and end times",
                                        code="INVALID_OVERTIME_HOURS")
            hours = calculate_hours(overtime.start_time, overtime.end_time, overtime.break_minutes)
        overtime.hours = hours
        overtime.overtime_type = overtime_type or await self.classify(overtime.date, overtime.company_id)
        overtime.rate_multiplier = multiplier or OVERTIME_MULTIPLIERS[overtime.overtime_type]
        overtime.rate_per_hour = hourly_rate(employee.basic_salary)
        overtime.total_amount = overtime_amount(hours, overtime.rate_per_hour, overtime.rate_multiplier)
