import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hris.core.exceptions import ConflictError, NotFoundError
from hris.models.company import Company
from hris.models.employee import Employee, SELF_SERVICE_FIELDS
from hris.schemas.employee import EmployeeCreate, EmployeeSelfUpdate, EmployeeUpdate
from hris.services.pagination import PageParams, apply_updates, paginate

logger = logging.getLogger("hris.employees")


def format_employee_number(prefix: str, sequence: int) -> str:
    return f"{prefix}-{sequence:04d}"


class EmployeeService:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _query(self):
        return select(Employee).options(
            selectinload(Employee.company),
            selectinload(Employee.department),
            selectinload(Employee.position),
        )

    async def get(self, employee_id: int) -> Employee:
        result = await self.db.execute(
            self._query().where(Employee.id == employee_id).execution_options(populate_existing=True)
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee

    async def get_by_number(self, employee_number: str) -> Employee:
        result = await self.db.execute(self._query().where(Employee.employee_id == employee_number))
        employee = result.scalar_one_or_none()
        if employee is None:
            raise NotFoundError(f"Employee {employee_number} not found")
        return employee

    async def list(
        self,
        params: PageParams,
        company_id: Optional[int] = None,
        department_id: Optional[int] = None,
        position_id: Optional[int] = None,
        work_location_id: Optional[int] = None,
        manager_id: Optional[int] = None,
        employment_status: Optional[str] = None,
        employment_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Employee], int]:
        query = self._query()
        if company_id is not None:
            query = query.where(Employee.company_id == company_id)
        if department_id is not None:
            query = query.where(Employee.department_id == department_id)
        if position_id is not None:
            query = query.where(Employee.position_id == position_id)
        if work_location_id is not None:
            query = query.where(Employee.work_location_id == work_location_id)
        if manager_id is not None:
            query = query.where(Employee.manager_id == manager_id)
        if employment_status:
            query = query.where(Employee.employment_status == employment_status)
        if employment_type:
            query = query.where(Employee.employment_type == employment_type)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Employee.first_name.ilike(pattern),
                    Employee.last_name.ilike(pattern),
                    Employee.employee_id.ilike(pattern),
                    Employee.email.ilike(pattern),
                )
            )
        query = query.order_by(Employee.employee_id)
        return await paginate(self.db, query, params)

    async def subordinates(self, employee_id: int) -> List[Employee]:
        await self.get(employee_id)
        result = await self.db.execute(
            self._query()
            .where(Employee.manager_id == employee_id, Employee.employment_status == "active")
            .order_by(Employee.first_name)
        )
        return list(result.scalars().all())

    async def leadership(self, company_id: Optional[int] = None) -> List[Employee]:
        """Active employees that have at least one direct report."""
        managers = select(Employee.manager_id).where(Employee.manager_id.is_not(None)).distinct()
        query = self._query().where(
            Employee.id.in_(managers),
            Employee.employment_status == "active",
        )
        if company_id is not None:
            query = query.where(Employee.company_id == company_id)
        result = await self.db.execute(query.order_by(Employee.first_name))
        return list(result.scalars().all())

    async def next_employee_number(self, company_id: int) -> str:
        company = await self.db.get(Company, company_id)
        if company is None:
            raise NotFoundError(f"Company {company_id} not found")

        prefix = company.code.upper()
        result = await self.db.execute(
            select(Employee.employee_id).where(Employee.employee_id.like(f"{prefix}-%"))
        )
        highest = 0
        for (number,) in result.all():
            suffix = number[len(prefix) + 1:]
            if suffix.isdigit():
                highest = max(highest, int(suffix))
        return format_employee_number(prefix, highest + 1)

    async def create(self, data: EmployeeCreate) -> Employee:
        values = data.model_dump(exclude_none=True)
        if not values.get("employee_id"):
            values["employee_id"] = await self.next_employee_number(data.company_id)

        existing = await self.db.execute(
            select(func.count(Employee.id)).where(Employee.employee_id == values["employee_id"])
        )
        if existing.scalar():
            raise ConflictError(f"Employee ID {values['employee_id']} is already in use")

        employee = Employee(**values)
        self.db.add(employee)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(f"Employee ID {values['employee_id']} is already in use")
        logger.info(f"Employee {employee.employee_id} created")
        return await self.get(employee.id)

    async def update(self, employee_id: int, data: EmployeeUpdate) -> Employee:
        employee = await self.get(employee_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("manager_id") == employee_id:
            raise ConflictError("An employee cannot be their own manager")
        apply_updates(employee, changes)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Employee update conflicts with an existing record")
        return await self.get(employee_id)

    async def update_self(self, employee_id: int, data: EmployeeSelfUpdate) -> Employee:
        employee = await self.get(employee_id)
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if field in SELF_SERVICE_FIELDS
        }
        apply_updates(employee, changes)
        await self.db.commit()
        logger.info(f"Employee {employee.employee_id} updated own profile: {sorted(changes)}")
        return await self.get(employee_id)

    async def deactivate(self, employee_id: int) -> Employee:
        """Soft delete: the record is kept with employment_status 'inactive'."""
        employee = await self.get(employee_id)
        employee.employment_status = "inactive"
        await self.db.commit()
        logger.info(f"Employee {employee.employee_id} deactivated")
        return await self.get(employee_id)
