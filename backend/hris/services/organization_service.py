"""Companies, departments, positions and work locations."""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.exceptions import BusinessRuleError, ConflictError, NotFoundError
from hris.models.company import Company
from hris.models.employee import Employee
from hris.models.organization import Department, Position
from hris.models.work_location import WorkLocation
from hris.services.pagination import PageParams, apply_updates, paginate

logger = logging.getLogger("hris.organization")


class CrudService:
    """Get/create/update/delete for a single model, raising domain errors."""

    model = None
    label = "Record"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, obj_id: int):
        obj = await self.db.get(self.model, obj_id, populate_existing=True)
        if obj is None:
            raise NotFoundError(f"{self.label} {obj_id} not found")
        return obj

    async def create(self, values: dict):
        obj = self.model(**values)
        self.db.add(obj)
        await self._commit()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj_id: int, changes: dict):
        obj = await self.get(obj_id)
        apply_updates(obj, changes)
        await self._commit()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj_id: int) -> None:
        obj = await self.get(obj_id)
        await self.db.delete(obj)
        await self._commit()

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.warning(f"{self.label} integrity error: {exc.orig}")
            raise ConflictError(f"{self.label} conflicts with an existing record (duplicate code?)")


class CompanyService(CrudService):
    model = Company
    label = "Company"

    async def list(
        self,
        params: PageParams,
        search: Optional[str] = None,
        company_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[Company], int]:
        query = select(Company)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(Company.name.ilike(pattern), Company.code.ilike(pattern)))
        if company_type:
            query = query.where(Company.company_type == company_type)
        if status:
            query = query.where(Company.status == status)
        return await paginate(self.db, query.order_by(Company.name), params)

    async def list_features(self) -> List[Company]:
        result = await self.db.execute(select(Company).order_by(Company.name))
        return list(result.scalars().all())

    async def delete(self, obj_id: int) -> None:
        company = await self.get(obj_id)
        employees = await self.db.execute(
            select(func.count(Employee.id)).where(Employee.company_id == company.id)
        )
        if employees.scalar():
            raise ConflictError("Company still has employees and cannot be deleted")
        await self.db.delete(company)
        await self._commit()


class DepartmentService(CrudService):
    model = Department
    label = "Department"

    async def list(
        self,
        params: PageParams,
        company_id: Optional[int] = None,
        parent_id: Optional[int] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Department], int]:
        query = select(Department)
        if company_id is not None:
            query = query.where(Department.company_id == company_id)
        if parent_id is not None:
            query = query.where(Department.parent_id == parent_id)
        if status:
            query = query.where(Department.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(Department.name.ilike(pattern), Department.code.ilike(pattern)))
        return await paginate(self.db, query.order_by(Department.name), params)

    async def list_by_company(self, company_id: int) -> List[Department]:
        result = await self.db.execute(
            select(Department).where(Department.company_id == company_id).order_by(Department.name)
        )
        return list(result.scalars().all())

    async def hierarchy(self, company_id: int) -> List[Dict]:
        """Departments of a company as a tree of dicts with ``children``."""
        departments = await self.list_by_company(company_id)
        nodes = {
            dept.id: {
                "id": dept.id,
                "company_id": dept.company_id,
                "name": dept.name,
                "code": dept.code,
                "description": dept.description,
                "parent_id": dept.parent_id,
                "head_id": dept.head_id,
                "status": dept.status,
                "created_at": dept.created_at,
                "children": [],
            }
            for dept in departments
        }
        roots = []
        for node in nodes.values():
            parent = nodes.get(node["parent_id"])
            if parent is not None:
                parent["children"].append(node)
            else:
                roots.append(node)
        return roots

    async def update(self, obj_id: int, changes: dict):
        if changes.get("parent_id") == obj_id:
            raise ConflictError("A department cannot be its own parent")
        return await super().update(obj_id, changes)

    async def delete(self, obj_id: int) -> None:
        department = await self.get(obj_id)
        employees = await self.db.execute(
            select(func.count(Employee.id)).where(Employee.department_id == department.id)
        )
        if employees.scalar():
            raise ConflictError("Department still has employees and cannot be deleted")
        await self.db.delete(department)
        await self._commit()


class PositionService(CrudService):
    model = Position
    label = "Position"

    async def list(
        self,
        params: PageParams,
        company_id: Optional[int] = None,
        department_id: Optional[int] = None,
        level: Optional[int] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Position], int]:
        query = select(Position)
        if company_id is not None:
            query = query.where(Position.company_id == company_id)
        if department_id is not None:
            query = query.where(Position.department_id == department_id)
        if level is not None:
            query = query.where(Position.level == level)
        if status:
            query = query.where(Position.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(Position.name.ilike(pattern), Position.code.ilike(pattern)))
        return await paginate(self.db, query.order_by(Position.level.desc(), Position.name), params)

    async def list_by_company(self, company_id: int) -> List[Position]:
        result = await self.db.execute(
            select(Position).where(Position.company_id == company_id).order_by(Position.level.desc(), Position.name)
        )
        return list(result.scalars().all())

    async def create(self, values: dict):
        _check_salary_range(values.get("min_salary"), values.get("max_salary"))
        return await super().create(values)

    async def update(self, obj_id: int, changes: dict):
        position = await self.get(obj_id)
        _check_salary_range(
            changes.get("min_salary", position.min_salary),
            changes.get("max_salary", position.max_salary),
        )
        return await super().update(obj_id, changes)


def _check_salary_range(min_salary, max_salary) -> None:
    if min_salary is not None and max_salary is not None and float(min_salary) > float(max_salary):
        raise BusinessRuleError("min_salary cannot be greater than max_salary", code="INVALID_SALARY_RANGE")


class WorkLocationService(CrudService):
    model = WorkLocation
    label = "Work location"

    async def list(
        self,
        params: PageParams,
        company_id: Optional[int] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[WorkLocation], int]:
        query = select(WorkLocation)
        if company_id is not None:
            query = query.where(WorkLocation.company_id == company_id)
        if is_active is not None:
            query = query.where(WorkLocation.is_active == is_active)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(WorkLocation.name.ilike(pattern), WorkLocation.city.ilike(pattern)))
        return await paginate(self.db, query.order_by(WorkLocation.name), params)

    async def list_by_company(self, company_id: int) -> List[WorkLocation]:
        result = await self.db.execute(
            select(WorkLocation)
            .where(WorkLocation.company_id == company_id, WorkLocation.is_active.is_(True))
            .order_by(WorkLocation.name)
        )
        return list(result.scalars().all())
