import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.audit import AuditLogger
from hris.core.exceptions import BusinessRuleError, InvalidTransitionError, NotFoundError
from hris.models.document import HR_UPLOAD_TYPES, REQUIRED_DOCUMENT_TYPES, EmployeeDocument
from hris.models.employee import Employee
from hris.models.user import User
from hris.services.notification_service import NotificationService
from hris.services.pagination import PageParams, apply_updates, paginate
from hris.services.upload_service import is_stored_upload

logger = logging.getLogger("hris.documents")

SORTABLE_FIELDS = {
    "document_name": EmployeeDocument.document_name,
    "document_type": EmployeeDocument.document_type,
    "expiry_date": EmployeeDocument.expiry_date,
    "created_at": EmployeeDocument.created_at,
}

EXPIRY_WARNING_DAYS = 30


class DocumentService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.notifications = NotificationService(db)

    async def get(self, document_id: int) -> EmployeeDocument:
        document = await self.db.get(EmployeeDocument, document_id, populate_existing=True)
        if document is None:
            raise NotFoundError(f"Document {document_id} not found")
        return document

    async def list(
        self,
        params: PageParams,
        employee_id: Optional[int] = None,
        company_id: Optional[int] = None,
        document_type: Optional[str] = None,
        category: Optional[str] = None,
        is_verified: Optional[bool] = None,
        is_required: Optional[bool] = None,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Tuple[List[EmployeeDocument], int]:
        query = self._scoped(select(EmployeeDocument), employee_id, company_id)
        if document_type:
            query = query.where(EmployeeDocument.document_type == document_type)
        if category == "hr":
            query = query.where(EmployeeDocument.document_type.in_(HR_UPLOAD_TYPES))
        elif category == "employee":
            query = query.where(EmployeeDocument.document_type.notin_(HR_UPLOAD_TYPES))
        if is_verified is not None:
            query = query.where(EmployeeDocument.is_verified == is_verified)
        if is_required is not None:
            query = query.where(EmployeeDocument.is_required == is_required)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(
                EmployeeDocument.document_name.ilike(pattern),
                EmployeeDocument.document_number.ilike(pattern),
            ))

        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise BusinessRuleError(
                f"Cannot sort by '{sort_by}'. Use one of: {', '.join(SORTABLE_FIELDS)}",
                code="INVALID_SORT",
            )
        ordering = column.asc() if sort_order.lower() == "asc" else column.desc()
        return await paginate(self.db, query.order_by(ordering, EmployeeDocument.id.desc()), params)

    async def for_employee(self, employee_id: int) -> List[EmployeeDocument]:
        result = await self.db.execute(
            select(EmployeeDocument)
            .where(EmployeeDocument.employee_id == employee_id)
            .order_by(EmployeeDocument.document_type, EmployeeDocument.created_at.desc())
        )
        return list(result.scalars().all())

    async def expiring(self, days: int = EXPIRY_WARNING_DAYS, company_id: Optional[int] = None,
                       today: Optional[date] = None) -> List[EmployeeDocument]:
        """Documents whose expiry falls within the next ``days`` days."""
        today = today or date.today()
        query = self._scoped(select(EmployeeDocument), None, company_id).where(
            EmployeeDocument.expiry_date.between(today, today + timedelta(days=days))
        )
        result = await self.db.execute(query.order_by(EmployeeDocument.expiry_date))
        return list(result.scalars().all())

    async def expired(self, company_id: Optional[int] = None, today: Optional[date] = None) -> List[EmployeeDocument]:
        today = today or date.today()
        query = self._scoped(select(EmployeeDocument), None, company_id).where(
            EmployeeDocument.expiry_date < today
        )
        result = await self.db.execute(query.order_by(EmployeeDocument.expiry_date))
        return list(result.scalars().all())

    async def statistics(self, employee_id: Optional[int] = None, company_id: Optional[int] = None,
                         today: Optional[date] = None) -> Dict:
        today = today or date.today()
        base = self._scoped(select(func.count(EmployeeDocument.id)), employee_id, company_id)

        async def count(*conditions) -> int:
            return (await self.db.execute(base.where(*conditions))).scalar() or 0

        total = await count()
        verified = await count(EmployeeDocument.is_verified.is_(True))
        expired = await count(EmployeeDocument.expiry_date < today)
        expiring_soon = await count(
            EmployeeDocument.expiry_date.between(today, today + timedelta(days=EXPIRY_WARNING_DAYS))
        )
        by_type = await self.db.execute(
            self._scoped(
                select(EmployeeDocument.document_type, func.count(EmployeeDocument.id)),
                employee_id, company_id,
            )
            .group_by(EmployeeDocument.document_type)
            .order_by(EmployeeDocument.document_type)
        )
        return {
            "total": total,
            "verified": verified,
            "unverified": total - verified,
            "expired": expired,
            "expiring_soon": expiring_soon,
            "by_type": [{"type": doc_type, "count": n} for doc_type, n in by_type.all()],
        }

    async def completeness(self, employee_id: int) -> Dict:
        """Which required document types the employee has uploaded and had verified."""
        if await self.db.get(Employee, employee_id) is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        documents = await self.for_employee(employee_id)
        by_type: Dict[str, int] = {}
        verified_types = set()
        for document in documents:
            by_type[document.document_type] = by_type.get(document.document_type, 0) + 1
            if document.is_verified:
                verified_types.add(document.document_type)

        missing = [t for t in REQUIRED_DOCUMENT_TYPES if t not in by_type]
        unverified = [t for t in REQUIRED_DOCUMENT_TYPES if t in by_type and t not in verified_types]
        return {
            "employee_id": employee_id,
            "total_required": len(REQUIRED_DOCUMENT_TYPES),
            "uploaded": len(REQUIRED_DOCUMENT_TYPES) - len(missing),
            "verified": len(REQUIRED_DOCUMENT_TYPES) - len(missing) - len(unverified),
            "missing": missing,
            "unverified": unverified,
            "is_complete": not missing,
            "is_verified": not missing and not unverified,
            "by_type": by_type,
        }

    async def create(self, employee_id: int, values: dict, actor: User,
                     self_service: bool = False) -> EmployeeDocument:
        if await self.db.get(Employee, employee_id) is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        if self_service and values["document_type"] in HR_UPLOAD_TYPES:
            raise BusinessRuleError(
                f"'{values['document_type']}' documents are issued by HR", code="HR_DOCUMENT_TYPE"
            )
        if not is_stored_upload(values["file_path"], "documents"):
            raise BusinessRuleError("file_path must point to an uploaded document", code="INVALID_FILE_PATH")
        self._check_dates(values.get("issue_date"), values.get("expiry_date"))

        values = {k: v for k, v in values.items() if k != "employee_id"}
        document = EmployeeDocument(**values, employee_id=employee_id, uploaded_by=actor.id, is_verified=False)
        self.db.add(document)
        await self.db.commit()
        logger.info(f"Document {document.document_type} stored for employee {employee_id}")
        return await self.get(document.id)

    async def update(self, document_id: int, changes: dict) -> EmployeeDocument:
        document = await self.get(document_id)
        self._check_dates(changes.get("issue_date", document.issue_date),
                          changes.get("expiry_date", document.expiry_date))
        apply_updates(document, changes)
        await self.db.commit()
        return await self.get(document_id)

    async def delete(self, document_id: int, actor: User, self_service: bool = False) -> None:
        document = await self.get(document_id)
        if self_service and document.is_verified:
            raise InvalidTransitionError("Verified documents can only be removed by HR")
        AuditLogger.log(self.db, action="document.delete", user_id=actor.id, username=actor.email,
                        resource_type="employee_document", resource_id=document.id,
                        metadata={"employee_id": document.employee_id, "document_type": document.document_type})
        await self.db.delete(document)
        await self.db.commit()

    async def verify(self, document_id: int, actor: User, notes: Optional[str] = None) -> EmployeeDocument:
        document = await self.get(document_id)
        document.is_verified = True
        document.verified_at = datetime.utcnow()
        document.verified_by = actor.id
        document.verification_notes = notes
        AuditLogger.log(self.db, action="document.verify", user_id=actor.id, username=actor.email,
                        resource_type="employee_document", resource_id=document.id)
        await self.notifications.notify_employee(
            document.employee_id,
            title="Document verified",
            message=f"Your document '{document.document_name}' was verified.",
            type="document_verified",
            link=f"/documents/{document.id}",
            data={"document_id": document.id},
        )
        await self.db.commit()
        return await self.get(document_id)

    async def unverify(self, document_id: int, actor: User) -> EmployeeDocument:
        document = await self.get(document_id)
        document.is_verified = False
        document.verified_at = None
        document.verified_by = None
        document.verification_notes = None
        AuditLogger.log(self.db, action="document.unverify", user_id=actor.id, username=actor.email,
                        resource_type="employee_document", resource_id=document.id)
        await self.db.commit()
        return await self.get(document_id)

    @staticmethod
    def _scoped(query, employee_id: Optional[int], company_id: Optional[int]):
        if employee_id is not None:
            query = query.where(EmployeeDocument.employee_id == employee_id)
        if company_id is not None:
            query = query.where(EmployeeDocument.employee_id.in_(
                select(Employee.id).where(Employee.company_id == company_id)
            ))
        return query

    @staticmethod
    def _check_dates(issue_date: Optional[date], expiry_date: Optional[date]) -> None:
        if issue_date and expiry_date and expiry_date < issue_date:
            raise BusinessRuleError("expiry_date cannot be before issue_date", code="INVALID_DATE_RANGE")
