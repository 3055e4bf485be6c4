"""
Tests for the directory services: employees, organization structure, users
and RBAC, templates, notifications and performance reviews.
"""
from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from pydantic import ValidationError


@pytest.fixture
def page():
    from hris.services.pagination import PageParams

    return PageParams(page=1, limit=10)


@pytest_asyncio.fixture
async def manager(db_session, company, employee):
    """Employee that ``employee`` reports to."""
    from hris.models.employee import Employee

    boss = Employee(employee_id="MB-0007", first_name="Sari", last_name="Dewi",
                    company_id=company.id, employment_status="active", employment_type="permanent")
    db_session.add(boss)
    await db_session.commit()
    employee.manager_id = boss.id
    await db_session.commit()
    await db_session.refresh(boss)
    return boss


class TestEmployeeService:
    """NIK generation, self-service and soft delete."""

    def test_format_employee_number(self):
        from hris.services.employee_service import format_employee_number

        assert format_employee_number("MB", 7) == "MB-0007"
        assert format_employee_number("MB", 12345) == "MB-12345"

    async def test_next_number_follows_highest(self, db_session, company, employee, manager):
        from hris.services.employee_service import EmployeeService

        assert await EmployeeService(db_session).next_employee_number(company.id) == "MB-0008"

    async def test_create_assigns_number(self, db_session, company, employee):
        from hris.schemas.employee import EmployeeCreate
        from hris.services.employee_service import EmployeeService

        created = await EmployeeService(db_session).create(
            EmployeeCreate(first_name="Rina", company_id=company.id)
        )

        assert created.employee_id == "MB-0002"
        assert created.company.code == "MB"
        assert created.ptkp_status == "TK/0"

    async def test_duplicate_number_conflicts(self, db_session, company, employee):
        from hris.core.exceptions import ConflictError
        from hris.schemas.employee import EmployeeCreate
        from hris.services.employee_service import EmployeeService

        with pytest.raises(ConflictError):
            await EmployeeService(db_session).create(
                EmployeeCreate(employee_id="MB-0001", first_name="Rina", company_id=company.id)
            )

    async def test_next_number_unknown_company(self, db_session):
        from hris.core.exceptions import NotFoundError
        from hris.services.employee_service import EmployeeService

        with pytest.raises(NotFoundError):
            await EmployeeService(db_session).next_employee_number(999)

    def test_self_update_rejects_hr_fields(self):
        from hris.schemas.employee import EmployeeSelfUpdate

        with pytest.raises(ValidationError):
            EmployeeSelfUpdate(grade_level="G9")

    async def test_self_update(self, db_session, employee):
        from hris.schemas.employee import EmployeeSelfUpdate
        from hris.services.employee_service import EmployeeService

        updated = await EmployeeService(db_session).update_self(
            employee.id, EmployeeSelfUpdate(phone="0812-0000-1111")
        )

        assert updated.phone == "0812-0000-1111"
        assert updated.grade_level == "G3"

    async def test_cannot_manage_self(self, db_session, employee):
        from hris.core.exceptions import ConflictError
        from hris.schemas.employee import EmployeeUpdate
        from hris.services.employee_service import EmployeeService

        with pytest.raises(ConflictError):
            await EmployeeService(db_session).update(employee.id, EmployeeUpdate(manager_id=employee.id))

    async def test_deactivate_is_soft(self, db_session, employee, page):
        from hris.services.employee_service import EmployeeService

        service = EmployeeService(db_session)
        result = await service.deactivate(employee.id)

        assert result.employment_status == "inactive"
        items, total = await service.list(page, employment_status="inactive")
        assert total == 1

    async def test_subordinates_and_leadership(self, db_session, company, employee, manager):
        from hris.services.employee_service import EmployeeService

        service = EmployeeService(db_session)

        assert [e.employee_id for e in await service.subordinates(manager.id)] == ["MB-0001"]
        assert [e.employee_id for e in await service.leadership(company.id)] == ["MB-0007"]

    async def test_search(self, db_session, employee, manager, page):
        from hris.services.employee_service import EmployeeService

        items, total = await EmployeeService(db_session).list(page, search="budi")

        assert total == 1
        assert items[0].full_name == "Budi Santoso"


class TestOrganizationServices:
    async def test_company_with_employees_cannot_be_deleted(self, db_session, company, employee):
        from hris.core.exceptions import ConflictError
        from hris.services.organization_service import CompanyService

        with pytest.raises(ConflictError):
            await CompanyService(db_session).delete(company.id)

    async def test_duplicate_company_code(self, db_session, company):
        from hris.core.exceptions import ConflictError
        from hris.services.organization_service import CompanyService

        with pytest.raises(ConflictError):
            await CompanyService(db_session).create({"name": "Other", "code": "MB"})

    async def test_department_hierarchy(self, db_session, company):
        from hris.services.organization_service import DepartmentService

        service = DepartmentService(db_session)
        finance = await service.create({"company_id": company.id, "name": "Finance", "code": "FIN"})
        await service.create({"company_id": company.id, "name": "Payroll", "code": "PAY", "parent_id": finance.id})
        await service.create({"company_id": company.id, "name": "Legal", "code": "LEG"})

        tree = await service.hierarchy(company.id)

        assert [node["code"] for node in tree] == ["FIN", "LEG"]
        assert [child["code"] for child in tree[0]["children"]] == ["PAY"]

    async def test_department_cannot_parent_itself(self, db_session, company):
        from hris.core.exceptions import ConflictError
        from hris.services.organization_service import DepartmentService

        service = DepartmentService(db_session)
        dept = await service.create({"company_id": company.id, "name": "Finance", "code": "FIN"})

        with pytest.raises(ConflictError):
            await service.update(dept.id, {"parent_id": dept.id})

    async def test_position_salary_range(self, db_session, company):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.organization_service import PositionService

        service = PositionService(db_session)
        with pytest.raises(BusinessRuleError) as exc_info:
            await service.create({"company_id": company.id, "name": "Analyst", "code": "AN",
                                  "min_salary": 9000000, "max_salary": 5000000})
        assert exc_info.value.code == "INVALID_SALARY_RANGE"

        position = await service.create({"company_id": company.id, "name": "Analyst", "code": "AN", "level": 4})
        assert position.level_name == "Senior"


class TestUsersAndRoles:
    async def test_seed_defaults_is_idempotent(self, db_session):
        from hris.core.permissions import DEFAULT_PERMISSIONS, DEFAULT_ROLES
        from hris.services.user_service import RbacService

        service = RbacService(db_session)
        first = await service.seed_defaults()
        second = await service.seed_defaults()

        assert first == {"permissions": len(DEFAULT_PERMISSIONS), "roles": len(DEFAULT_ROLES)}
        assert second == {"permissions": 0, "roles": 0}

    async def test_system_role_cannot_be_deleted(self, db_session):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.user_service import RbacService

        service = RbacService(db_session)
        await service.seed_defaults()
        roles = {role.name: role for role in await service.list_roles()}

        with pytest.raises(BusinessRuleError):
            await service.delete_role(roles["super_admin"].id)

    async def test_create_user_with_role_and_stats(self, db_session, actor):
        from hris.schemas.user import UserCreate
        from hris.services.user_service import RbacService, UserService

        rbac = RbacService(db_session)
        await rbac.seed_defaults()
        roles = {role.name: role for role in await rbac.list_roles()}

        user = await UserService(db_session).create(
            UserCreate(email="Siti@Example.com", password="Password1!", role_ids=[roles["hr_admin"].id]),
            min_password_length=8,
        )
        actor.last_login = datetime.utcnow() - timedelta(days=1)
        await db_session.commit()

        assert user.email == "siti@example.com"
        assert "movement:approve" in user.permission_names
        assert not user.is_super_admin

        stats = await UserService(db_session).stats()
        assert stats["total"] == 2
        assert stats["recentLogins"] == 1
        assert {"role": "hr_admin", "count": 1} in stats["roleDistribution"]

    async def test_short_password_rejected(self, db_session):
        from hris.core.exceptions import BusinessRuleError
        from hris.schemas.user import UserCreate
        from hris.services.user_service import UserService

        with pytest.raises(BusinessRuleError) as exc_info:
            await UserService(db_session).create(UserCreate(email="x@example.com", password="abc"), 8)

        assert exc_info.value.errors[0]["field"] == "password"

    async def test_cannot_deactivate_self(self, db_session, actor):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.user_service import UserService

        with pytest.raises(BusinessRuleError):
            await UserService(db_session).toggle_status(actor.id, actor)


class TestTemplateService:
    async def _template(self, db_session, actor, company, **values):
        from hris.services.template_service import TemplateService

        return await TemplateService(db_session).create(
            {"company_id": company.id, "name": "Offer Letter", "category": "letter", "file_type": "docx",
             "file_path": "uploads/templates/offer.docx", "file_name": "offer.docx", **values},
            actor,
        )

    async def test_duplicate(self, db_session, actor, company):
        from hris.services.template_service import TemplateService

        source = await self._template(db_session, actor, company)
        copy = await TemplateService(db_session).duplicate(source.id, actor)

        assert copy.id != source.id
        assert copy.name == "Offer Letter (Copy)"
        assert copy.download_count == 0
        assert copy.file_path == source.file_path

    async def test_downloads_and_statistics(self, db_session, actor, company):
        from hris.services.template_service import TemplateService

        service = TemplateService(db_session)
        template = await self._template(db_session, actor, company)
        await self._template(db_session, actor, company, name="Handbook", category="policy", file_type="pdf")
        await service.track_download(template.id)
        tracked = await service.track_download(template.id)

        assert tracked.download_count == 2
        stats = await service.statistics(company.id)
        assert stats["total_templates"] == 2
        assert stats["total_downloads"] == 2
        assert stats["by_category"] == {"letter": 1, "policy": 1}
        assert stats["most_downloaded"][0].id == template.id

    async def test_unknown_sort_field(self, db_session, page):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.template_service import TemplateService

        with pytest.raises(BusinessRuleError):
            await TemplateService(db_session).list(page, sort_by="file_path")


class TestNotificationService:
    async def test_employee_without_account_is_skipped(self, db_session, employee):
        from hris.services.notification_service import NotificationService

        assert await NotificationService(db_session).notify_employee(employee.id, "Hello") is None

    async def test_read_state(self, db_session, employee_user, page):
        from hris.services.notification_service import NotificationService

        service = NotificationService(db_session)
        await service.notify_employee(employee_user.employee_id, "Leave approved", type="leave_approved")
        service.notify(employee_user.id, "Payslip ready")
        await db_session.commit()

        items, total, unread = await service.list_for_user(employee_user.id, page)
        assert (total, unread) == (2, 2)

        await service.mark_as_read(items[0].id, employee_user.id)
        assert await service.unread_count(employee_user.id) == 1
        assert await service.mark_all_as_read(employee_user.id) == 1
        assert await service.delete_all_read(employee_user.id) == 2

    async def test_other_users_notification_is_hidden(self, db_session, employee_user, actor):
        from hris.core.exceptions import NotFoundError
        from hris.services.notification_service import NotificationService

        service = NotificationService(db_session)
        notification = service.notify(employee_user.id, "Private")
        await db_session.commit()

        with pytest.raises(NotFoundError):
            await service.mark_as_read(notification.id, actor.id)


class TestPerformanceReviewService:
    async def test_status_flow(self, db_session, employee, employee_user):
        from sqlalchemy import select

        from hris.core.exceptions import InvalidTransitionError
        from hris.models.notification import Notification
        from hris.services.performance_service import PerformanceReviewService

        service = PerformanceReviewService(db_session)
        review = await service.create({"employee_id": employee.id, "review_period": "2030-H1", "overall_rating": 4})

        with pytest.raises(InvalidTransitionError):
            await service.change_status(review.id, "completed")

        await service.change_status(review.id, "in_progress")
        completed = await service.change_status(review.id, "completed")
        assert completed.status == "completed"

        with pytest.raises(InvalidTransitionError):
            await service.update(review.id, {"comments": "late edit"})

        notes = (await db_session.execute(select(Notification))).scalars().all()
        assert [n.type for n in notes] == ["performance_review"]


class TestCreateAdminScript:
    async def test_creates_then_resets_super_admin(self, db_session):
        from create_user import create_admin
        from hris.core.security import verify_password

        created = await create_admin(db_session, "Root@Example.com", "First123!")
        again = await create_admin(db_session, "root@example.com", "Second123!")

        assert created.id == again.id
        assert again.is_super_admin
        assert again.force_password_change is True
        assert verify_password("Second123!", again.hashed_password)
