"""
Tests for hris/services/movement_service.py - the employee movement lifecycle.

Runs against an in-memory SQLite schema so the apply step is checked on real
employee rows.
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select


def _promotion(employee_id, **overrides):
    from hris.schemas.movement import MovementCreate

    values = {
        "employee_id": employee_id,
        "movement_type": "promotion",
        "effective_date": date.today(),
        "new_salary": 15000000,
        "new_grade": "G4",
        "reason": "Annual review",
    }
    values.update(overrides)
    return MovementCreate(**values)


class TestComputeSalaryChange:
    """Test the salary delta recorded on a movement."""

    def test_increase(self):
        from hris.services.movement_service import compute_salary_change

        change, pct = compute_salary_change(Decimal("10000000"), 15000000)

        assert change == Decimal("5000000")
        assert pct == 50.0

    def test_no_new_salary(self):
        from hris.services.movement_service import compute_salary_change

        assert compute_salary_change(Decimal("10000000"), None) == (None, None)

    def test_no_previous_salary(self):
        from hris.services.movement_service import compute_salary_change

        change, pct = compute_salary_change(None, 8000000)

        assert change == Decimal("8000000")
        assert pct is None

    def test_zero_previous_salary_has_no_percentage(self):
        from hris.services.movement_service import compute_salary_change

        change, pct = compute_salary_change(Decimal("0"), 1000)

        assert change == Decimal("1000")
        assert pct is None


class TestCreateMovement:
    """Test movement creation."""

    async def test_create_snapshots_current_placement(self, db_session, employee, actor):
        from hris.services.movement_service import EmployeeMovementService

        movement = await EmployeeMovementService(db_session).create(_promotion(employee.id), actor)

        assert movement.status == "pending"
        assert movement.is_applied is False
        assert movement.previous_salary == Decimal("10000000")
        assert movement.previous_grade == "G3"
        assert movement.previous_company_id == employee.company_id
        assert movement.salary_change == Decimal("5000000")
        assert movement.salary_change_percentage == 50.0
        assert movement.requested_by == actor.id
        assert movement.requested_at is not None

    async def test_save_as_draft(self, db_session, employee, actor):
        from hris.services.movement_service import EmployeeMovementService

        movement = await EmployeeMovementService(db_session).create(
            _promotion(employee.id, save_as_draft=True), actor
        )

        assert movement.status == "draft"
        assert movement.requested_at is None

    async def test_requires_a_requested_change(self, db_session, employee, actor):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.movement_service import EmployeeMovementService

        with pytest.raises(BusinessRuleError):
            await EmployeeMovementService(db_session).create(
                _promotion(employee.id, new_salary=None, new_grade=None), actor
            )

    async def test_unknown_employee(self, db_session, actor):
        from hris.core.exceptions import NotFoundError
        from hris.services.movement_service import EmployeeMovementService

        with pytest.raises(NotFoundError):
            await EmployeeMovementService(db_session).create(_promotion(9999), actor)

    async def test_create_writes_audit_entry(self, db_session, employee, actor):
        from hris.core.audit import AuditLog
        from hris.services.movement_service import EmployeeMovementService

        movement = await EmployeeMovementService(db_session).create(_promotion(employee.id), actor)

        result = await db_session.execute(
            select(AuditLog).where(AuditLog.action == "movement.create")
        )
        entry = result.scalar_one()
        assert entry.resource_id == str(movement.id)
        assert entry.user_id == actor.id


class TestApproveAndApply:
    """Approval and application are separate steps."""

    async def test_approve_does_not_apply(self, db_session, employee, actor):
        from hris.models.employee import Employee
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(_promotion(employee.id), actor)

        approved = await service.approve(movement.id, actor, approval_notes="Well deserved")

        assert approved.status == "approved"
        assert approved.is_applied is False
        assert approved.approved_at is not None
        assert approved.approved_by == actor.id
        assert approved.approval_notes == "Well deserved"

        refreshed = await db_session.get(Employee, employee.id, populate_existing=True)
        assert refreshed.basic_salary == Decimal("10000000")
        assert refreshed.grade_level == "G3"

    async def test_apply_updates_employee(self, db_session, employee, actor):
        from hris.models.employee import Employee
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(_promotion(employee.id), actor)
        await service.approve(movement.id, actor)

        applied = await service.apply(movement.id, actor)

        assert applied.status == "applied"
        assert applied.is_applied is True
        assert applied.applied_at is not None
        assert applied.applied_by == actor.id

        refreshed = await db_session.get(Employee, employee.id, populate_existing=True)
        assert refreshed.basic_salary == Decimal("15000000")
        assert refreshed.grade_level == "G4"

    async def test_apply_leaves_unrequested_fields(self, db_session, employee, actor):
        from hris.models.employee import Employee
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(
            _promotion(employee.id, movement_type="status_change", new_salary=None, new_grade=None,
                       new_status="resigned"),
            actor,
        )
        await service.approve(movement.id, actor)
        await service.apply(movement.id, actor)

        refreshed = await db_session.get(Employee, employee.id, populate_existing=True)
        assert refreshed.employment_status == "resigned"
        assert refreshed.basic_salary == Decimal("10000000")

    async def test_apply_requires_approval(self, db_session, employee, actor):
        from hris.core.exceptions import InvalidTransitionError
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(_promotion(employee.id), actor)

        with pytest.raises(InvalidTransitionError):
            await service.apply(movement.id, actor)

    async def test_apply_twice_is_rejected(self, db_session, employee, actor):
        from hris.core.exceptions import InvalidTransitionError
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(_promotion(employee.id), actor)
        await service.approve(movement.id, actor)
        await service.apply(movement.id, actor)

        with pytest.raises(InvalidTransitionError):
            await service.apply(movement.id, actor)

    async def test_transitions_notify_linked_user(self, db_session, employee, employee_user, actor):
        from hris.models.notification import Notification
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(_promotion(employee.id), actor)
        await service.approve(movement.id, actor)
        await service.apply(movement.id, actor)

        result = await db_session.execute(
            select(Notification.type)
            .where(Notification.user_id == employee_user.id)
            .order_by(Notification.id)
        )
        assert result.scalars().all() == ["movement_approved", "movement_applied"]


class TestRejectAndCancel:
    """Test the terminal branches of the lifecycle."""

    async def test_reject_requires_reason(self, db_session, employee, actor):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(_promotion(employee.id), actor)

        with pytest.raises(BusinessRuleError) as exc_info:
            await service.reject(movement.id, actor, "   ")

        assert exc_info.value.errors[0]["field"] == "rejection_reason"
        unchanged = await service.get(movement.id)
        assert unchanged.status == "pending"

    async def test_reject(self, db_session, employee, actor):
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(_promotion(employee.id), actor)

        rejected = await service.reject(movement.id, actor, "  Budget freeze ")

        assert rejected.status == "rejected"
        assert rejected.rejection_reason == "Budget freeze"
        assert rejected.rejected_by == actor.id

    async def test_rejected_cannot_be_approved(self, db_session, employee, actor):
        from hris.core.exceptions import InvalidTransitionError
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(_promotion(employee.id), actor)
        await service.reject(movement.id, actor, "No budget")

        with pytest.raises(InvalidTransitionError, match="closed"):
            await service.approve(movement.id, actor)

    async def test_draft_must_be_submitted_before_approval(self, db_session, employee, actor):
        from hris.core.exceptions import InvalidTransitionError
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(_promotion(employee.id, save_as_draft=True), actor)

        with pytest.raises(InvalidTransitionError):
            await service.approve(movement.id, actor)

        submitted = await service.submit(movement.id, actor)
        assert submitted.status == "pending"
        approved = await service.approve(movement.id, actor)
        assert approved.status == "approved"

    async def test_cancel_pending(self, db_session, employee, actor):
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(_promotion(employee.id), actor)

        cancelled = await service.cancel(movement.id, actor)

        assert cancelled.status == "cancelled"

    async def test_approved_cannot_be_deleted(self, db_session, employee, actor):
        from hris.core.exceptions import InvalidTransitionError
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(_promotion(employee.id), actor)
        await service.approve(movement.id, actor)

        with pytest.raises(InvalidTransitionError):
            await service.delete(movement.id, actor)

    async def test_delete_draft(self, db_session, employee, actor):
        from hris.core.exceptions import NotFoundError
        from hris.services.movement_service import EmployeeMovementService

        service = EmployeeMovementService(db_session)
        movement = await service.create(_promotion(employee.id, save_as_draft=True), actor)

        await service.delete(movement.id, actor)

        with pytest.raises(NotFoundError):
            await service.get(movement.id)


async def _edit_elsewhere(db_session, movement_id):
    """Commit an edit to the movement through a second session, bumping its version."""
    from sqlalchemy.ext.asyncio import AsyncSession
    from hris.models.movement import EmployeeMovement

    async with AsyncSession(db_session.bind, expire_on_commit=False) as other:
        movement = await other.get(EmployeeMovement, movement_id)
        movement.notes = "Edited in another tab"
        await other.commit()


def _race_after_load(monkeypatch, service, db_session):
    """Let another request win the race right after ``service`` loads the movement."""
    load = service.get

    async def load_then_lose_race(movement_id):
        movement = await load(movement_id)
        await _edit_elsewhere(db_session, movement_id)
        return movement

    monkeypatch.setattr(service, "get", load_then_lose_race)


class TestConcurrentTransitions:
    """Two requests acting on the same movement: the slower one gets a 409."""

    async def test_approve_loses_race(self, monkeypatch, db_session, employee, employee_user, actor):
        from hris.core.audit import AuditLog
        from hris.core.exceptions import ConflictError
        from hris.models.notification import Notification
        from hris.services.movement_service import EmployeeMovementService

        movement = await EmployeeMovementService(db_session).create(_promotion(employee.id), actor)
        service = EmployeeMovementService(db_session)
        _race_after_load(monkeypatch, service, db_session)

        with pytest.raises(ConflictError) as exc_info:
            await service.approve(movement.id, actor)

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "STALE_MOVEMENT"

        current = await EmployeeMovementService(db_session).get(movement.id)
        assert current.status == "pending"
        assert current.approved_at is None
        assert current.notes == "Edited in another tab"
        assert current.version == 2

        notifications = await db_session.execute(select(Notification.id))
        assert notifications.scalars().all() == []
        approvals = await db_session.execute(select(AuditLog.id).where(AuditLog.action == "movement.approve"))
        assert approvals.scalars().all() == []

    async def test_reject_loses_race(self, monkeypatch, db_session, employee, employee_user, actor):
        from hris.core.exceptions import ConflictError
        from hris.services.movement_service import EmployeeMovementService

        movement = await EmployeeMovementService(db_session).create(_promotion(employee.id), actor)
        service = EmployeeMovementService(db_session)
        _race_after_load(monkeypatch, service, db_session)

        with pytest.raises(ConflictError) as exc_info:
            await service.reject(movement.id, actor, "Budget freeze")

        assert exc_info.value.code == "STALE_MOVEMENT"
        current = await EmployeeMovementService(db_session).get(movement.id)
        assert current.status == "pending"
        assert current.rejection_reason is None

    async def test_apply_loses_race_and_leaves_employee_untouched(
        self, monkeypatch, db_session, employee, employee_user, actor
    ):
        from hris.core.exceptions import ConflictError
        from hris.models.employee import Employee
        from hris.services.movement_service import EmployeeMovementService

        setup = EmployeeMovementService(db_session)
        movement = await setup.create(_promotion(employee.id), actor)
        await setup.approve(movement.id, actor)

        service = EmployeeMovementService(db_session)
        _race_after_load(monkeypatch, service, db_session)

        with pytest.raises(ConflictError) as exc_info:
            await service.apply(movement.id, actor)

        assert exc_info.value.code == "STALE_MOVEMENT"
        current = await EmployeeMovementService(db_session).get(movement.id)
        assert current.status == "approved"
        assert current.is_applied is False

        refreshed = await db_session.get(Employee, employee.id, populate_existing=True)
        assert refreshed.basic_salary == Decimal("10000000")
        assert refreshed.grade_level == "G3"

    async def test_winner_can_still_proceed(self, monkeypatch, db_session, employee, actor):
        from hris.core.exceptions import ConflictError
        from hris.services.movement_service import EmployeeMovementService

        movement = await EmployeeMovementService(db_session).create(_promotion(employee.id), actor)
        loser = EmployeeMovementService(db_session)
        _race_after_load(monkeypatch, loser, db_session)
        with pytest.raises(ConflictError):
            await loser.approve(movement.id, actor)

        await db_session.refresh(actor)
        approved = await EmployeeMovementService(db_session).approve(movement.id, actor)

        assert approved.status == "approved"
        assert approved.version == 3


class TestMovementQueries:
    """Test the list views over movements."""

    async def test_ready_to_apply_respects_effective_date(self, db_session, employee, actor):
        from hris.services.movement_service import EmployeeMovementService
        from hris.services.pagination import PageParams

        service = EmployeeMovementService(db_session)
        due = await service.create(_promotion(employee.id), actor)
        future = await service.create(
            _promotion(employee.id, effective_date=date.today() + timedelta(days=30)), actor
        )
        await service.approve(due.id, actor)
        await service.approve(future.id, actor)

        items, total = await service.list_ready_to_apply(PageParams(page=1, limit=10))

        assert total == 1
        assert [m.id for m in items] == [due.id]

    async def test_pending_list_and_statistics(self, db_session, employee, actor):
        from hris.services.movement_service import EmployeeMovementService
        from hris.services.pagination import PageParams

        service = EmployeeMovementService(db_session)
        first = await service.create(_promotion(employee.id), actor)
        await service.create(
            _promotion(employee.id, movement_type="grade_change", new_salary=None), actor
        )
        await service.approve(first.id, actor)

        items, total = await service.list_pending(PageParams(page=1, limit=10))
        stats = await service.statistics()

        assert total == 1
        assert items[0].movement_type == "grade_change"
        assert stats["by_type"] == {"promotion": 1, "grade_change": 1}
        assert stats["by_status"] == {"approved": 1, "pending": 1}

    async def test_search_by_employee_number(self, db_session, employee, actor):
        from hris.services.movement_service import EmployeeMovementService
        from hris.services.pagination import PageParams

        service = EmployeeMovementService(db_session)
        await service.create(_promotion(employee.id), actor)

        _, found = await service.list(PageParams(), search="MB-0001")
        _, missing = await service.list(PageParams(), search="XX-9999")

        assert found == 1
        assert missing == 0
