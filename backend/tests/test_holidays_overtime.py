"""
Tests for hris/services/holiday_service.py and hris/services/overtime_service.py.
"""
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select

MONDAY = date(2030, 3, 4)
SATURDAY = date(2030, 3, 9)


class TestHolidayHelpers:
    def test_detect_type_from_name(self):
        from hris.services.holiday_service import detect_holiday_type

        assert detect_holiday_type("Cuti Bersama Idul Fitri") == "cuti_bersama"
        assert detect_holiday_type("Hari Raya Waisak") == "religious"
        assert detect_holiday_type("Hari Kemerdekaan RI") == "national"

    def test_fixed_holidays_every_year(self):
        from hris.services.holiday_service import national_holidays

        names = {name for _, name, _ in national_holidays(2031)}

        assert "Hari Kemerdekaan RI" in names
        assert (date(2031, 8, 17), "Hari Kemerdekaan RI", "national") in national_holidays(2031)

    def test_movable_holidays_for_published_year(self):
        from hris.services.holiday_service import national_holidays

        holidays = national_holidays(2026)

        assert (date(2026, 3, 20), "Hari Raya Idul Fitri (Hari 1)", "religious") in holidays
        assert holidays == sorted(holidays)


class TestHolidayService:
    async def test_seed_is_idempotent(self, db_session):
        from hris.services.holiday_service import HolidayService, national_holidays

        service = HolidayService(db_session)
        first = await service.seed_national(2026)
        second = await service.seed_national(2026)

        assert first == {"created": len(national_holidays(2026)), "skipped": 0, "errors": []}
        assert second["created"] == 0
        assert second["skipped"] == len(national_holidays(2026))

    async def test_duplicate_national_holiday_conflicts(self, db_session):
        from hris.core.exceptions import ConflictError
        from hris.services.holiday_service import HolidayService

        service = HolidayService(db_session)
        await service.create({"name": "Hari Raya Nyepi", "date": date(2030, 3, 6), "type": "religious"})

        with pytest.raises(ConflictError):
            await service.create({"name": "Hari Raya Nyepi", "date": date(2030, 3, 6), "type": "religious"})

    async def test_bulk_reports_duplicates_when_not_skipping(self, db_session, company):
        from hris.services.holiday_service import HolidayService

        items = [
            {"name": "Company anniversary", "date": date(2030, 5, 2)},
            {"name": "Company anniversary", "date": date(2030, 5, 2)},
        ]
        result = await HolidayService(db_session).bulk_create(items, company_id=company.id, skip_duplicates=False)

        assert result["created"] == 1
        assert result["errors"] == ["2030-05-02 Company anniversary: already exists"]

    async def test_recurring_holiday_projects_into_other_years(self, db_session, company):
        from hris.services.holiday_service import HolidayService

        service = HolidayService(db_session)
        await service.create({
            "name": "Founders day", "date": date(2020, 3, 6), "type": "company",
            "company_id": company.id, "is_recurring": True,
        })

        dates = await service.holiday_dates(MONDAY, SATURDAY, company.id)

        assert dates == {date(2030, 3, 6)}
        assert await service.holiday_dates(MONDAY, SATURDAY, None) == set()

    async def test_inactive_holiday_is_ignored(self, db_session):
        from hris.services.holiday_service import HolidayService

        service = HolidayService(db_session)
        holiday = await service.create({"name": "Hari Raya Nyepi", "date": date(2030, 3, 6), "type": "religious"})
        await service.update(holiday.id, {"is_active": False})

        assert await service.holiday_dates(MONDAY, SATURDAY) == set()

    async def test_working_days_summary(self, db_session, company):
        from hris.services.holiday_service import HolidayService

        service = HolidayService(db_session)
        await service.create({"name": "Hari Raya Nyepi", "date": date(2030, 3, 6), "type": "religious"})
        # Sunday; not a working day either way
        await service.create({"name": "Weekend event", "date": date(2030, 3, 10), "type": "company",
                              "company_id": company.id})

        summary = await service.working_days_summary(2030, 3, company.id)

        assert summary["total_days"] == 31
        assert summary["working_days"] == 21
        assert summary["holiday_count"] == 2
        assert summary["actual_working_days"] == 20


class TestOvertimeHelpers:
    def test_hours_from_clock_times(self):
        from hris.services.overtime_service import calculate_hours

        assert calculate_hours("18:00", "21:30", 30) == 3.0

    def test_hours_across_midnight(self):
        from hris.services.overtime_service import calculate_hours

        assert calculate_hours("22:00", "02:00") == 4.0

    def test_break_longer_than_period(self):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.overtime_service import calculate_hours

        with pytest.raises(BusinessRuleError):
            calculate_hours("18:00", "18:30", 45)

    def test_hourly_rate_uses_173_hours(self):
        from hris.services.overtime_service import hourly_rate, overtime_amount

        rate = hourly_rate(Decimal("10000000"))

        assert rate == Decimal("57803.47")
        assert overtime_amount(2, rate, 1.5) == Decimal("173410")


class TestOvertimeService:
    async def test_weekday_overtime_is_regular(self, db_session, employee, actor):
        from hris.services.overtime_service import OvertimeService

        overtime = await OvertimeService(db_session).create(
            employee.id,
            {"date": MONDAY, "start_time": "17:00", "end_time": "19:00", "reason": "  Month-end close  "},
            actor,
        )

        assert overtime.status == "pending"
        assert overtime.hours == 2.0
        assert overtime.overtime_type == "regular"
        assert overtime.rate_multiplier == 1.5
        assert overtime.total_amount == Decimal("173410")
        assert overtime.reason == "Month-end close"
        assert overtime.company_id == employee.company_id
        assert overtime.requested_by == actor.id

    async def test_weekend_and_holiday_rates(self, db_session, employee, actor):
        from hris.services.holiday_service import HolidayService
        from hris.services.overtime_service import OvertimeService

        await HolidayService(db_session).create({"name": "Hari Raya Nyepi", "date": date(2030, 3, 6),
                                                 "type": "religious"})
        service = OvertimeService(db_session)

        weekend = await service.create(employee.id, {"date": SATURDAY, "hours": 3, "reason": "Migration"}, actor)
        holiday = await service.create(employee.id, {"date": date(2030, 3, 6), "hours": 2, "reason": "On call"}, actor)

        assert (weekend.overtime_type, weekend.rate_multiplier) == ("weekend", 2.0)
        assert weekend.total_amount == Decimal("346821")
        assert (holiday.overtime_type, holiday.rate_multiplier) == ("holiday", 3.0)

    async def test_needs_hours_or_clock_times(self, db_session, employee, actor):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.overtime_service import OvertimeService

        with pytest.raises(BusinessRuleError) as exc_info:
            await OvertimeService(db_session).create(
                employee.id, {"date": MONDAY, "start_time": "17:00", "reason": "Close"}, actor
            )

        assert exc_info.value.code == "INVALID_OVERTIME_HOURS"

    async def test_blank_reason_is_rejected(self, db_session, employee, actor):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.overtime_service import OvertimeService

        with pytest.raises(BusinessRuleError):
            await OvertimeService(db_session).create(employee.id, {"date": MONDAY, "hours": 1, "reason": "   "}, actor)

    async def test_one_request_per_day(self, db_session, employee, actor):
        from hris.core.exceptions import ConflictError
        from hris.services.overtime_service import OvertimeService

        service = OvertimeService(db_session)
        await service.create(employee.id, {"date": MONDAY, "hours": 1, "reason": "Close"}, actor)

        with pytest.raises(ConflictError) as exc_info:
            await service.create(employee.id, {"date": MONDAY, "hours": 2, "reason": "Again"}, actor)

        assert exc_info.value.code == "OVERTIME_EXISTS"

    async def test_update_reprices(self, db_session, employee, actor):
        from hris.services.overtime_service import OvertimeService

        service = OvertimeService(db_session)
        overtime = await service.create(employee.id, {"date": MONDAY, "hours": 2, "reason": "Close"}, actor)

        updated = await service.update(overtime.id, {"date": SATURDAY})

        assert updated.overtime_type == "weekend"
        assert updated.hours == 2.0
        assert updated.total_amount == Decimal("231214")

    async def test_approve_notifies_and_audits(self, db_session, employee, employee_user, actor):
        from hris.core.audit import AuditLog
        from hris.models.notification import Notification
        from hris.services.overtime_service import OvertimeService

        service = OvertimeService(db_session)
        overtime = await service.create(employee.id, {"date": MONDAY, "hours": 2, "reason": "Close"}, actor)

        approved = await service.approve(overtime.id, actor, notes="Thanks")

        assert approved.status == "approved"
        assert approved.approved_by == actor.id
        notifications = (await db_session.execute(select(Notification))).scalars().all()
        assert [(n.user_id, n.type) for n in notifications] == [(employee_user.id, "overtime_approved")]
        logs = (await db_session.execute(select(AuditLog).where(AuditLog.action == "overtime.approve"))).scalars().all()
        assert len(logs) == 1

    async def test_reject_requires_reason(self, db_session, employee, actor):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.overtime_service import OvertimeService

        service = OvertimeService(db_session)
        overtime = await service.create(employee.id, {"date": MONDAY, "hours": 2, "reason": "Close"}, actor)

        with pytest.raises(BusinessRuleError):
            await service.reject(overtime.id, actor, " ")

        rejected = await service.reject(overtime.id, actor, "Not pre-approved")
        assert rejected.rejection_reason == "Not pre-approved"

    async def test_closed_request_cannot_change(self, db_session, employee, actor):
        from hris.core.exceptions import InvalidTransitionError
        from hris.services.overtime_service import OvertimeService

        service = OvertimeService(db_session)
        overtime = await service.create(employee.id, {"date": MONDAY, "hours": 2, "reason": "Close"}, actor)
        await service.approve(overtime.id, actor)

        with pytest.raises(InvalidTransitionError):
            await service.cancel(overtime.id)
        with pytest.raises(InvalidTransitionError):
            await service.delete(overtime.id)

    async def test_cancelled_day_can_be_filed_again(self, db_session, employee, actor):
        from hris.services.overtime_service import OvertimeService

        service = OvertimeService(db_session)
        first = await service.create(employee.id, {"date": MONDAY, "hours": 2, "reason": "Close"}, actor)
        await service.cancel(first.id)

        second = await service.create(employee.id, {"date": MONDAY, "hours": 1, "reason": "Close"}, actor)

        assert second.id != first.id
