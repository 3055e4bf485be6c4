"""
Tests for hris/client/workflows - movement actions, payroll overview,
notification polling and display formatting.
"""
import asyncio
import json

import httpx
import pytest

BASE_URL = "http://hris.test/api/v1"


def _api(handler, messages=None):
    from hris.client.http import ApiClient
    from hris.client.session import SessionStore

    sink = messages if messages is not None else []
    return ApiClient(
        base_url=BASE_URL,
        session=SessionStore({"token": "tok"}),
        notifier=sink.append,
        navigator=lambda path: None,
        transport=httpx.MockTransport(handler),
    )


def _ok(data, **extra):
    return httpx.Response(200, json={"success": True, "data": data, **extra})


def _page(items, total_pages=1):
    return httpx.Response(200, json={
        "success": True,
        "data": items,
        "pagination": {"page": 1, "limit": 20, "total": len(items), "totalPages": total_pages},
    })


MOVEMENT = {"id": 5, "status": "pending", "is_applied": False, "employee": {"full_name": "Budi Santoso"}}


class TestMovementActions:
    """Client side guards and messages for movement approval."""

    async def test_reject_with_blank_reason_sends_nothing(self):
        from hris.client.services.movements import EmployeeMovementService
        from hris.client.workflows.movements import MovementActionError, MovementActions

        calls = []

        def handler(request):
            calls.append(request)
            return _ok({})

        messages = []
        async with _api(handler, messages) as api:
            actions = MovementActions(EmployeeMovementService(api))
            with pytest.raises(MovementActionError):
                await actions.reject(MOVEMENT, "   ")

        assert calls == []
        assert messages == ["Please provide rejection reason"]

    async def test_reject_sends_trimmed_reason(self):
        from hris.client.services.movements import EmployeeMovementService
        from hris.client.workflows.movements import MovementActions

        bodies = []

        def handler(request):
            bodies.append(request.content)
            return _ok({**MOVEMENT, "status": "rejected"})

        async with _api(handler) as api:
            result = await MovementActions(EmployeeMovementService(api)).reject(MOVEMENT, " No budget ")

        assert result.ok is True
        assert result.message == "Movement for Budi Santoso has been rejected"
        assert result.movement["status"] == "rejected"
        assert json.loads(bodies[0]) == {"rejection_reason": "No budget"}

    async def test_approve_failure_reports_context(self):
        from hris.client.services.movements import EmployeeMovementService
        from hris.client.workflows.movements import MovementActions

        def handler(request):
            return httpx.Response(409, json={
                "success": False,
                "error": {"message": "Cannot approve a movement with status 'applied'",
                          "code": "INVALID_TRANSITION"},
            })

        messages = []
        async with _api(handler, messages) as api:
            result = await MovementActions(EmployeeMovementService(api)).approve(MOVEMENT)

        assert result.ok is False
        assert result.message == "Failed to approve movement"
        assert messages[-1] == "Failed to approve movement"

    async def test_apply_requires_approved_status(self):
        from hris.client.services.movements import EmployeeMovementService
        from hris.client.workflows.movements import MovementActionError, MovementActions

        async with _api(lambda request: _ok({})) as api:
            actions = MovementActions(EmployeeMovementService(api))
            with pytest.raises(MovementActionError):
                await actions.apply(MOVEMENT)
            with pytest.raises(MovementActionError):
                await actions.delete({**MOVEMENT, "status": "approved"})

    def test_guards_and_stats(self):
        from hris.client.workflows.movements import can_apply, can_delete, movement_stats

        movements = [
            {"status": "pending"},
            {"status": "approved", "is_applied": False},
            {"status": "applied", "is_applied": True},
            {"status": "draft"},
        ]

        assert [can_apply(m) for m in movements] == [False, True, False, False]
        assert [can_delete(m) for m in movements] == [True, False, False, True]
        assert movement_stats(movements) == {"total": 4, "pending": 1, "approved": 1, "applied": 1}

    def test_search_by_name_or_number(self):
        from hris.client.workflows.movements import search_movements

        movements = [
            {"id": 1, "employee": {"full_name": "Budi Santoso", "employee_id": "MB-0001"}},
            {"id": 2, "employee": {"full_name": "Siti Aminah", "employee_id": "MB-0002"}},
            {"id": 3, "employee": None},
        ]

        assert [m["id"] for m in search_movements(movements, "budi")] == [1]
        assert [m["id"] for m in search_movements(movements, "mb-0002")] == [2]
        assert len(search_movements(movements, "")) == 3


class TestPayrollOverview:
    """The three payroll tables load together or not at all."""

    async def test_loads_all_tables(self):
        from hris.client.services.payroll_settings import PayrollSettingsService
        from hris.client.workflows.payroll import load_payroll_overview

        seen = {}

        def handler(request):
            path = request.url.path
            seen[path] = dict(request.url.params)
            if path.endswith("/tax-configurations"):
                return _page([{"id": 1, "category": "A"}], total_pages=4)
            if path.endswith("/tax-brackets"):
                return _page([{"id": 1}, {"id": 2}])
            return _page([{"status": "TK/0"}], total_pages=0)

        async with _api(handler) as api:
            overview = await load_payroll_overview(PayrollSettingsService(api), ter_category="A")

        assert overview.loaded is True
        assert overview.ter_total_pages == 4
        assert overview.ptkp_total_pages == 1
        assert len(overview.tax_brackets) == 2
        assert seen["/api/v1/payroll-settings/tax-configurations"] == {"page": "1", "limit": "20", "category": "A"}
        assert seen["/api/v1/payroll-settings/tax-brackets"]["limit"] == "10"
        assert seen["/api/v1/payroll-settings/ptkp"]["limit"] == "20"

    async def test_one_failure_fails_the_overview(self):
        from hris.client.services.payroll_settings import PayrollSettingsService
        from hris.client.workflows.payroll import LOAD_ERROR_MESSAGE, load_payroll_overview

        def handler(request):
            if request.url.path.endswith("/tax-brackets"):
                return httpx.Response(500, json={"success": False, "error": {"message": "boom"}})
            return _page([{"id": 1}])

        messages = []
        async with _api(handler, messages) as api:
            overview = await load_payroll_overview(PayrollSettingsService(api))

        assert overview.loaded is False
        assert overview.error == LOAD_ERROR_MESSAGE
        assert overview.ter_rates == []
        assert overview.ptkp == []
        assert LOAD_ERROR_MESSAGE in messages

    async def test_seed_summary(self):
        from hris.client.services.payroll_settings import PayrollSettingsService
        from hris.client.workflows.payroll import seed_all_tax_data

        def handler(request):
            return _ok({
                "ter_rates": {"created": 120, "skipped": 0},
                "tax_brackets": {"created": 5, "skipped": 0},
                "ptkp": {"created": 0, "skipped": 8},
            })

        messages = []
        async with _api(handler, messages) as api:
            message = await seed_all_tax_data(PayrollSettingsService(api))

        assert message == "Berhasil! TER: 120 baru, Brackets: 5 baru, PTKP: 0 baru"
        assert messages == [message]


class TestNotificationPoller:
    """Unread count and read state for the notification bell."""

    async def test_open_reads_unread_count_from_envelope(self):
        from hris.client.services.notifications import NotificationService
        from hris.client.workflows.notifications import NotificationPoller

        def handler(request):
            return _ok(
                [{"id": 1, "is_read": False}, {"id": 2, "is_read": True}],
                unread_count=7,
                pagination={"page": 1, "limit": 10, "total": 2, "totalPages": 1},
            )

        async with _api(handler) as api:
            poller = NotificationPoller(NotificationService(api), interval=60)
            items = await poller.open()

        assert len(items) == 2
        assert poller.unread_count == 7

    async def test_mark_as_read_is_optimistic(self):
        from hris.client.services.notifications import NotificationService
        from hris.client.workflows.notifications import NotificationPoller

        def handler(request):
            return httpx.Response(500, json={"success": False, "error": {"message": "down"}})

        async with _api(handler) as api:
            poller = NotificationPoller(NotificationService(api), interval=60)
            poller.notifications = [{"id": 1, "is_read": False}]
            poller.unread_count = 3

            await poller.mark_as_read(poller.notifications[0])

        assert poller.notifications[0]["is_read"] is True
        assert poller.unread_count == 2

    async def test_mark_as_read_skips_read_items(self):
        from hris.client.services.notifications import NotificationService
        from hris.client.workflows.notifications import NotificationPoller

        calls = []

        def handler(request):
            calls.append(request)
            return _ok({})

        async with _api(handler) as api:
            poller = NotificationPoller(NotificationService(api), interval=60)
            poller.unread_count = 1
            await poller.mark_as_read({"id": 4, "is_read": True})

        assert calls == []
        assert poller.unread_count == 1

    async def test_mark_all_as_read_zeroes_count(self):
        from hris.client.services.notifications import NotificationService
        from hris.client.workflows.notifications import NotificationPoller

        async with _api(lambda request: _ok({"count": 2})) as api:
            poller = NotificationPoller(NotificationService(api), interval=60)
            poller.notifications = [{"id": 1, "is_read": False}, {"id": 2, "is_read": False}]
            poller.unread_count = 2

            await poller.mark_all_as_read()

        assert poller.unread_count == 0
        assert all(item["is_read"] for item in poller.notifications)

    async def test_polling_refreshes_count(self):
        from hris.client.services.notifications import NotificationService
        from hris.client.workflows.notifications import NotificationPoller

        async with _api(lambda request: _ok({"count": 4})) as api:
            poller = NotificationPoller(NotificationService(api), interval=0.01)
            poller.start()
            await asyncio.sleep(0.05)
            assert poller.running is True
            await poller.stop()

        assert poller.running is False
        assert poller.unread_count == 4


class TestFormatting:
    def test_format_currency(self):
        from hris.client.workflows.formatting import format_currency

        assert format_currency(15000000) == "Rp 15.000.000"
        assert format_currency(1234.5) == "Rp 1.235"
        assert format_currency(-500000) == "-Rp 500.000"
        assert format_currency(0) == "Rp 0"
        assert format_currency(None) == "-"

    def test_format_percent(self):
        from hris.client.workflows.formatting import format_percent

        assert format_percent(0.05) == "5.00%"
        assert format_percent(0.0025) == "0.25%"
        assert format_percent(None) == "-"

    def test_format_income_limit(self):
        from hris.client.workflows.formatting import format_income_limit

        assert format_income_limit(None) == "Tidak terbatas"
        assert format_income_limit(60000000) == "Rp 60.000.000"
