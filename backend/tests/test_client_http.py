"""
Tests for hris/client/http.py - the shared API client and its error handling.

Requests are served by ``httpx.MockTransport`` so no server is needed.
"""
import json

import httpx
import pytest

BASE_URL = "http://hris.test/api/v1"


class Recorder:
    """Collects notifications and navigations raised by the client."""

    def __init__(self):
        self.messages = []
        self.navigations = []

    def notify(self, message):
        self.messages.append(message)

    def navigate(self, path):
        self.navigations.append(path)


def _client(handler, recorder, session=None):
    from hris.client.http import ApiClient
    from hris.client.session import SessionStore

    return ApiClient(
        base_url=BASE_URL,
        session=session or SessionStore({"token": "tok-123", "user": {"id": 1}}),
        notifier=recorder.notify,
        navigator=recorder.navigate,
        transport=httpx.MockTransport(handler),
    )


def _error(status, message, code="ERR"):
    def handler(request):
        return httpx.Response(
            status, json={"success": False, "error": {"message": message, "code": code}}
        )
    return handler


class TestRequests:
    """Successful calls."""

    async def test_bearer_token_and_path(self):
        from hris.client.services.departments import DepartmentService

        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"success": True, "data": {"id": 3, "name": "Finance"}})

        recorder = Recorder()
        async with _client(handler, recorder) as api:
            department = await DepartmentService(api).get(3)

        assert department == {"id": 3, "name": "Finance"}
        assert seen["auth"] == "Bearer tok-123"
        assert seen["url"] == f"{BASE_URL}/departments/3"
        assert recorder.messages == []

    async def test_no_authorization_header_without_token(self):
        from hris.client.session import SessionStore

        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"success": True, "data": []})

        async with _client(handler, Recorder(), session=SessionStore()) as api:
            await api.get("/departments")

        assert seen["auth"] is None

    async def test_unset_filters_are_not_sent(self):
        from hris.client.services.movements import EmployeeMovementService

        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"success": True, "data": []})

        async with _client(handler, Recorder()) as api:
            await EmployeeMovementService(api).list(page=2, status="pending", company_id=None)

        assert seen["params"] == {"page": "2", "limit": "10", "status": "pending"}

    async def test_meta_block_pagination(self):
        """Departments answer with a ``meta`` block; it is read like ``pagination``."""
        from hris.client.services.departments import DepartmentService

        def handler(request):
            return httpx.Response(200, json={
                "success": True,
                "data": [{"id": 1}, {"id": 2}],
                "meta": {"page": 1, "limit": 2, "total": 5, "totalPages": 3},
            })

        async with _client(handler, Recorder()) as api:
            page = await DepartmentService(api).list(limit=2)

        assert len(page) == 2
        assert page.pagination.total == 5
        assert page.pagination.total_pages == 3

    async def test_approve_without_notes_sends_no_body(self):
        from hris.client.services.movements import EmployeeMovementService

        bodies = []

        def handler(request):
            bodies.append(request.content)
            return httpx.Response(200, json={"success": True, "data": {"id": 9, "status": "approved"}})

        async with _client(handler, Recorder()) as api:
            service = EmployeeMovementService(api)
            await service.approve(9)
            await service.approve(9, "Congrats")

        assert bodies[0] == b""
        assert json.loads(bodies[1]) == {"approval_notes": "Congrats"}


class TestCalendarAndDocumentRequests:
    """Paths and payloads of the holiday, overtime and employee document services."""

    async def test_paths(self):
        from hris.client.services import Services

        seen = []

        def handler(request):
            seen.append((request.method, request.url.path, dict(request.url.params)))
            return httpx.Response(200, json={"success": True, "data": {}})

        async with _client(handler, Recorder()) as api:
            services = Services(api)
            await services.holidays.working_days(2026, 3)
            await services.holidays.seed(2026)
            await services.overtime.cancel(4)
            await services.employee_documents.completeness(7)
            await services.employee_documents.expiring(days=14)

        assert seen == [
            ("GET", "/api/v1/holidays/working-days", {"year": "2026", "month": "3"}),
            ("POST", "/api/v1/holidays/seed/2026", {}),
            ("POST", "/api/v1/overtime/4/cancel", {}),
            ("GET", "/api/v1/documents/employee/completeness/7", {}),
            ("GET", "/api/v1/documents/employee/expiring", {"days": "14"}),
        ]

    async def test_overtime_for_employee_carries_the_employee_id(self):
        from hris.client.services.overtime import OvertimeService

        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(201, json={"success": True, "data": {"id": 1}})

        async with _client(handler, Recorder()) as api:
            await OvertimeService(api).create_for_employee(12, {"date": "2026-03-02", "hours": 2, "reason": "Close"})

        assert bodies == [{"date": "2026-03-02", "hours": 2, "reason": "Close", "employee_id": 12}]

    async def test_verify_without_notes_sends_no_body(self):
        from hris.client.services.employee_documents import EmployeeDocumentService

        bodies = []

        def handler(request):
            bodies.append(request.content)
            return httpx.Response(200, json={"success": True, "data": {"id": 5, "is_verified": True}})

        async with _client(handler, Recorder()) as api:
            document = await EmployeeDocumentService(api).verify(5)

        assert bodies == [b""]
        assert document["is_verified"] is True


class TestErrorHandling:
    """Failed calls are classified, reported and raised."""

    async def test_401_clears_session_and_redirects_once(self):
        from hris.client.http import SESSION_EXPIRED_MESSAGE, UnauthorizedError
        from hris.client.session import SessionStore

        session = SessionStore({"token": "expired", "user": {"id": 1}, "theme": "dark"})
        recorder = Recorder()

        async with _client(_error(401, "Could not validate credentials"), recorder, session) as api:
            with pytest.raises(UnauthorizedError) as exc_info:
                await api.get("/employees")

        assert exc_info.value.status_code == 401
        assert session.token is None
        assert session.user is None
        assert session.get("theme") == "dark"
        assert recorder.navigations == ["/login"]
        assert recorder.messages == [SESSION_EXPIRED_MESSAGE]

    async def test_401_on_login_is_left_to_the_caller(self):
        from hris.client.http import UnauthorizedError
        from hris.client.services.auth import AuthService
        from hris.client.session import SessionStore

        session = SessionStore()
        recorder = Recorder()

        async with _client(_error(401, "Incorrect email or password"), recorder, session) as api:
            with pytest.raises(UnauthorizedError) as exc_info:
                await AuthService(api).login("budi@example.com", "wrong")

        assert exc_info.value.message == "Incorrect email or password"
        assert recorder.navigations == []
        assert recorder.messages == []

    @pytest.mark.parametrize(
        "status,error_class,expected",
        [
            (403, "ForbiddenError", "FORBIDDEN_MESSAGE"),
            (404, "NotFoundError", "NOT_FOUND_MESSAGE"),
            (500, "ServerError", "SERVER_ERROR_MESSAGE"),
        ],
    )
    async def test_generic_messages(self, status, error_class, expected):
        from hris.client import http

        recorder = Recorder()
        async with _client(_error(status, "detail from server"), recorder) as api:
            with pytest.raises(getattr(http, error_class)) as exc_info:
                await api.get("/employees/1")

        assert recorder.messages == [getattr(http, expected)]
        assert exc_info.value.message == "detail from server"
        assert recorder.navigations == []

    async def test_other_errors_surface_server_message(self):
        from hris.client.http import ApiError

        recorder = Recorder()
        async with _client(_error(409, "Cannot approve a movement with status 'applied'",
                                  "INVALID_TRANSITION"), recorder) as api:
            with pytest.raises(ApiError) as exc_info:
                await api.post("/employee-movements/1/approve")

        assert exc_info.value.code == "INVALID_TRANSITION"
        assert recorder.messages == ["Cannot approve a movement with status 'applied'"]

    async def test_validation_errors_are_kept(self):
        from hris.client.http import ApiError

        def handler(request):
            return httpx.Response(422, json={
                "success": False,
                "error": {
                    "message": "Validation failed",
                    "code": "VALIDATION_ERROR",
                    "errors": [{"field": "email", "message": "value is not a valid email address"}],
                },
            })

        async with _client(handler, Recorder()) as api:
            with pytest.raises(ApiError) as exc_info:
                await api.post("/employees", json={"email": "nope"})

        assert exc_info.value.errors[0]["field"] == "email"

    async def test_transport_failure(self):
        from hris.client.http import ApiError

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        recorder = Recorder()
        async with _client(handler, recorder) as api:
            with pytest.raises(ApiError) as exc_info:
                await api.get("/employees")

        assert exc_info.value.status_code is None
        assert recorder.messages == ["connection refused"]


class TestSessionStores:
    def test_clear_only_drops_login_keys(self):
        from hris.client.session import SessionStore

        session = SessionStore()
        session.save_login("abc", {"id": 1})
        session.set("refreshToken", "r")
        session.clear()

        assert session.token is None
        assert session.get("refreshToken") == "r"

    def test_file_store_survives_reload(self, tmp_path):
        from hris.client.session import FileSessionStore

        path = tmp_path / "session.json"
        FileSessionStore(path).save_login("abc", {"id": 7})

        reloaded = FileSessionStore(path)

        assert reloaded.token == "abc"
        assert reloaded.user == {"id": 7}

    def test_unreadable_file_starts_empty(self, tmp_path):
        from hris.client.session import FileSessionStore

        path = tmp_path / "session.json"
        path.write_text("{not json")

        assert FileSessionStore(path).token is None


class TestPagination:
    """One pagination shape regardless of how the server spelled it."""

    def test_snake_case_total_pages(self):
        from hris.client.pagination import Pagination

        meta = Pagination.from_body({"pagination": {"page": 2, "limit": 20, "total": 41, "total_pages": 3}})

        assert (meta.page, meta.limit, meta.total, meta.total_pages) == (2, 20, 41, 3)

    def test_computed_when_missing(self):
        from hris.client.pagination import Pagination

        assert Pagination.from_body({"pagination": {"page": 1, "limit": 10, "total": 25}}).total_pages == 3

    def test_no_block_uses_item_count(self):
        from hris.client.pagination import Page

        page = Page.from_body({"success": True, "data": [{"id": 1}], "unread_count": 4})

        assert page.pagination.total == 1
        assert page.pagination.total_pages == 1
        assert page.extra == {"unread_count": 4}
