"""
End-to-end API tests: the FastAPI app over ASGI with an in-memory database.

Covers the response and error envelopes, authentication and the employee
movement endpoints.
"""
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest.fixture(autouse=True)
def fresh_login_tracker(monkeypatch):
    from hris.core import login_tracker

    monkeypatch.setattr(login_tracker, "_tracker", login_tracker.InMemoryLoginTracker())


@pytest_asyncio.fixture
async def api_client(db_session):
    from hris.api.deps import get_db
    from hris.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin(db_session, company):
    """A super admin; every permission check passes."""
    from hris.core.security import get_password_hash
    from hris.models.user import Role, User

    role = Role(name="super_admin", display_name="Super Admin", is_system=True, permissions=[])
    user = User(
        email="admin@example.com",
        hashed_password=get_password_hash("Admin123!"),
        full_name="Admin",
        company_id=company.id,
        is_active=True,
        roles=[role],
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def staff(db_session, company):
    """A user with no roles."""
    from hris.core.security import get_password_hash
    from hris.models.user import User

    user = User(
        email="staff@example.com",
        hashed_password=get_password_hash("Staff123!"),
        company_id=company.id,
        is_active=True,
        roles=[],
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


def _auth(user):
    from hris.core.security import create_access_token

    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


class TestAppBasics:
    """Health, root and cross-cutting middleware."""

    async def test_health(self, api_client):
        response = await api_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"] == {"database": True}

    async def test_security_headers(self, api_client):
        response = await api_client.get("/")

        assert response.json()["message"] == "Welcome to the HRIS API"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "geolocation=(self)" in response.headers["Permissions-Policy"]

    async def test_unknown_route_uses_error_envelope(self, api_client):
        response = await api_client.get("/api/v1/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": {"message": "Not Found", "code": "NOT_FOUND"}}

    async def test_unhandled_error_is_wrapped(self, db_session):
        from hris.api.deps import get_db
        from hris.main import app

        async def broken_db():
            raise RuntimeError("database exploded")
            yield

        app.dependency_overrides[get_db] = broken_db
        try:
            transport = ASGITransport(app=app, raise_app_exceptions=False)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.post(
                    "/api/v1/auth/login", json={"email": "a@example.com", "password": "x"}
                )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "INTERNAL_SERVER_ERROR"
        assert "Reference ID" in error["message"]


class TestAuthEndpoints:
    """Login, current user and token lifecycle."""

    async def test_login_and_me(self, api_client, actor):
        response = await api_client.post(
            "/api/v1/auth/login", json={"email": "HR@example.com", "password": "Secret123!"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Login successful"
        assert body["data"]["user"]["email"] == "hr@example.com"
        assert body["data"]["expiresIn"] > 0

        me = await api_client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {body['data']['token']}"}
        )
        assert me.status_code == 200
        assert me.json()["data"]["id"] == actor.id

    async def test_wrong_password(self, api_client, actor):
        response = await api_client.post(
            "/api/v1/auth/login", json={"email": "hr@example.com", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == {"message": "Incorrect email or password", "code": "UNAUTHORIZED"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_lockout_after_repeated_failures(self, api_client, actor):
        from hris.core.config import settings

        statuses = []
        for _ in range(settings.LOGIN_MAX_ATTEMPTS):
            response = await api_client.post(
                "/api/v1/auth/login", json={"email": "hr@example.com", "password": "nope"}
            )
            statuses.append(response.status_code)

        assert statuses[-1] == 429
        assert set(statuses[:-1]) == {401}

        locked = await api_client.post(
            "/api/v1/auth/login", json={"email": "hr@example.com", "password": "Secret123!"}
        )
        assert locked.status_code == 429
        assert locked.json()["error"]["code"] == "RATE_LIMIT_EXCEEDED"

    async def test_refresh_rotates_token(self, api_client, actor):
        login = await api_client.post(
            "/api/v1/auth/login", json={"email": "hr@example.com", "password": "Secret123!"}
        )
        refresh_token = login.json()["data"]["refreshToken"]

        first = await api_client.post("/api/v1/auth/token/refresh", json={"refresh_token": refresh_token})
        reused = await api_client.post("/api/v1/auth/token/refresh", json={"refresh_token": refresh_token})

        assert first.status_code == 200
        assert first.json()["data"]["refreshToken"] != refresh_token
        assert reused.status_code == 401

    async def test_logout_revokes_access_token(self, api_client, actor):
        from hris.core.token_blacklist import clear_blacklist

        headers = _auth(actor)
        try:
            logout = await api_client.post("/api/v1/auth/logout", headers=headers)
            after = await api_client.get("/api/v1/auth/me", headers=headers)
        finally:
            clear_blacklist()

        assert logout.status_code == 200
        assert after.status_code == 401

    async def test_missing_token(self, api_client):
        response = await api_client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_forgot_password_does_not_reveal_accounts(self, api_client, actor):
        known = await api_client.post("/api/v1/auth/forgot-password", json={"email": "hr@example.com"})
        unknown = await api_client.post("/api/v1/auth/forgot-password", json={"email": "ghost@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()

    async def test_change_password_policy(self, api_client, actor):
        response = await api_client.post(
            "/api/v1/auth/change-password",
            json={"current_password": "Secret123!", "new_password": "short"},
            headers=_auth(actor),
        )

        assert response.status_code == 400
        assert "at least" in response.json()["error"]["message"]


class TestMovementEndpoints:
    """The movement workflow over HTTP."""

    async def _create(self, api_client, admin, employee, **overrides):
        payload = {
            "employee_id": employee.id,
            "movement_type": "promotion",
            "effective_date": date.today().isoformat(),
            "new_salary": 15000000,
            **overrides,
        }
        return await api_client.post("/api/v1/employee-movements", json=payload, headers=_auth(admin))

    async def test_promotion_approve_then_apply(self, api_client, admin, employee):
        created = await self._create(api_client, admin, employee)
        assert created.status_code == 201
        movement = created.json()["data"]
        assert movement["status"] == "pending"
        assert movement["employee"]["employee_id"] == "MB-0001"

        approved = await api_client.post(
            f"/api/v1/employee-movements/{movement['id']}/approve", headers=_auth(admin)
        )
        assert approved.status_code == 200
        assert approved.json()["data"]["is_applied"] is False
        assert approved.json()["data"]["approved_at"] is not None

        applied = await api_client.post(
            f"/api/v1/employee-movements/{movement['id']}/apply", headers=_auth(admin)
        )
        assert applied.status_code == 200
        assert applied.json()["data"]["is_applied"] is True
        assert applied.json()["message"] == "Movement applied to employee record"

        again = await api_client.post(
            f"/api/v1/employee-movements/{movement['id']}/approve", headers=_auth(admin)
        )
        assert again.status_code == 409
        assert again.json()["error"]["code"] == "INVALID_TRANSITION"

    async def test_reject_requires_reason(self, api_client, admin, employee):
        movement = (await self._create(api_client, admin, employee)).json()["data"]

        response = await api_client.post(
            f"/api/v1/employee-movements/{movement['id']}/reject",
            json={"rejection_reason": "  "},
            headers=_auth(admin),
        )

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "BUSINESS_RULE_VIOLATION"
        assert error["errors"][0]["field"] == "rejection_reason"

    async def test_validation_error_envelope(self, api_client, admin, employee):
        response = await self._create(api_client, admin, employee, movement_type="sideways")

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["errors"][0]["field"] == "movement_type"

    async def test_missing_movement(self, api_client, admin):
        response = await api_client.get("/api/v1/employee-movements/999", headers=_auth(admin))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_permission_required(self, api_client, staff, employee):
        response = await self._create(api_client, staff, employee)

        assert response.status_code == 403
        error = response.json()["error"]
        assert error["code"] == "FORBIDDEN"
        assert "movement:create" in error["message"]

    async def test_list_is_paginated(self, api_client, admin, employee):
        await self._create(api_client, admin, employee)
        await self._create(api_client, admin, employee, movement_type="grade_change", new_grade="G4")

        response = await api_client.get(
            "/api/v1/employee-movements", params={"limit": 1}, headers=_auth(admin)
        )

        body = response.json()
        assert response.status_code == 200
        assert len(body["data"]) == 1
        assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "totalPages": 2}


class TestCalendarOvertimeDocumentEndpoints:
    """Holidays, overtime and employee documents over HTTP."""

    async def test_seeded_holidays_reduce_working_days(self, api_client, admin, employee_user):
        seeded = await api_client.post("/api/v1/holidays/seed/2026", headers=_auth(admin))
        assert seeded.status_code == 200
        assert seeded.json()["data"]["skipped"] == 0

        response = await api_client.get(
            "/api/v1/holidays/working-days", params={"year": 2026, "month": 8}, headers=_auth(employee_user)
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["working_days"] == 21
        assert data["holiday_count"] == 2
        assert data["actual_working_days"] == 19

    async def test_holiday_management_requires_permission(self, api_client, staff):
        response = await api_client.post(
            "/api/v1/holidays",
            json={"name": "Company outing", "date": "2030-06-14", "type": "company"},
            headers=_auth(staff),
        )

        assert response.status_code == 403
        assert "holiday:manage" in response.json()["error"]["message"]

    async def test_overtime_self_service_then_approval(self, api_client, admin, employee_user):
        created = await api_client.post(
            "/api/v1/overtime",
            json={"date": "2030-03-04", "start_time": "17:00", "end_time": "19:00",
                  "reason": "Month-end close", "rate_multiplier": 5},
            headers=_auth(employee_user),
        )
        assert created.status_code == 201
        overtime = created.json()["data"]
        assert overtime["hours"] == 2.0
        # Only HR may set a custom multiplier
        assert overtime["rate_multiplier"] == 1.5

        denied = await api_client.post(f"/api/v1/overtime/{overtime['id']}/approve", headers=_auth(employee_user))
        assert denied.status_code == 403

        approved = await api_client.post(f"/api/v1/overtime/{overtime['id']}/approve", headers=_auth(admin))
        assert approved.status_code == 200
        assert approved.json()["data"]["status"] == "approved"

        mine = await api_client.get("/api/v1/overtime/me", headers=_auth(employee_user))
        assert mine.json()["pagination"]["total"] == 1

    async def test_overtime_clock_format_is_validated(self, api_client, employee_user):
        response = await api_client.post(
            "/api/v1/overtime",
            json={"date": "2030-03-04", "start_time": "25:00", "end_time": "19:00", "reason": "Close"},
            headers=_auth(employee_user),
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_document_upload_verify_and_completeness(self, api_client, admin, employee_user,
                                                          tmp_path, monkeypatch):
        from hris.core.config import settings

        monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
        created = await api_client.post(
            "/api/v1/documents/employee",
            json={"document_name": "KTP", "document_type": "ktp",
                  "file_path": str(tmp_path / "documents" / "abc_ktp.pdf")},
            headers=_auth(employee_user),
        )
        assert created.status_code == 201
        document = created.json()["data"]
        assert document["category"] == "employee"
        assert document["employee_id"] == employee_user.employee_id

        listing = await api_client.get("/api/v1/documents/employee", headers=_auth(employee_user))
        assert listing.status_code == 403

        denied = await api_client.post(f"/api/v1/documents/employee/{document['id']}/verify",
                                       headers=_auth(employee_user))
        assert denied.status_code == 403

        verified = await api_client.post(
            f"/api/v1/documents/employee/{document['id']}/verify",
            json={"verification_notes": "Checked against original"},
            headers=_auth(admin),
        )
        assert verified.json()["data"]["is_verified"] is True

        report = await api_client.get("/api/v1/documents/employee/me/completeness", headers=_auth(employee_user))
        assert report.json()["data"]["uploaded"] == 1
        assert report.json()["data"]["verified"] == 1

    async def test_employee_cannot_file_hr_letters(self, api_client, employee_user, tmp_path, monkeypatch):
        from hris.core.config import settings

        monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
        response = await api_client.post(
            "/api/v1/documents/employee",
            json={"document_name": "Warning", "document_type": "sp1",
                  "file_path": str(tmp_path / "documents" / "sp1.pdf")},
            headers=_auth(employee_user),
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "HR_DOCUMENT_TYPE"
