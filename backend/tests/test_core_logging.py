"""
Tests for hris/core/logging_config.py - request and user ids on every log line.
"""
import json
import logging
from types import SimpleNamespace

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient


def _record(message="hello", **extra):
    record = logging.LogRecord("hris.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def context_app():
    from hris.core.logging_config import RequestLoggingMiddleware, bind_user

    app = FastAPI()

    @app.get("/whoami")
    async def whoami(request: Request):
        request.state.user = SimpleNamespace(id=7)
        bind_user(7)
        logging.getLogger("hris.test").info("inside handler")
        return {"request_id": request.state.request_id}

    app.add_middleware(RequestLoggingMiddleware)
    return app


class TestFormatters:
    def test_filter_copies_context(self):
        from hris.core.logging_config import RequestContextFilter, request_id_var, user_id_var

        request_token = request_id_var.set("r-1")
        user_token = user_id_var.set(42)
        try:
            record = _record()
            RequestContextFilter().filter(record)
        finally:
            user_id_var.reset(user_token)
            request_id_var.reset(request_token)

        assert (record.request_id, record.user_id) == ("r-1", 42)

    def test_filter_keeps_explicit_values(self):
        from hris.core.logging_config import RequestContextFilter

        record = _record(request_id="given", user_id=5)
        RequestContextFilter().filter(record)

        assert (record.request_id, record.user_id) == ("given", 5)

    def test_json_puts_ids_at_top_level(self):
        from hris.core.logging_config import JSONFormatter

        line = json.loads(JSONFormatter().format(_record(request_id="r-1", user_id=42, path="/api/v1/leaves")))

        assert line["request_id"] == "r-1"
        assert line["user_id"] == 42
        assert line["extra"] == {"path": "/api/v1/leaves"}

    def test_json_without_request(self):
        from hris.core.logging_config import JSONFormatter

        line = json.loads(JSONFormatter().format(_record()))

        assert line["request_id"] is None
        assert "extra" not in line

    def test_console_shows_request_and_user(self):
        from hris.core.logging_config import ColoredFormatter

        text = ColoredFormatter().format(_record("approved", request_id="r-1", user_id=None))

        assert "[r-1 user=-] approved" in text


class TestRequestLoggingMiddleware:
    async def test_request_id_header_and_user_on_access_line(self, context_app, caplog):
        from hris.core.logging_config import RequestContextFilter

        caplog.handler.addFilter(RequestContextFilter())
        caplog.set_level(logging.INFO)
        async with AsyncClient(transport=ASGITransport(app=context_app), base_url="http://test") as client:
            response = await client.get("/whoami")

        request_id = response.headers["x-request-id"]
        assert response.json() == {"request_id": request_id}

        inside = next(r for r in caplog.records if r.getMessage() == "inside handler")
        assert (inside.request_id, inside.user_id) == (request_id, 7)
        access = next(r for r in caplog.records if r.name == "hris.http")
        assert access.path == "/whoami"
        assert (access.request_id, access.user_id, access.status) == (request_id, 7, 200)

    async def test_upstream_request_id_is_kept(self, context_app):
        async with AsyncClient(transport=ASGITransport(app=context_app), base_url="http://test") as client:
            kept = await client.get("/whoami", headers={"X-Request-ID": "lb-123"})
            replaced = await client.get("/whoami", headers={"X-Request-ID": "bad id with spaces"})

        assert kept.headers["x-request-id"] == "lb-123"
        assert replaced.headers["x-request-id"] != "bad id with spaces"

    async def test_context_is_cleared_after_the_request(self, context_app):
        from hris.core.logging_config import request_id_var, user_id_var

        async with AsyncClient(transport=ASGITransport(app=context_app), base_url="http://test") as client:
            await client.get("/whoami")

        assert request_id_var.get() is None
        assert user_id_var.get() is None
