"""
Async HTTP client for the HRIS API.

Wraps ``httpx.AsyncClient`` with:
- Bearer token injection from the session store
- Centralized error classification and user notification
- Session teardown and redirect to ``/login`` on 401

Auth endpoints never notify so the caller can render the error inline.
"""

import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

import httpx

from hris.client.config import client_settings
from hris.client.session import FileSessionStore, SessionStore

logger = logging.getLogger("hris.client")

Notifier = Callable[[str], None]
Navigator = Callable[[str], None]

AUTH_ENDPOINTS = ("/auth/login", "/auth/register", "/auth/forgot-password")
LOGIN_PATH = "/login"

SESSION_EXPIRED_MESSAGE = "Session expired. Please login again."
FORBIDDEN_MESSAGE = "You do not have permission to perform this action."
NOT_FOUND_MESSAGE = "Resource not found."
SERVER_ERROR_MESSAGE = "Server error. Please try again later."


class ApiError(Exception):
    """An API call failed. ``status_code`` is None for transport failures."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        errors: Optional[List[dict]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.errors = errors or []


class UnauthorizedError(ApiError):
    pass


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ServerError(ApiError):
    pass


def error_class_for(status_code: Optional[int]) -> type:
    if status_code == 401:
        return UnauthorizedError
    if status_code == 403:
        return ForbiddenError
    if status_code == 404:
        return NotFoundError
    if status_code is not None and status_code >= 500:
        return ServerError
    return ApiError


def log_notifier(message: str) -> None:
    logger.warning(message)


def log_navigator(path: str) -> None:
    logger.info(f"Navigating to {path}")


def default_session() -> SessionStore:
    if client_settings.HRIS_SESSION_FILE:
        return FileSessionStore(client_settings.HRIS_SESSION_FILE)
    return SessionStore()


def is_auth_endpoint(path: str) -> bool:
    return any(endpoint in path for endpoint in AUTH_ENDPOINTS)


def _query_value(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Drop unset query parameters."""
    if not params:
        return None
    return {key: _query_value(value) for key, value in params.items() if value is not None}


def _error_details(body: Any) -> tuple:
    """Pull (message, code, field errors) out of an error envelope."""
    if not isinstance(body, dict):
        return None, None, None
    error = body.get("error")
    if isinstance(error, dict):
        return error.get("message"), error.get("code"), error.get("errors")
    if isinstance(error, str):
        return error, None, None
    detail = body.get("detail")
    if isinstance(detail, str):
        return detail, None, None
    return body.get("message"), None, None


class ApiClient:
    """
    Shared HTTP client used by every client service.

    Navigation and notification are injected so the client can be driven
    from a CLI, a test or a UI shell alike.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[SessionStore] = None,
        notifier: Optional[Notifier] = None,
        navigator: Optional[Navigator] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or client_settings.api_url).rstrip("/")
        self.session = session if session is not None else default_session()
        self.notifier = notifier or log_notifier
        self.navigator = navigator or log_navigator
        self.timeout = timeout or client_settings.HRIS_REQUEST_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def notify(self, message: str) -> None:
        self.notifier(message)

    def _headers(self) -> Dict[str, str]:
        token = self.session.token
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body."""
        client = await self._get_client()
        try:
            response = await client.request(
                method,
                path,
                params=clean_params(params),
                json=json,
                files=files,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            self._raise_error(path, None, None, str(e) or e.__class__.__name__)

        body = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = None

        if response.is_error:
            self._raise_error(path, response.status_code, body, response.reason_phrase)
        return body

    def _raise_error(
        self, path: str, status_code: Optional[int], body: Any, fallback: Optional[str]
    ) -> None:
        message, code, errors = _error_details(body)
        message = message or fallback or "An error occurred"

        if not is_auth_endpoint(path):
            if status_code == 401:
                self.session.clear()
                self.navigator(LOGIN_PATH)
                self.notify(SESSION_EXPIRED_MESSAGE)
            elif status_code == 403:
                self.notify(FORBIDDEN_MESSAGE)
            elif status_code == 404:
                self.notify(NOT_FOUND_MESSAGE)
            elif status_code == 500:
                self.notify(SERVER_ERROR_MESSAGE)
            else:
                self.notify(message)

        raise error_class_for(status_code)(message, status_code, code, errors)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None, params: Optional[Dict[str, Any]] = None,
                   files: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", path, params=params, json=json, files=files)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("DELETE", path, params=params)
