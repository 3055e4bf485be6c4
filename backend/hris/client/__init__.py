"""
Async Python client for the HRIS API.

    async with ApiClient() as api:
        services = Services(api)
        await services.auth.login("hr@example.com", "secret")
        page = await services.employees.list(limit=20)
"""

from hris.client.http import (
    ApiClient,
    ApiError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
)
from hris.client.pagination import Page, Pagination
from hris.client.services import Services
from hris.client.session import FileSessionStore, SessionStore

__all__ = [
    "ApiClient",
    "ApiError",
    "FileSessionStore",
    "ForbiddenError",
    "NotFoundError",
    "Page",
    "Pagination",
    "ServerError",
    "Services",
    "SessionStore",
    "UnauthorizedError",
]
