from typing import Any, Dict, Optional

from hris.client.http import ApiClient
from hris.client.pagination import Page


def unwrap(body: Any) -> Any:
    """Return the ``data`` member of a success envelope."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def page_params(page: int, limit: int, filters: Dict[str, Any]) -> Dict[str, Any]:
    return {"page": page, "limit": limit, **filters}


class BaseService:
    """Resource service: one coroutine per endpoint, one HTTP call each."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def _fetch(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return unwrap(await self.api.get(path, params=params))

    async def _fetch_page(self, path: str, params: Optional[Dict[str, Any]] = None) -> Page:
        return Page.from_body(await self.api.get(path, params=params) or {})

    async def _send(self, method: str, path: str, payload: Any = None) -> Any:
        return unwrap(await self.api.request(method, path, json=payload))


class CrudService(BaseService):
    """List/get/create/update/delete against one collection path."""

    path: str = ""

    async def list(self, page: int = 1, limit: int = 10, **filters) -> Page:
        return await self._fetch_page(self.path, page_params(page, limit, filters))

    async def get(self, item_id: int) -> dict:
        return await self._fetch(f"{self.path}/{item_id}")

    async def create(self, data: dict) -> dict:
        return await self._send("POST", self.path, data)

    async def update(self, item_id: int, data: dict) -> dict:
        return await self._send("PUT", f"{self.path}/{item_id}", data)

    async def delete(self, item_id: int) -> None:
        await self.api.delete(f"{self.path}/{item_id}")
