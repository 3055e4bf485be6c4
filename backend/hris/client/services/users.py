from hris.client.services.base import CrudService


class UserService(CrudService):
    path = "/users"

    async def toggle_status(self, user_id: int) -> dict:
        return await self._send("PATCH", f"/users/{user_id}/toggle-status")

    async def stats(self) -> dict:
        return await self._fetch("/users/stats")
