from typing import List, Optional

from hris.client.services.base import BaseService


class RbacService(BaseService):
    """Roles, permissions and user-role assignment."""

    async def list_roles(self) -> List[dict]:
        return await self._fetch("/rbac/roles")

    async def get_role(self, role_id: int) -> dict:
        return await self._fetch(f"/rbac/roles/{role_id}")

    async def create_role(self, data: dict) -> dict:
        return await self._send("POST", "/rbac/roles", data)

    async def update_role(self, role_id: int, data: dict) -> dict:
        return await self._send("PUT", f"/rbac/roles/{role_id}", data)

    async def delete_role(self, role_id: int) -> None:
        await self.api.delete(f"/rbac/roles/{role_id}")

    async def list_permissions(self) -> List[dict]:
        return await self._fetch("/rbac/permissions")

    async def permission_groups(self) -> List[dict]:
        return await self._fetch("/rbac/permissions/groups")

    async def assign_permissions(self, role_id: int, permission_ids: List[int]) -> dict:
        return await self._send(
            "POST", "/rbac/roles/assign-permissions", {"roleId": role_id, "permissionIds": permission_ids}
        )

    async def user_roles(self, user_id: int) -> List[dict]:
        return await self._fetch(f"/rbac/users/{user_id}/roles")

    async def assign_roles(self, user_id: int, role_ids: List[int]) -> List[dict]:
        return await self._send("POST", "/rbac/users/assign-roles", {"userId": user_id, "roleIds": role_ids})

    async def user_permissions(self, user_id: int) -> List[str]:
        return await self._fetch(f"/rbac/users/{user_id}/permissions")

    async def check_permission(self, user_id: int, permission: str) -> bool:
        result = await self._fetch(f"/rbac/check/{user_id}/{permission}")
        return bool(result.get("hasPermission"))

    async def seed(self) -> Optional[dict]:
        return await self._send("POST", "/rbac/seed")
