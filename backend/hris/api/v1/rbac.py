from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import get_current_user, get_db, has_permission, require_permission
from hris.models.user import User
from hris.schemas.common import ApiResponse, MessageResponse, ok
from hris.schemas.rbac import (
    AssignPermissionsRequest,
    AssignRolesRequest,
    PermissionCheckResult,
    PermissionGroup,
    PermissionOut,
    RoleCreate,
    RoleOut,
    RoleUpdate,
)
from hris.schemas.user import RoleSummary
from hris.services.user_service import RbacService, UserService

router = APIRouter()


@router.get("/roles", response_model=ApiResponse[List[RoleOut]])
async def list_roles(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("role:manage", "user:read")),
) -> Any:
    return ok(await RbacService(db).list_roles())


@router.get("/roles/{role_id}", response_model=ApiResponse[RoleOut])
async def get_role(
    role_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("role:manage", "user:read")),
) -> Any:
    return ok(await RbacService(db).get_role(role_id))


@router.post("/roles", response_model=ApiResponse[RoleOut], status_code=201)
async def create_role(
    payload: RoleCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("role:manage")),
) -> Any:
    role = await RbacService(db).create_role(
        payload.name, payload.display_name, payload.description, payload.level, payload.permission_ids
    )
    return ok(role, message="Role created")


@router.put("/roles/{role_id}", response_model=ApiResponse[RoleOut])
async def update_role(
    role_id: int,
    payload: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("role:manage")),
) -> Any:
    role = await RbacService(db).update_role(role_id, payload.model_dump(exclude_unset=True))
    return ok(role, message="Role updated")


@router.delete("/roles/{role_id}", response_model=MessageResponse)
async def delete_role(
    role_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("role:manage")),
) -> Any:
    await RbacService(db).delete_role(role_id)
    return {"success": True, "message": "Role deleted"}


@router.post("/roles/assign-permissions", response_model=ApiResponse[RoleOut])
async def assign_role_permissions(
    payload: AssignPermissionsRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("role:manage")),
) -> Any:
    role = await RbacService(db).assign_permissions(payload.role_id, payload.permission_ids)
    return ok(role, message="Permissions updated")


@router.get("/permissions", response_model=ApiResponse[List[PermissionOut]])
async def list_permissions(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("role:manage", "user:read")),
) -> Any:
    return ok(await RbacService(db).list_permissions())


@router.get("/permissions/groups", response_model=ApiResponse[List[PermissionGroup]])
async def list_permission_groups(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("role:manage", "user:read")),
) -> Any:
    return ok(await RbacService(db).permission_groups())


@router.get("/users/{user_id}/roles", response_model=ApiResponse[List[RoleSummary]])
async def get_user_roles(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("role:manage", "user:read")),
) -> Any:
    user = await UserService(db).get(user_id)
    return ok(user.roles)


@router.post("/users/assign-roles", response_model=ApiResponse[List[RoleSummary]])
async def assign_user_roles(
    payload: AssignRolesRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("role:manage")),
) -> Any:
    user = await RbacService(db).assign_user_roles(payload.user_id, payload.role_ids)
    return ok(user.roles, message="Roles updated")


@router.get("/users/{user_id}/permissions", response_model=ApiResponse[List[str]])
async def get_user_permissions(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("role:manage", "user:read")),
) -> Any:
    user = await UserService(db).get(user_id)
    return ok(sorted(user.permission_names))


@router.get("/check/{user_id}/{permission_name}", response_model=ApiResponse[PermissionCheckResult])
async def check_permission(
    user_id: int,
    permission_name: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Whether a user holds a permission; users may always check themselves."""
    if user_id != current_user.id and not has_permission(current_user, "role:manage", "user:read"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Permission denied. Required: role:manage, user:read"
        )
    user = current_user if user_id == current_user.id else await UserService(db).get(user_id)
    return ok({
        "user_id": user.id,
        "permission": permission_name,
        "hasPermission": has_permission(user, permission_name),
    })


@router.post("/seed", response_model=ApiResponse[dict])
async def seed_rbac(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("role:manage")),
) -> Any:
    return ok(await RbacService(db).seed_defaults(), message="Default roles and permissions seeded")
