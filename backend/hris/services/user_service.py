"""User account administration and role-based access control."""

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.exceptions import BusinessRuleError, ConflictError, NotFoundError
from hris.core.permissions import DEFAULT_PERMISSIONS, DEFAULT_ROLES
from hris.core.security import get_password_hash
from hris.models.user import Permission, Role, User, user_roles
from hris.schemas.user import UserCreate, UserUpdate
from hris.services.pagination import PageParams, apply_updates, paginate

logger = logging.getLogger("hris.users")

RECENT_LOGIN_DAYS = 7


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: int) -> User:
        user = await self.db.get(User, user_id, populate_existing=True)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    async def list(
        self,
        params: PageParams,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        role: Optional[str] = None,
        company_id: Optional[int] = None,
    ) -> Tuple[List[User], int]:
        query = select(User)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(User.email.ilike(pattern), User.full_name.ilike(pattern)))
        if is_active is not None:
            query = query.where(User.is_active == is_active)
        if role:
            query = query.join(user_roles, user_roles.c.user_id == User.id).join(
                Role, Role.id == user_roles.c.role_id
            ).where(Role.name == role)
        if company_id is not None:
            query = query.where(User.company_id == company_id)
        return await paginate(self.db, query.order_by(User.created_at.desc(), User.id.desc()), params)

    async def create(self, data: UserCreate, min_password_length: int) -> User:
        if await self.get_by_email(data.email):
            raise ConflictError("Email already registered")
        _check_password(data.password, min_password_length)

        user = User(
            email=data.email.lower(),
            hashed_password=get_password_hash(data.password),
            full_name=data.full_name,
            is_active=data.is_active,
            force_password_change=data.force_password_change,
            employee_id=data.employee_id,
            company_id=data.company_id,
        )
        user.roles = await self._load_roles(data.role_ids)
        self.db.add(user)
        await self.db.commit()
        logger.info(f"User {user.email} created with roles {user.role_names}")
        return await self.get(user.id)

    async def update(self, user_id: int, data: UserUpdate, min_password_length: int) -> User:
        user = await self.get(user_id)
        changes = data.model_dump(exclude_unset=True)

        role_ids = changes.pop("role_ids", None)
        password = changes.pop("password", None)

        if "email" in changes and changes["email"]:
            existing = await self.get_by_email(changes["email"])
            if existing is not None and existing.id != user_id:
                raise ConflictError("Email already registered")
            changes["email"] = changes["email"].lower()

        if password:
            _check_password(password, min_password_length)
            user.hashed_password = get_password_hash(password)

        apply_updates(user, changes)
        if role_ids is not None:
            user.roles = await self._load_roles(role_ids)

        await self.db.commit()
        return await self.get(user_id)

    async def delete(self, user_id: int, actor: User) -> None:
        if user_id == actor.id:
            raise BusinessRuleError("You cannot delete your own account")
        user = await self.get(user_id)
        await self.db.delete(user)
        await self.db.commit()

    async def toggle_status(self, user_id: int, actor: User) -> User:
        if user_id == actor.id:
            raise BusinessRuleError("You cannot deactivate your own account")
        user = await self.get(user_id)
        user.is_active = not user.is_active
        await self.db.commit()
        logger.info(f"User {user.email} is_active={user.is_active}")
        return await self.get(user_id)

    async def stats(self) -> Dict:
        total = (await self.db.execute(select(func.count(User.id)))).scalar() or 0
        active = (
            await self.db.execute(select(func.count(User.id)).where(User.is_active.is_(True)))
        ).scalar() or 0
        since = datetime.utcnow() - timedelta(days=RECENT_LOGIN_DAYS)
        recent = (
            await self.db.execute(select(func.count(User.id)).where(User.last_login >= since))
        ).scalar() or 0
        distribution = await self.db.execute(
            select(Role.name, func.count(user_roles.c.user_id))
            .select_from(Role)
            .outerjoin(user_roles, user_roles.c.role_id == Role.id)
            .group_by(Role.name)
            .order_by(Role.name)
        )
        return {
            "total": total,
            "active": active,
            "inactive": total - active,
            "recentLogins": recent,
            "roleDistribution": [{"role": name, "count": count} for name, count in distribution.all()],
        }

    async def _load_roles(self, role_ids: Sequence[int]) -> List[Role]:
        if not role_ids:
            return []
        result = await self.db.execute(select(Role).where(Role.id.in_(role_ids)))
        roles = list(result.scalars().all())
        missing = set(role_ids) - {role.id for role in roles}
        if missing:
            raise NotFoundError(f"Roles not found: {sorted(missing)}")
        return roles


def _check_password(password: str, min_length: int) -> None:
    if len(password) < min_length:
        raise BusinessRuleError(
            f"Password must be at least {min_length} characters long.",
            errors=[{"field": "password", "message": f"Minimum length is {min_length}"}],
        )


class RbacService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_roles(self) -> List[Role]:
        result = await self.db.execute(select(Role).order_by(Role.level.desc(), Role.name))
        return list(result.scalars().all())

    async def get_role(self, role_id: int) -> Role:
        role = await self.db.get(Role, role_id, populate_existing=True)
        if role is None:
            raise NotFoundError(f"Role {role_id} not found")
        return role

    async def create_role(self, name: str, display_name: Optional[str], description: Optional[str],
                          level: int, permission_ids: Sequence[int]) -> Role:
        existing = await self.db.execute(select(Role).where(Role.name == name))
        if existing.scalar_one_or_none():
            raise ConflictError(f"Role '{name}' already exists")
        role = Role(name=name, display_name=display_name, description=description, level=level, is_system=False)
        role.permissions = await self._load_permissions(permission_ids)
        self.db.add(role)
        await self.db.commit()
        return await self.get_role(role.id)

    async def update_role(self, role_id: int, changes: dict) -> Role:
        role = await self.get_role(role_id)
        apply_updates(role, changes)
        await self.db.commit()
        return await self.get_role(role_id)

    async def delete_role(self, role_id: int) -> None:
        role = await self.get_role(role_id)
        if role.is_system:
            raise BusinessRuleError("System roles cannot be deleted", code="SYSTEM_ROLE")
        await self.db.delete(role)
        await self.db.commit()

    async def list_permissions(self) -> List[Permission]:
        result = await self.db.execute(select(Permission).order_by(Permission.group, Permission.name))
        return list(result.scalars().all())

    async def permission_groups(self) -> List[Dict]:
        groups: Dict[str, List[Permission]] = {}
        for permission in await self.list_permissions():
            groups.setdefault(permission.group or "other", []).append(permission)
        return [{"group": group, "permissions": perms} for group, perms in groups.items()]

    async def assign_permissions(self, role_id: int, permission_ids: Sequence[int]) -> Role:
        role = await self.get_role(role_id)
        role.permissions = await self._load_permissions(permission_ids)
        await self.db.commit()
        logger.info(f"Role {role.name} now has {len(role.permissions)} permissions")
        return await self.get_role(role_id)

    async def assign_user_roles(self, user_id: int, role_ids: Sequence[int]) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        user.roles = await UserService(self.db)._load_roles(role_ids)
        await self.db.commit()
        return await UserService(self.db).get(user_id)

    async def seed_defaults(self) -> Dict[str, int]:
        """Create the built-in permissions and roles that are missing."""
        result = await self.db.execute(select(Permission))
        permissions = {perm.name: perm for perm in result.scalars().all()}
        created_permissions = 0
        for name, group, description in DEFAULT_PERMISSIONS:
            if name not in permissions:
                permissions[name] = Permission(name=name, group=group, description=description,
                                               display_name=description)
                self.db.add(permissions[name])
                created_permissions += 1

        result = await self.db.execute(select(Role))
        roles = {role.name: role for role in result.scalars().all()}
        created_roles = 0
        for name, (display_name, level, permission_names) in DEFAULT_ROLES.items():
            if name in roles:
                continue
            names = permission_names if permission_names is not None else list(permissions)
            role = Role(name=name, display_name=display_name, level=level, is_system=True)
            role.permissions = [permissions[p] for p in names]
            self.db.add(role)
            created_roles += 1

        await self.db.commit()
        logger.info(f"Seeded RBAC defaults: permissions={created_permissions} roles={created_roles}")
        return {"permissions": created_permissions, "roles": created_roles}

    async def _load_permissions(self, permission_ids: Sequence[int]) -> List[Permission]:
        if not permission_ids:
            return []
        result = await self.db.execute(select(Permission).where(Permission.id.in_(permission_ids)))
        permissions = list(result.scalars().all())
        missing = set(permission_ids) - {perm.id for perm in permissions}
        if missing:
            raise NotFoundError(f"Permissions not found: {sorted(missing)}")
        return permissions
