import logging
from typing import AsyncGenerator, Callable, Optional

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.config import settings
from hris.core.logging_config import bind_user
from hris.core.security import decode_access_token
from hris.core.token_blacklist import is_token_blacklisted
from hris.db.session import AsyncSessionLocal
from hris.models.employee import Employee
from hris.models.user import User
from hris.schemas.auth import TokenPayload
from hris.services.pagination import PageParams

logger = logging.getLogger("hris.deps")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False)


async def get_db() -> AsyncGenerator:
    async with AsyncSessionLocal() as session:
        yield session


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
) -> User:
    """
    Resolve the authenticated user from the bearer token.

    Raises:
        HTTPException: 401 when the token is missing, revoked or invalid,
            403 when the account is disabled
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    if await is_token_blacklisted(token):
        raise credentials_exception

    try:
        payload = decode_access_token(token)
        if payload.get("sub") is None:
            raise credentials_exception
        token_data = TokenPayload(sub=payload.get("sub"))
    except (JWTError, ValueError):
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == token_data.sub))
    user = result.scalar_one_or_none()

    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )

    # Read by the rate limiter key function and the access log
    request.state.user = user
    bind_user(user.id)
    return user


async def get_current_employee(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Employee:
    """The employee record linked to the current user account."""
    if current_user.employee_id is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No employee record is linked to this account"
        )
    employee = await db.get(Employee, current_user.employee_id)
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee record not found"
        )
    return employee


def has_permission(user: User, *permissions: str) -> bool:
    """True if the user is a super admin or holds any of ``permissions``."""
    if user.is_super_admin:
        return True
    granted = set(user.permission_names)
    return any(p in granted for p in permissions)


def require_permission(*permissions: str) -> Callable:
    """
    Dependency factory that requires the user to have at least one of the specified permissions.

    Usage:
        @router.get("/protected")
        async def protected_route(
            current_user: User = Depends(require_permission("employee:read"))
        ):
            ...
    """
    async def permission_checker(
        current_user: User = Depends(get_current_user)
    ) -> User:
        if not has_permission(current_user, *permissions):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied. Required: {', '.join(permissions)}"
            )
        return current_user

    return permission_checker


def get_page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> PageParams:
    return PageParams(page=page, limit=limit)


def client_ip(request: Request) -> Optional[str]:
    forwarded_for = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if forwarded_for:
        return forwarded_for
    return request.client.host if request.client else None
