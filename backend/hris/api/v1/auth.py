import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import client_ip, get_current_user, get_db, oauth2_scheme
from hris.core.audit import AuditLogger
from hris.core.config import settings
from hris.core.login_tracker import get_login_tracker
from hris.core.rate_limiter import RateLimits, limiter
from hris.core.security import (
    create_access_token,
    create_refresh_token,
    get_password_hash,
    get_refresh_token_expire_time,
    hash_refresh_token,
    verify_password,
)
from hris.core.token_blacklist import blacklist_token
from hris.models.refresh_token import RefreshToken as RefreshTokenModel
from hris.models.user import User
from hris.schemas.auth import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginData,
    LoginRequest,
    ResetPasswordRequest,
    TokenRefreshData,
    TokenRefreshRequest,
)
from hris.schemas.common import ApiResponse, MessageResponse, ok
from hris.schemas.user import UserDetail

logger = logging.getLogger("hris.auth")

router = APIRouter()

RESET_REQUESTED_MESSAGE = "If the email is registered, a password reset link has been sent."


def _login_key(email: str, request: Optional[Request]) -> str:
    """Lockout key: email + client IP."""
    ip = client_ip(request) if request else None
    return f"{email.lower()}::{ip or 'unknown'}"


async def _assert_not_locked(key: str) -> None:
    tracker = get_login_tracker()
    is_locked, remaining_seconds = await tracker.is_locked(key)
    if is_locked:
        remaining_minutes = (remaining_seconds // 60) + 1
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many login attempts. Try again in {remaining_minutes} minutes."
        )


async def _register_failed_attempt(key: str) -> None:
    tracker = get_login_tracker()
    attempt_count = await tracker.record_failed_attempt(key)

    if attempt_count >= settings.LOGIN_MAX_ATTEMPTS:
        await tracker.set_locked(key, settings.LOGIN_LOCKOUT_MINUTES * 60)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Account temporarily locked due to repeated failures. Please wait before retrying."
        )


def _validate_password_policy(password: str) -> None:
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long."
        )
    if settings.REQUIRE_SPECIAL_CHARS and not any(not c.isalnum() for c in password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Password must include at least one special character."
        )


def _issue_access_token(user: User) -> str:
    return create_access_token(
        subject=user.id,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def _store_refresh_token(db: AsyncSession, user_id: int, request: Optional[Request]) -> str:
    """Add a hashed refresh token to the session; the caller commits."""
    raw_token, token_hash = create_refresh_token()
    db.add(RefreshTokenModel(
        token_hash=token_hash,
        user_id=user_id,
        expires_at=get_refresh_token_expire_time(),
        device_info=request.headers.get("User-Agent", "")[:255] if request else None,
        ip_address=client_ip(request) if request else None,
    ))
    return raw_token


async def _revoke_all_user_tokens(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(RefreshTokenModel).where(
            RefreshTokenModel.user_id == user_id,
            RefreshTokenModel.revoked_at.is_(None)
        )
    )
    tokens = result.scalars().all()
    for token in tokens:
        token.revoke()
    return len(tokens)


@router.post("/login", response_model=ApiResponse[LoginData])
@limiter.limit(RateLimits.AUTH_LOGIN)
async def login(
    login_data: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Authenticate with email and password.

    Returns a short-lived access token and a rotating refresh token.
    """
    key = _login_key(login_data.email, request)
    await _assert_not_locked(key)

    result = await db.execute(select(User).where(User.email == login_data.email.lower()))
    user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning(f"Failed login for {login_data.email} from {client_ip(request)}")
        await _register_failed_attempt(key)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )

    user.last_login = datetime.utcnow()
    refresh_token = _store_refresh_token(db, user.id, request)
    AuditLogger.log(db, action="auth.login", user_id=user.id, username=user.email,
                    resource_type="user", resource_id=user.id, ip_address=client_ip(request))
    await db.commit()
    await get_login_tracker().reset(key)

    return ok({
        "user": UserDetail.model_validate(user),
        "token": _issue_access_token(user),
        "refreshToken": refresh_token,
        "expiresIn": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    }, message="Login successful")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    db: AsyncSession = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Blacklist the current access token and revoke all refresh tokens."""
    if token:
        expires_at = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        await blacklist_token(token, expires_at)

    revoked = await _revoke_all_user_tokens(db, current_user.id)
    await db.commit()
    logger.info(f"User {current_user.email} logged out; revoked {revoked} refresh tokens")
    return {"success": True, "message": "Successfully logged out"}


@router.get("/me", response_model=ApiResponse[UserDetail])
async def read_users_me(
    current_user: User = Depends(get_current_user),
) -> Any:
    return ok(current_user)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    payload: ChangePasswordRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    if not verify_password(payload.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )
    _validate_password_policy(payload.new_password)

    current_user.hashed_password = get_password_hash(payload.new_password)
    current_user.force_password_change = False
    AuditLogger.log(db, action="auth.change_password", user_id=current_user.id,
                    username=current_user.email, resource_type="user",
                    resource_id=current_user.id, ip_address=client_ip(request))
    await db.commit()
    return {"success": True, "message": "Password changed successfully"}


@router.post("/token/refresh", response_model=ApiResponse[TokenRefreshData])
@limiter.limit(RateLimits.AUTH_REFRESH)
async def token_refresh(
    refresh_request: TokenRefreshRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Exchange a refresh token for a new access token.

    The presented refresh token is revoked and a new one is issued.
    """
    token_hash = hash_refresh_token(refresh_request.refresh_token)
    result = await db.execute(
        select(RefreshTokenModel).where(RefreshTokenModel.token_hash == token_hash)
    )
    token_record = result.scalar_one_or_none()

    if not token_record:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not token_record.is_valid():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token has expired or been revoked",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await db.get(User, token_record.user_id)
    if not user or not user.is_active:
        token_record.revoke()
        await db.commit()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_record.revoke()
    new_refresh_token = _store_refresh_token(db, user.id, request)
    await db.commit()

    return ok({
        "token": _issue_access_token(user),
        "refreshToken": new_refresh_token,
        "expiresIn": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    })


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(RateLimits.AUTH_PASSWORD_RESET)
async def forgot_password(
    payload: ForgotPasswordRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Issue a password reset token.

    The response is identical whether or not the email exists.
    """
    result = await db.execute(select(User).where(User.email == payload.email.lower()))
    user = result.scalar_one_or_none()

    if user and user.is_active:
        raw_token, token_hash = create_refresh_token()
        user.password_reset_token_hash = token_hash
        user.password_reset_expires_at = datetime.utcnow() + timedelta(
            minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES
        )
        await db.commit()
        logger.info(f"Password reset token issued for user {user.id}")
        # No mail transport is configured; the raw token is only visible in debug logs.
        if settings.DEBUG:
            logger.debug(f"Password reset token for user {user.id}: {raw_token}")
    else:
        logger.info(f"Password reset requested for unknown email from {client_ip(request)}")

    return {"success": True, "message": RESET_REQUESTED_MESSAGE}


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit(RateLimits.AUTH_PASSWORD_RESET)
async def reset_password(
    payload: ResetPasswordRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Any:
    result = await db.execute(
        select(User).where(User.password_reset_token_hash == hash_refresh_token(payload.token))
    )
    user = result.scalar_one_or_none()

    if (
        user is None
        or user.password_reset_expires_at is None
        or user.password_reset_expires_at < datetime.utcnow()
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset token"
        )

    _validate_password_policy(payload.new_password)
    user.hashed_password = get_password_hash(payload.new_password)
    user.password_reset_token_hash = None
    user.password_reset_expires_at = None
    user.force_password_change = False
    await _revoke_all_user_tokens(db, user.id)
    AuditLogger.log(db, action="auth.reset_password", user_id=user.id, username=user.email,
                    resource_type="user", resource_id=user.id, ip_address=client_ip(request))
    await db.commit()
    return {"success": True, "message": "Password has been reset. Please log in."}
