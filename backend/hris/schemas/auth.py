from typing import Optional
from pydantic import BaseModel, EmailStr

from hris.schemas.user import UserDetail


class TokenPayload(BaseModel):
    sub: Optional[int] = None
    exp: Optional[int] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginData(BaseModel):
    user: UserDetail
    token: str
    refreshToken: str
    expiresIn: int


class TokenRefreshRequest(BaseModel):
    refresh_token: str


class TokenRefreshData(BaseModel):
    token: str
    refreshToken: str
    expiresIn: int


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str
