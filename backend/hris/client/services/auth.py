from typing import Optional

from hris.client.services.base import BaseService, unwrap


class AuthService(BaseService):
    """Login, session and own-account operations."""

    async def login(self, email: str, password: str) -> dict:
        """Authenticate and store the access token and user in the session."""
        data = unwrap(await self.api.post("/auth/login", json={"email": email, "password": password}))
        self.api.session.save_login(data["token"], data["user"])
        if data.get("refreshToken"):
            self.api.session.set("refreshToken", data["refreshToken"])
        return data

    async def logout(self) -> None:
        try:
            await self.api.post("/auth/logout")
        finally:
            self.api.session.clear()
            self.api.session.remove("refreshToken")

    async def me(self) -> dict:
        user = await self._fetch("/auth/me")
        self.api.session.set("user", user)
        return user

    async def refresh(self, refresh_token: Optional[str] = None) -> dict:
        token = refresh_token or self.api.session.get("refreshToken")
        data = unwrap(await self.api.post("/auth/token/refresh", json={"refresh_token": token}))
        self.api.session.set("token", data["token"])
        self.api.session.set("refreshToken", data["refreshToken"])
        return data

    async def change_password(self, current_password: str, new_password: str) -> None:
        await self.api.post(
            "/auth/change-password",
            json={"current_password": current_password, "new_password": new_password},
        )

    async def forgot_password(self, email: str) -> str:
        body = await self.api.post("/auth/forgot-password", json={"email": email})
        return body.get("message", "")

    async def reset_password(self, token: str, new_password: str) -> None:
        await self.api.post("/auth/reset-password", json={"token": token, "new_password": new_password})
