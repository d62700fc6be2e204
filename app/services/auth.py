import logging
from typing import Optional

from app.core.http import ApiError
from app.schemas.auth import LoginResponse
from app.schemas.forms import SignUpForm
from app.services.base import ApiService

logger = logging.getLogger(__name__)


class AuthService(ApiService):
    async def sign_in(self, email: str, password: str) -> LoginResponse:
        data = await self.api.post("/auth/login", json={"email": email, "password": password})
        return LoginResponse.model_validate(data)

    async def sign_up(self, form: SignUpForm) -> dict:
        return await self.api.post("/auth/signup", json=form.to_api())

    async def sign_out(self) -> None:
        try:
            await self.api.post("/auth/logout")
        except ApiError as e:
            # The local session is cleared regardless of the backend answer
            logger.info(f"Backend logout failed: {e.message}")

    async def reset_password(self, email: str, redirect_url: Optional[str] = None) -> dict:
        return await self.api.post("/auth/reset-password", json={"email": email, "redirectUrl": redirect_url})

    async def update_password(self, old_password: str, new_password: str) -> dict:
        return await self.api.post(
            "/auth/update-password",
            json={"oldPassword": old_password, "newPassword": new_password},
        )
