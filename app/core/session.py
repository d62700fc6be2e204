"""
Signed-cookie session holding the signed-in user and one-shot toast messages.

The session stores what the backend returned from ``POST /auth/login``
(token, user, profile) plus the role names decoded from the token.
"""
from typing import Iterable, Optional, Union

from fastapi import Request
from pydantic import BaseModel, ValidationError

from app.core.config import settings
from app.schemas.enums import UserRole


SESSION_KEY = "auth"
FLASH_KEY = "_flashes"


class SessionUser(BaseModel):
    id: Union[int, str]
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    isBlocked: bool = False


class SessionProfile(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    cnic: Optional[str] = None
    gymId: Optional[int] = None
    timeZone: Optional[str] = None


class AuthSession(BaseModel):
    token: str
    user: SessionUser
    profile: Optional[SessionProfile] = None
    roles: list[str] = []

    def has_role(self, roles: Iterable[UserRole]) -> bool:
        wanted = {role.claim for role in roles}
        return any(role in wanted for role in self.roles)

    @property
    def is_system_admin(self) -> bool:
        return UserRole.SYSTEM_ADMIN.claim in self.roles

    @property
    def is_admin(self) -> bool:
        return UserRole.ADMIN.claim in self.roles

    @property
    def is_staff(self) -> bool:
        return UserRole.STAFF.claim in self.roles

    @property
    def is_trainer(self) -> bool:
        return UserRole.TRAINER.claim in self.roles

    @property
    def is_member(self) -> bool:
        return UserRole.MEMBER.claim in self.roles

    @property
    def gym_id(self) -> Optional[int]:
        return self.profile.gymId if self.profile else None

    @property
    def time_zone(self) -> str:
        if self.profile and self.profile.timeZone:
            return self.profile.timeZone
        return settings.DEFAULT_TIMEZONE

    @property
    def first_name(self) -> str:
        return (self.profile.firstName if self.profile else None) or ""

    @property
    def display_name(self) -> str:
        if self.profile:
            name = f"{self.profile.firstName or ''} {self.profile.lastName or ''}".strip()
            if name:
                return name
        return self.user.email or ""


def load_session(request: Request) -> Optional[AuthSession]:
    data = request.session.get(SESSION_KEY)
    if not data:
        return None
    try:
        return AuthSession.model_validate(data)
    except ValidationError:
        request.session.pop(SESSION_KEY, None)
        return None


def store_session(request: Request, auth: AuthSession) -> None:
    request.session[SESSION_KEY] = auth.model_dump(mode="json")


def clear_session(request: Request) -> None:
    request.session.pop(SESSION_KEY, None)


def flash(request: Request, message: str, category: str = "success") -> None:
    """Queue a toast for the next rendered page"""
    messages = list(request.session.get(FLASH_KEY, []))
    messages.append({"category": category, "message": message})
    request.session[FLASH_KEY] = messages


def pop_flashes(request: Request) -> list[dict]:
    return request.session.pop(FLASH_KEY, [])
