from typing import Annotated, AsyncIterator, Optional

import httpx
from fastapi import Depends, HTTPException, Request, status

from app.core.config import settings
from app.core.http import ApiClient
from app.core.permissions import ACCESS_DENIED_MESSAGE, LOGIN_PATH, resolve_access
from app.core.session import AuthSession, load_session
from app.schemas.enums import UserRole


class RedirectRequired(Exception):
    """Raised by guards to send the browser somewhere else"""

    def __init__(self, url: str):
        super().__init__(url)
        self.url = url


def get_api_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport used by the backend client; tests override this with a mock"""
    return None


async def get_api(
    request: Request,
    transport: Annotated[Optional[httpx.AsyncBaseTransport], Depends(get_api_transport)],
) -> AsyncIterator[ApiClient]:
    auth = load_session(request)
    client = ApiClient(
        settings.API_BASE_URL,
        token=auth.token if auth else None,
        transport=transport,
        timeout=settings.API_TIMEOUT,
    )
    try:
        yield client
    finally:
        await client.aclose()


Api = Annotated[ApiClient, Depends(get_api)]


async def get_optional_session(request: Request) -> Optional[AuthSession]:
    return load_session(request)


async def get_current_session(request: Request) -> AuthSession:
    auth = load_session(request)
    if auth is None:
        raise RedirectRequired(LOGIN_PATH)
    return auth


CurrentSession = Annotated[AuthSession, Depends(get_current_session)]
OptionalSession = Annotated[Optional[AuthSession], Depends(get_optional_session)]


def require_roles(*roles: UserRole):
    async def role_checker(request: Request) -> AuthSession:
        auth = load_session(request)
        decision = resolve_access(request.url.path, auth, roles)

        if decision.redirect:
            raise RedirectRequired(decision.redirect)

        if decision.denied:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=ACCESS_DENIED_MESSAGE,
            )

        return auth

    return role_checker


BackOfficeSession = Annotated[AuthSession, Depends(require_roles(UserRole.ADMIN, UserRole.STAFF))]
AdminSession = Annotated[AuthSession, Depends(require_roles(UserRole.ADMIN))]
MemberSession = Annotated[AuthSession, Depends(require_roles(UserRole.MEMBER))]
TrainerSession = Annotated[AuthSession, Depends(require_roles(UserRole.TRAINER))]
