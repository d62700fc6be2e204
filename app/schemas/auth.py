from typing import Optional

from app.core.session import SessionProfile, SessionUser
from app.schemas.common import ApiModel


class LoginResponse(ApiModel):
    token: str
    user: SessionUser
    profile: Optional[SessionProfile] = None
