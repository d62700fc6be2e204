from typing import Optional

from app.schemas.common import ApiModel, EntityId


class GymRead(ApiModel):
    id: EntityId
    name: str = ""
    logo: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    time_zone: Optional[str] = None
