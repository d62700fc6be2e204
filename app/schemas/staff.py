from typing import Optional

from app.schemas.common import ApiModel, EntityId


class StaffRead(ApiModel):
    id: EntityId
    gym_id: Optional[EntityId] = None
    user_id: Optional[EntityId] = None
    first_name: str = ""
    last_name: str = ""
    cnic: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    photo_url: Optional[str] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
