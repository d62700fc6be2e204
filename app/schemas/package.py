from datetime import datetime
from typing import Optional

from app.schemas.common import ApiModel, EntityId


class PackageRead(ApiModel):
    id: EntityId
    gym_id: Optional[EntityId] = None
    name: str
    description: Optional[str] = None
    price: float = 0
    duration_days: int = 0
    visits_limit: Optional[int] = None
    allows_trainer_addon: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
