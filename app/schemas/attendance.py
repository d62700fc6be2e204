from datetime import datetime
from typing import Optional

from app.schemas.common import ApiModel, EntityId
from app.schemas.refs import MemberRef


class AttendanceLogRead(ApiModel):
    id: EntityId
    gym_id: Optional[EntityId] = None
    member_id: Optional[EntityId] = None
    check_in_at: datetime
    check_out_at: Optional[datetime] = None
    checked_in_by: Optional[EntityId] = None
    device_info: Optional[str] = None
    member: Optional[MemberRef] = None

    @property
    def is_checked_in(self) -> bool:
        return self.check_out_at is None


class CheckInRequest(ApiModel):
    gym_id: EntityId
    member_id: EntityId
    checked_in_by: Optional[EntityId] = None
    device_info: Optional[str] = None


class AttendanceStats(ApiModel):
    total_check_ins: int = 0
    unique_members: int = 0
    average_per_day: float = 0
