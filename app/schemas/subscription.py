from datetime import datetime
from typing import Optional

from app.schemas.common import ApiDate, ApiModel, EntityId
from app.schemas.enums import SubscriptionStatus
from app.schemas.refs import MemberRef, PackageRef, TrainerRef


class SubscriptionRead(ApiModel):
    id: EntityId
    gym_id: Optional[EntityId] = None
    member_id: Optional[EntityId] = None
    package_id: Optional[EntityId] = None
    trainer_id: Optional[EntityId] = None
    start_date: Optional[ApiDate] = None
    end_date: Optional[ApiDate] = None
    price_paid: float = 0
    trainer_addon_price: float = 0
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    member: Optional[MemberRef] = None
    package: Optional[PackageRef] = None
    trainer: Optional[TrainerRef] = None

    @property
    def total_price(self) -> float:
        return (self.price_paid or 0) + (self.trainer_addon_price or 0)


class SubscriptionCreate(ApiModel):
    gym_id: EntityId
    member_id: EntityId
    package_id: EntityId
    trainer_id: Optional[EntityId] = None
    trainer_addon_price: float = 0
    price_paid: float
    start_date: ApiDate
    end_date: ApiDate
    notes: Optional[str] = None


class SubscriptionUpdate(ApiModel):
    status: Optional[SubscriptionStatus] = None
    end_date: Optional[ApiDate] = None
    notes: Optional[str] = None
