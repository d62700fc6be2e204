from datetime import datetime
from typing import Optional

from app.schemas.common import ApiDate, ApiModel, EntityId
from app.schemas.enums import Gender, MemberStatus
from app.schemas.subscription import SubscriptionRead


class MemberUser(ApiModel):
    id: Optional[EntityId] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


class MemberRead(ApiModel):
    id: EntityId
    gym_id: Optional[EntityId] = None
    user_id: Optional[EntityId] = None
    member_code: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    cnic: Optional[str] = None
    date_of_birth: Optional[ApiDate] = None
    gender: Optional[Gender] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    photo_url: Optional[str] = None
    status: MemberStatus = MemberStatus.ACTIVE
    notes: Optional[str] = None
    joined_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    subscriptions: Optional[list[SubscriptionRead]] = None
    user: Optional[MemberUser] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def contact_email(self) -> Optional[str]:
        return (self.user.email if self.user else None) or self.email

    @property
    def contact_phone(self) -> Optional[str]:
        return (self.user.phone_number if self.user else None) or self.phone


class MemberCard(ApiModel):
    id: Optional[EntityId] = None
    member_code: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    photo_url: Optional[str] = None
    status: Optional[MemberStatus] = None
    phone: Optional[str] = None
    joined_at: Optional[datetime] = None
    package_name: Optional[str] = None
    start_date: Optional[ApiDate] = None
    end_date: Optional[ApiDate] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
