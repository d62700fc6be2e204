from typing import Optional

from app.schemas.common import ApiModel, EntityId


class MemberRef(ApiModel):
    id: Optional[EntityId] = None
    member_code: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    photo_url: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class PackageRef(ApiModel):
    id: Optional[EntityId] = None
    name: Optional[str] = None
    price: Optional[float] = None
    duration_days: Optional[int] = None


class TrainerRef(ApiModel):
    id: Optional[EntityId] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class AccountRef(ApiModel):
    id: Optional[EntityId] = None
    account_name: Optional[str] = None
    account_type: Optional[str] = None


class CategoryRef(ApiModel):
    id: Optional[EntityId] = None
    name: Optional[str] = None
