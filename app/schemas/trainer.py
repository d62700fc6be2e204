from datetime import datetime
from typing import Optional

from app.schemas.common import ApiDate, ApiModel, EntityId
from app.schemas.enums import PaymentStatus
from app.schemas.refs import TrainerRef


class TrainerRead(ApiModel):
    id: EntityId
    gym_id: Optional[EntityId] = None
    user_id: Optional[EntityId] = None
    first_name: str = ""
    last_name: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None
    specialties: Optional[list[str]] = None
    bio: Optional[str] = None
    price_per_session: Optional[float] = None
    monthly_addon_price: Optional[float] = None
    photo_url: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class TrainerSalaryConfig(ApiModel):
    id: Optional[EntityId] = None
    trainer_id: EntityId
    base_salary: float = 0
    per_member_incentive: float = 0
    effective_from: Optional[ApiDate] = None
    is_active: bool = True


class SalarySlipRead(ApiModel):
    id: EntityId
    gym_id: Optional[EntityId] = None
    trainer_id: EntityId
    month: int
    year: int
    base_salary: float = 0
    active_member_count: int = 0
    per_member_incentive: float = 0
    incentive_total: float = 0
    gross_salary: float = 0
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    paid_at: Optional[datetime] = None
    generated_at: Optional[datetime] = None
    trainer: Optional[TrainerRef] = None


class SalarySlipSummary(ApiModel):
    total_salary_payout: float = 0
    total_incentives: float = 0
    total_base_salary: float = 0
    slip_count: int = 0
