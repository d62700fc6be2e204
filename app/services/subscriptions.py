from datetime import date, timedelta
from typing import Optional

from app.schemas.common import EntityId
from app.schemas.enums import SubscriptionStatus
from app.schemas.package import PackageRead
from app.schemas.subscription import SubscriptionCreate, SubscriptionRead, SubscriptionUpdate
from app.schemas.trainer import TrainerRead
from app.services.base import ApiService


class SubscriptionService(ApiService):
    async def get_subscriptions_by_gym(self, gym_id: EntityId) -> list[SubscriptionRead]:
        return self._many(SubscriptionRead, await self.api.get(f"/memberSubscriptions/gym/{gym_id}"))

    async def get_subscriptions_by_member(self, member_id: EntityId) -> list[SubscriptionRead]:
        return self._many(SubscriptionRead, await self.api.get(f"/memberSubscriptions/member/{member_id}"))

    async def get_subscription(self, subscription_id: EntityId) -> Optional[SubscriptionRead]:
        return self._one(SubscriptionRead, await self.api.get(f"/memberSubscriptions/{subscription_id}"))

    async def get_active_subscription(self, member_id: EntityId) -> Optional[SubscriptionRead]:
        return self._one(SubscriptionRead, await self.api.get(f"/memberSubscriptions/member/{member_id}/active"))

    async def create_subscription(self, data: SubscriptionCreate) -> Optional[SubscriptionRead]:
        return self._one(SubscriptionRead, await self.api.post("/memberSubscriptions", json=data.to_api()))

    async def update_subscription(self, subscription_id: EntityId, data: SubscriptionUpdate) -> Optional[SubscriptionRead]:
        body = data.to_api(exclude_none=True)
        return self._one(SubscriptionRead, await self.api.put(f"/memberSubscriptions/{subscription_id}", json=body))

    async def cancel_subscription(self, subscription_id: EntityId) -> None:
        await self.api.patch(f"/memberSubscriptions/{subscription_id}/cancel")

    async def renew_subscription(self, old_subscription_id: EntityId, data: SubscriptionCreate) -> Optional[SubscriptionRead]:
        return self._one(
            SubscriptionRead,
            await self.api.post(f"/memberSubscriptions/renew/{old_subscription_id}", json=data.to_api()),
        )


def trainer_addon_price(package: Optional[PackageRead], trainer: Optional[TrainerRead]) -> float:
    if package is None or trainer is None or not package.allows_trainer_addon:
        return 0.0
    return float(trainer.monthly_addon_price or 0)


def subscription_total_price(package: Optional[PackageRead], trainer: Optional[TrainerRead]) -> float:
    """Package price plus the trainer's monthly add-on when the package allows one"""
    if package is None:
        return 0.0
    return float(package.price) + trainer_addon_price(package, trainer)


def subscription_end_date(start_date: date, duration_days: int) -> date:
    return start_date + timedelta(days=duration_days)


def default_renewal_start(old_end_date: Optional[date], today: date) -> date:
    """Continue from the old end date while it is still ahead, otherwise start tomorrow"""
    if old_end_date and old_end_date > today:
        return old_end_date
    return today + timedelta(days=1)


def build_subscription(
    gym_id: EntityId,
    member_id: EntityId,
    package: PackageRead,
    trainer: Optional[TrainerRead],
    start_date: date,
    total_price: float,
    notes: Optional[str] = None,
) -> SubscriptionCreate:
    """
    Subscription payload for a new or renewed membership.

    ``total_price`` is what the member pays including the trainer add-on;
    the backend stores the package part in ``pricePaid`` and the add-on in
    ``trainerAddonPrice``.
    """
    addon = trainer_addon_price(package, trainer)
    return SubscriptionCreate(
        gym_id=gym_id,
        member_id=member_id,
        package_id=package.id,
        trainer_id=trainer.id if trainer else None,
        trainer_addon_price=addon,
        price_paid=max(total_price - addon, 0.0),
        start_date=start_date,
        end_date=subscription_end_date(start_date, package.duration_days),
        notes=notes,
    )


def count_active(subscriptions: list[SubscriptionRead]) -> int:
    return sum(1 for s in subscriptions if s.status == SubscriptionStatus.ACTIVE)
