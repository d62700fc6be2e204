from datetime import date

from app.schemas.package import PackageRead
from app.schemas.trainer import TrainerRead
from app.services.subscriptions import (
    build_subscription,
    default_renewal_start,
    subscription_end_date,
    subscription_total_price,
    trainer_addon_price,
)

GOLD = PackageRead(id=3, name="Gold", price=5000, duration_days=30, allows_trainer_addon=True)
BASIC = PackageRead(id=4, name="Basic", price=2000, duration_days=30, allows_trainer_addon=False)
TRAINER = TrainerRead(id=9, first_name="Omar", last_name="Ali", monthly_addon_price=1500)


def test_addon_only_when_package_allows_it():
    assert trainer_addon_price(GOLD, TRAINER) == 1500
    assert trainer_addon_price(BASIC, TRAINER) == 0
    assert trainer_addon_price(GOLD, None) == 0


def test_total_price():
    assert subscription_total_price(GOLD, TRAINER) == 6500
    assert subscription_total_price(BASIC, TRAINER) == 2000
    assert subscription_total_price(None, TRAINER) == 0


def test_end_date_adds_duration():
    assert subscription_end_date(date(2024, 1, 31), 30) == date(2024, 3, 1)


def test_renewal_start():
    today = date(2024, 3, 10)
    assert default_renewal_start(date(2024, 3, 20), today) == date(2024, 3, 20)
    assert default_renewal_start(date(2024, 3, 1), today) == date(2024, 3, 11)
    assert default_renewal_start(None, today) == date(2024, 3, 11)


def test_payload_splits_addon_from_price_paid():
    payload = build_subscription(7, 12, GOLD, TRAINER, date(2024, 1, 1), 6500, "first month").to_api()

    assert payload == {
        "gymId": 7,
        "memberId": 12,
        "packageId": 3,
        "trainerId": 9,
        "trainerAddonPrice": 1500,
        "pricePaid": 5000,
        "startDate": "2024-01-01",
        "endDate": "2024-01-31",
        "notes": "first month",
    }


def test_payload_without_trainer():
    payload = build_subscription(7, 12, BASIC, None, date(2024, 1, 1), 1800).to_api()
    assert payload["trainerId"] is None
    assert payload["trainerAddonPrice"] == 0
    assert payload["pricePaid"] == 1800
