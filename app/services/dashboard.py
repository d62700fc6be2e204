from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from app.schemas.attendance import AttendanceLogRead
from app.schemas.enums import MemberStatus
from app.schemas.member import MemberRead
from app.schemas.subscription import SubscriptionRead
from app.services.subscriptions import count_active
from app.utils.dates import as_utc

RECENT_ATTENDANCE_ITEMS = 3
RECENT_SUBSCRIPTION_ITEMS = 2
RECENT_ACTIVITY_LIMIT = 5


@dataclass
class DashboardKpis:
    total_members: int
    active_subscriptions: int
    check_ins_today: int
    monthly_revenue: int


@dataclass
class ActivityItem:
    title: str
    description: str
    status: str
    occurred_at: Optional[datetime]


def compute_kpis(
    members: list[MemberRead],
    subscriptions: list[SubscriptionRead],
    today_logs: list[AttendanceLogRead],
    monthly_revenue: float,
) -> DashboardKpis:
    return DashboardKpis(
        total_members=sum(1 for m in members if m.status == MemberStatus.ACTIVE),
        active_subscriptions=count_active(subscriptions),
        check_ins_today=len(today_logs),
        monthly_revenue=round(monthly_revenue or 0),
    )


def _member_name(member) -> str:
    return member.full_name if member else "Unknown member"


def recent_activity(logs: list[AttendanceLogRead], subscriptions: list[SubscriptionRead]) -> list[ActivityItem]:
    """
    Latest attendance and subscription events, newest first.

    Takes the first few attendance logs and subscriptions as returned by the
    backend, merges them and keeps the five most recent.
    """
    items: list[ActivityItem] = []

    for log in logs[:RECENT_ATTENDANCE_ITEMS]:
        if log.check_out_at:
            items.append(ActivityItem("Checked Out", _member_name(log.member), "inactive", as_utc(log.check_out_at)))
        else:
            items.append(ActivityItem("Checked In", _member_name(log.member), "active", as_utc(log.check_in_at)))

    for subscription in subscriptions[:RECENT_SUBSCRIPTION_ITEMS]:
        package_name = subscription.package.name if subscription.package and subscription.package.name else "Package"
        occurred = as_utc(subscription.created_at) if subscription.created_at else None
        if occurred is None and subscription.start_date:
            occurred = as_utc(datetime.combine(subscription.start_date, datetime.min.time()))
        items.append(
            ActivityItem(
                "Subscription Created",
                f"{_member_name(subscription.member)} - {package_name}",
                "success",
                occurred,
            )
        )

    epoch = as_utc(datetime(1970, 1, 1))
    items.sort(key=lambda item: item.occurred_at or epoch, reverse=True)
    return items[:RECENT_ACTIVITY_LIMIT]
