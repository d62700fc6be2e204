"""
Report figures computed from lists already fetched from the backend.
"""
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from app.schemas.account import IncomeExpenseSummary
from app.schemas.attendance import AttendanceLogRead
from app.schemas.enums import InvoiceStatus, MemberStatus
from app.schemas.invoice import COLLECTED_STATUSES, OUTSTANDING_STATUSES, InvoiceRead
from app.schemas.member import MemberRead
from app.schemas.trainer import TrainerRead
from app.utils.dates import as_utc, local_date, month_end, month_start

ATTENDANCE_WINDOW_DAYS = 30
REVENUE_MONTHS = 6
ATTENDANCE_TREND_DAYS = 7


@dataclass
class ReportsOverview:
    total_revenue: float = 0
    total_members: int = 0
    active_members: int = 0
    pending_invoices: int = 0
    total_attendance: int = 0
    active_trainers: int = 0
    revenue_by_month: list[dict] = field(default_factory=list)
    member_status: list[dict] = field(default_factory=list)
    attendance_by_day: list[dict] = field(default_factory=list)


def _net(invoices: Iterable[InvoiceRead]) -> float:
    return sum(float(inv.net_amount or 0) for inv in invoices)


def collected_total(invoices: Iterable[InvoiceRead]) -> float:
    return _net(inv for inv in invoices if inv.status in COLLECTED_STATUSES)


def outstanding_total(invoices: Iterable[InvoiceRead]) -> float:
    return _net(inv for inv in invoices if inv.status in OUTSTANDING_STATUSES)


def reports_overview(
    invoices: list[InvoiceRead],
    members: list[MemberRead],
    logs: list[AttendanceLogRead],
    trainers: list[TrainerRead],
    now: Optional[datetime] = None,
) -> ReportsOverview:
    now = as_utc(now or datetime.now(timezone.utc))
    window_start = now - timedelta(days=ATTENDANCE_WINDOW_DAYS)
    recent_logs = [log for log in logs if as_utc(log.check_in_at) >= window_start]

    def count_status(status: MemberStatus) -> int:
        return sum(1 for m in members if m.status == status)

    overview = ReportsOverview(
        total_revenue=collected_total(invoices),
        total_members=len(members),
        active_members=count_status(MemberStatus.ACTIVE),
        pending_invoices=sum(1 for inv in invoices if inv.status == InvoiceStatus.PENDING),
        total_attendance=len(recent_logs),
        active_trainers=sum(1 for t in trainers if t.is_active),
    )

    today = now.date()
    for offset in range(REVENUE_MONTHS - 1, -1, -1):
        month = month_start(today) - relativedelta(months=offset)
        revenue = _net(
            inv for inv in invoices
            if inv.status in COLLECTED_STATUSES
            and inv.created_at is not None
            and month_start(as_utc(inv.created_at).date()) == month
        )
        overview.revenue_by_month.append({"month": month.strftime("%b"), "revenue": revenue})

    overview.member_status = [
        {"name": "Active", "value": overview.active_members},
        {"name": "Inactive", "value": count_status(MemberStatus.INACTIVE)},
        {"name": "Suspended", "value": count_status(MemberStatus.SUSPENDED)},
    ]

    for offset in range(ATTENDANCE_TREND_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        count = sum(1 for log in recent_logs if as_utc(log.check_in_at).date() == day)
        overview.attendance_by_day.append({"day": day.strftime("%a"), "attendance": count})

    return overview


def default_report_range(today: date, days: int = ATTENDANCE_WINDOW_DAYS) -> tuple[date, date]:
    return today - timedelta(days=days), today


def in_date_range(moment: Optional[datetime], start: date, end: date, tz_name: Optional[str] = None) -> bool:
    """Whether the local day of ``moment`` in ``tz_name`` falls within start..end"""
    day = local_date(moment, tz_name)
    if day is None:
        return False
    return start <= day <= end


def filter_attendance(
    logs: list[AttendanceLogRead],
    start: date,
    end: date,
    search: Optional[str] = None,
    tz_name: Optional[str] = None,
) -> list[AttendanceLogRead]:
    result = [log for log in logs if in_date_range(log.check_in_at, start, end, tz_name)]
    if search:
        result = [log for log in result if matches_member(log.member, search)]
    return result


def matches_member(member, search: str) -> bool:
    if member is None:
        return False
    term = search.lower()
    return term in member.full_name.lower() or term in (member.member_code or "").lower()


def filter_payments(
    invoices: list[InvoiceRead],
    start: date,
    end: date,
    status: Optional[InvoiceStatus] = None,
    search: Optional[str] = None,
    tz_name: Optional[str] = None,
) -> list[InvoiceRead]:
    result = [inv for inv in invoices if in_date_range(inv.created_at, start, end, tz_name)]
    if status is not None:
        result = [inv for inv in result if inv.status == status]
    if search:
        term = search.lower()
        result = [
            inv for inv in result
            if matches_member(inv.member, term) or term in (inv.invoice_number or "").lower()
        ]
    return result


def payment_totals(invoices: list[InvoiceRead]) -> dict:
    return {
        "total_amount": _net(invoices),
        "paid_amount": collected_total(invoices),
        "pending_amount": outstanding_total(invoices),
    }


def invoice_page_stats(invoices: list[InvoiceRead]) -> dict:
    return {
        "overdue_count": sum(1 for inv in invoices if inv.status == InvoiceStatus.OVERDUE),
        "total_pending": _net(inv for inv in invoices if inv.status in (InvoiceStatus.UNPAID, InvoiceStatus.OVERDUE)),
    }


def default_income_expense_range(today: date) -> tuple[date, date]:
    """First day of the month eleven months back through the last day of this month"""
    return month_start(today) - relativedelta(months=11), month_end(today)


def merge_income_expense(summary: IncomeExpenseSummary) -> list[dict]:
    """Per-month income, expense and profit, in the order months first appear"""
    months: "OrderedDict[str, dict]" = OrderedDict()
    for item in summary.income_by_month:
        months.setdefault(item.month, {"month": item.month, "income": 0.0, "expense": 0.0})
        months[item.month]["income"] += item.amount
    for item in summary.expense_by_month:
        months.setdefault(item.month, {"month": item.month, "income": 0.0, "expense": 0.0})
        months[item.month]["expense"] += item.amount
    for row in months.values():
        row["profit"] = row["income"] - row["expense"]
    return list(months.values())


def is_profit(summary: IncomeExpenseSummary) -> bool:
    return summary.net_profit_loss >= 0


def attendance_daily_counts(logs: list[AttendanceLogRead], tz_name: Optional[str] = None) -> list[dict]:
    """Check-ins per local calendar day in ``tz_name``, oldest day first"""
    counts: dict[date, int] = {}
    for log in logs:
        day = local_date(log.check_in_at, tz_name)
        counts[day] = counts.get(day, 0) + 1
    return [{"date": day, "count": counts[day]} for day in sorted(counts)]
