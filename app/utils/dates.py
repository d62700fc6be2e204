"""
Date and time helpers shared by pages, exports and PDFs.

Backend timestamps are UTC; naive values are treated as UTC. Display
conversion uses the gym's IANA time zone stored in the session.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from app.core.config import settings

TIMEZONES = list(pytz.common_timezones)

DISPLAY_DATE_FORMAT = "%b %d, %Y"
DISPLAY_DATETIME_FORMAT = "%b %d, %Y %H:%M"


def as_utc(value: Union[str, datetime, None]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = date_parser.isoparse(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_timezone(tz_name: Optional[str]):
    try:
        return pytz.timezone(tz_name or settings.DEFAULT_TIMEZONE)
    except pytz.UnknownTimeZoneError:
        return pytz.utc


def convert_utc_to_timezone(value: Union[str, datetime, None], tz_name: Optional[str] = None) -> str:
    """UTC timestamp rendered in ``tz_name`` as ``MM/DD/YYYY, HH:MM:SS`` (24h)"""
    moment = as_utc(value)
    if moment is None:
        return ""
    local = moment.astimezone(resolve_timezone(tz_name))
    return local.strftime("%m/%d/%Y, %H:%M:%S")


def local_date(value: Union[str, datetime, None], tz_name: Optional[str] = None) -> Optional[date]:
    """Calendar day of a UTC timestamp as seen in ``tz_name``"""
    moment = as_utc(value)
    if moment is None:
        return None
    return moment.astimezone(resolve_timezone(tz_name)).date()


def utc_day_boundary(days_ago: int = 0, now: Optional[datetime] = None) -> str:
    """ISO timestamp of the current moment shifted back ``days_ago`` days"""
    now = now or datetime.now(timezone.utc)
    return (now - timedelta(days=days_ago)).astimezone(timezone.utc).isoformat()


def format_date(value: Union[str, date, datetime, None]) -> str:
    if value is None or value == "":
        return "N/A"
    if isinstance(value, str):
        value = date_parser.isoparse(value)
    return value.strftime(DISPLAY_DATE_FORMAT)


def format_datetime(value: Union[str, datetime, None], tz_name: Optional[str] = None) -> str:
    moment = as_utc(value)
    if moment is None:
        return "N/A"
    return moment.astimezone(resolve_timezone(tz_name)).strftime(DISPLAY_DATETIME_FORMAT)


def parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def day_range(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return month_start(day) + relativedelta(months=1) - timedelta(days=1)


def duration_label(check_in: Optional[datetime], check_out: Optional[datetime]) -> str:
    if check_out is None:
        return "Still checked in"
    seconds = int((as_utc(check_out) - as_utc(check_in)).total_seconds())
    hours, remainder = divmod(max(seconds, 0), 3600)
    return f"{hours}h {remainder // 60}m"
