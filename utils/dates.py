# utils/dates.py
import math
from datetime import date, datetime, time, timezone

SECONDS_PER_DAY = 86400


def utcnow() -> datetime:
     """Current UTC time as a naive datetime (the storage convention)."""
     return datetime.now(timezone.utc).replace(tzinfo=None)


def billing_period(moment: datetime) -> str:
     """Billing period key, e.g. 2025-03."""
     return moment.strftime("%Y-%m")


def days_between(start: datetime, end: datetime) -> int:
     """Whole days from start to end, rounded up."""
     return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)


def start_of_day(day: date) -> datetime:
     return datetime.combine(day, time.min)


def format_date(value: date | datetime) -> str:
     return value.strftime("%d %b %Y")
