# utils.py
from datetime import date, datetime, timezone


def utc_now() -> datetime:
    # DB writes are stored as naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def inclusive_day_count(start: date, end: date) -> int:
    # 2024-01-01..2024-01-03 counts as 3 days
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    return (end - start).days + 1


def normalize_email(email: str) -> str:
    return email.strip().lower()
