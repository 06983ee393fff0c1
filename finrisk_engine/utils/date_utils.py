"""Date manipulation utilities"""

from datetime import date
from typing import List


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end (negative if end is earlier)"""
    return (end - start).days


def month_index(reference: date, target: date) -> int:
    """Number of calendar months from reference's month to target's month"""
    return (target.year - reference.year) * 12 + (target.month - reference.month)


def add_months(from_date: date, months: int) -> date:
    """First day of the month that is `months` after from_date's month"""
    total = from_date.year * 12 + (from_date.month - 1) + months
    return date(total // 12, total % 12 + 1, 1)


def generate_month_labels(start: date, count: int) -> List[str]:
    """YYYY-MM labels for `count` consecutive months starting at start's month"""
    return [add_months(start, i).strftime("%Y-%m") for i in range(count)]
