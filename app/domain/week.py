"""
Week window helpers.

A week is identified by its first day. `week_starts_on` uses
date.weekday() numbering: 0=Monday ... 6=Sunday.
"""
from datetime import date, timedelta

SUNDAY = 6


def start_of_week(day: date, week_starts_on: int = SUNDAY) -> date:
    """First day of the week containing `day`."""
    return day - timedelta(days=(day.weekday() - week_starts_on) % 7)


def end_of_week(day: date, week_starts_on: int = SUNDAY) -> date:
    """
    Last day of the week containing `day`.

    >>> end_of_week(date(2024, 1, 10))   # Wednesday, Sunday-based week
    datetime.date(2024, 1, 13)
    """
    return day + timedelta(days=(week_starts_on + 6 - day.weekday()) % 7)


def week_days(week_start: date, week_starts_on: int = SUNDAY) -> list[date]:
    """All days from week_start through the end of its week, inclusive."""
    end = end_of_week(week_start, week_starts_on)
    return [week_start + timedelta(days=i) for i in range((end - week_start).days + 1)]
