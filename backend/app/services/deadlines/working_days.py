"""
Working Day Calculator

Report deadlines fall N working days after an event ends. Saturdays and
Sundays are skipped; there is no holiday calendar.
All arithmetic is on dates, never datetimes, so results do not depend on
the time zone of the caller.
"""
from datetime import date, datetime, timedelta
from typing import Union

from dateutil.parser import isoparse

ACCOMPLISHMENT_WORKING_DAYS = 3
LIQUIDATION_WORKING_DAYS = 7

# date.weekday(): Monday == 0 ... Saturday == 5, Sunday == 6
WEEKEND_DAYS = {5, 6}


def is_working_day(day: date) -> bool:
    return day.weekday() not in WEEKEND_DAYS


def add_working_days(start: date, n: int) -> date:
    """
    Return the date of the nth working day strictly after start.

    n == 0 returns start unchanged.
    """
    if n < 0:
        raise ValueError(f"Working day count must be non-negative, got {n}")

    result = start
    added = 0
    while added < n:
        result += timedelta(days=1)
        if is_working_day(result):
            added += 1
    return result


def to_date(value: Union[date, datetime, str]) -> date:
    """Coerce an event end date to a plain date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # ISO string, possibly with a time or offset component
    return isoparse(str(value)).date()


def calculate_deadline(event_end_date: Union[date, datetime, str], n: int) -> str:
    """Deadline as a YYYY-MM-DD string, n working days after event_end_date."""
    return add_working_days(to_date(event_end_date), n).isoformat()
