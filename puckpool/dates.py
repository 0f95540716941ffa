"""Scoring-day arithmetic in the league's fixed-offset timezone.

A scoring day is a calendar day at a fixed UTC offset (UTC-5 by default),
not true Eastern Time: the offset does not follow daylight saving.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional


def scoring_timezone(utc_offset_hours: int) -> timezone:
    """Fixed-offset tzinfo for the given number of hours from UTC."""
    return timezone(timedelta(hours=utc_offset_hours))


def to_scoring_time(moment: Optional[datetime], utc_offset_hours: int) -> datetime:
    """
    Convert a timestamp to the scoring timezone.

    Naive datetimes are taken to be UTC. None means now.
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(scoring_timezone(utc_offset_hours))


def scoring_date(moment: Optional[datetime], utc_offset_hours: int) -> date:
    """Calendar day of `moment` in the scoring timezone."""
    return to_scoring_time(moment, utc_offset_hours).date()


def previous_scoring_date(moment: Optional[datetime], utc_offset_hours: int) -> date:
    """The scoring day before the one containing `moment`."""
    return scoring_date(moment, utc_offset_hours) - timedelta(days=1)


def as_of_for_date(target: date, utc_offset_hours: int) -> datetime:
    """
    An as-of timestamp whose previous scoring day is `target`.

    Noon on the following day, so the result is well clear of midnight.
    """
    return datetime.combine(
        target + timedelta(days=1), time(12, 0), tzinfo=scoring_timezone(utc_offset_hours)
    )


def date_range(start: date, end: date) -> list[date]:
    """All dates from start to end, inclusive. Empty if end is before start."""
    days = (end - start).days
    return [start + timedelta(days=i) for i in range(days + 1)]


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string."""
    return date.fromisoformat(value)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
