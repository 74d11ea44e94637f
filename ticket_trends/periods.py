"""Calendar bucket keys.

Month keys look like ``2023-01`` and week keys like ``2023-W05``. Both are
fixed width and zero padded, so sorting the strings sorts them in time.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import List, Optional, Union

import pandas as pd

from .models import UNKNOWN, Granularity


MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")
WEEK_KEY_PATTERN = re.compile(r"^(\d{4})-W(\d{2})$")

# ISO weeks run Monday to Sunday.
ISO_WEEK_FREQ = "W-SUN"

Timestamp = Union[str, datetime, date, pd.Timestamp, None]


def parse_timestamp(value: Timestamp) -> Optional[datetime]:
    """Parse an ISO-8601 string or datetime-like value into a naive UTC datetime."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def month_key(value: Timestamp) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return UNKNOWN
    return f"{parsed.year:04d}-{parsed.month:02d}"


def week_key(value: Timestamp) -> str:
    """ISO week key. The year is the ISO week-based year, not the calendar year."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return UNKNOWN
    iso_year, iso_week, _ = parsed.isocalendar()
    return f"{iso_year:04d}-W{iso_week:02d}"


def period_key(value: Timestamp, granularity: Granularity) -> str:
    if Granularity(granularity) is Granularity.WEEK:
        return week_key(value)
    return month_key(value)


def granularity_of(key: str) -> Optional[Granularity]:
    if MONTH_KEY_PATTERN.match(key):
        return Granularity.MONTH
    if WEEK_KEY_PATTERN.match(key):
        return Granularity.WEEK
    return None


def weeks_in_iso_year(year: int) -> int:
    # 28 December always falls in the last ISO week of its year.
    return date(year, 12, 28).isocalendar()[1]


def to_period(key: str) -> pd.Period:
    """Parse a month or week key into a pandas period."""
    if MONTH_KEY_PATTERN.match(key):
        return pd.Period(key, freq="M")

    match = WEEK_KEY_PATTERN.match(key)
    if match:
        year, week = int(match.group(1)), int(match.group(2))
        if not 1 <= week <= weeks_in_iso_year(year):
            raise ValueError(f"ISO year {year} has no week {week}")
        monday = pd.Timestamp(date.fromisocalendar(year, week, 1))
        return pd.Period(monday, freq=ISO_WEEK_FREQ)

    raise ValueError(f"Not a period key: {key!r}")


def period_label(period: pd.Period) -> str:
    """Inverse of :func:`to_period`."""
    if isinstance(period.freq, pd.offsets.Week):
        iso_year, iso_week, _ = period.start_time.isocalendar()
        return f"{iso_year:04d}-W{iso_week:02d}"
    return period.strftime("%Y-%m")


def next_period(key: str) -> str:
    """Advance a period key by one month or one ISO week."""
    return period_label(to_period(key) + 1)


def following_periods(key: str, count: int) -> List[str]:
    """The ``count`` period keys after ``key``, used to label forecast points."""
    start = to_period(key)
    return [period_label(start + step) for step in range(1, max(count, 0) + 1)]
