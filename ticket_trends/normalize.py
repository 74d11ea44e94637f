"""Turn raw CSV rows into :class:`Ticket` records."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from .models import UNKNOWN, Dimension, Ticket
from .periods import month_key


logger = logging.getLogger(__name__)

# Canonical field -> accepted headers, first non-empty value wins.
HEADER_ALIASES: Dict[str, Tuple[str, ...]] = {
    "created_date": ("Created Date", "createdDate"),
    "group": ("Groups", "group"),
    "id": ("ID", "id"),
    "agent_name": ("Agent Name", "agentName"),
    "category": ("Category", "category"),
    "subject": ("Subject", "subject"),
    "source": ("Source", "source"),
    "priority": ("Priority", "priority"),
    "status": ("Status", "status"),
}


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


def _field(row: Mapping[str, Any], name: str) -> Optional[str]:
    for header in HEADER_ALIASES[name]:
        value = _clean(row.get(header))
        if value is not None:
            return value
    return None


def _to_iso(parsed: pd.Timestamp) -> str:
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert("UTC").tz_localize(None)
    millis = parsed.microsecond // 1000
    return f"{parsed.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}Z"


def normalize_created_date(raw: Optional[str]) -> Optional[str]:
    """Rewrite a ``<date> <time> <AM/PM>`` value as ISO-8601.

    Anything else, including values that are already ISO, is returned as is.
    """
    if raw is None:
        return None
    parts = raw.split()
    if len(parts) != 3:
        return raw
    date_part, time_part, meridiem = parts
    try:
        parsed = pd.to_datetime(f"{date_part} {time_part} {meridiem}")
    except (ValueError, TypeError, OverflowError):
        logger.debug("Keeping unparsable created date %r", raw)
        return raw
    if pd.isna(parsed):
        return raw
    return _to_iso(parsed)


def normalize_row(row: Mapping[str, Any]) -> Ticket:
    created_date = normalize_created_date(_field(row, "created_date"))
    return Ticket(
        id=_field(row, "id"),
        created_date=created_date,
        group=_field(row, "group"),
        agent_name=_field(row, "agent_name"),
        category=_field(row, "category"),
        subject=_field(row, "subject"),
        source=_field(row, "source"),
        priority=_field(row, "priority"),
        status=_field(row, "status"),
        year_month=month_key(created_date),
    )


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> List[Ticket]:
    tickets = [normalize_row(row) for row in rows]
    unknown = sum(1 for ticket in tickets if ticket.year_month == UNKNOWN)
    if unknown:
        logger.info("%d of %d tickets have no usable created date", unknown, len(tickets))
    return tickets


def unique_values(tickets: Iterable[Ticket], dimension: Dimension) -> List[str]:
    """Sorted distinct non-empty values, used to populate filter options."""
    return sorted({value for value in (t.value(dimension) for t in tickets) if value})
