"""Count tickets by dimension and by period."""

from __future__ import annotations

import math
from collections import Counter, defaultdict
from typing import Dict, Iterable, List

from .gaps import fill_gaps
from .models import (
    CORESHACK_TEAM,
    IT_TEAM,
    UNKNOWN,
    AggregateBucket,
    Dimension,
    Granularity,
    PeriodValue,
    Ticket,
)
from .periods import period_key


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def group_by(tickets: Iterable[Ticket], dimension: Dimension) -> List[AggregateBucket]:
    """Buckets sorted by count, ties kept in first-seen order."""
    counts = Counter(ticket.label(dimension) for ticket in tickets)
    total = sum(counts.values())
    buckets = [
        AggregateBucket(
            label=label,
            count=count,
            percentage=round_half_up(count / total * 100) if total else 0,
        )
        for label, count in counts.items()
    ]
    return sorted(buckets, key=lambda bucket: bucket.count, reverse=True)


def ticket_period(ticket: Ticket, granularity: Granularity) -> str:
    """Period key of a ticket; the stored month is used when the normalizer set one."""
    granularity = Granularity(granularity)
    if granularity is Granularity.MONTH and ticket.year_month not in (None, "", UNKNOWN):
        return ticket.year_month
    return period_key(ticket.created_date, granularity)


def count_by_period(tickets: Iterable[Ticket], granularity: Granularity) -> Dict[str, int]:
    counts: Dict[str, int] = defaultdict(int)
    for ticket in tickets:
        counts[ticket_period(ticket, granularity)] += 1
    return dict(sorted(counts.items()))


def volume_series(tickets: Iterable[Ticket], granularity: Granularity) -> List[PeriodValue]:
    """Ticket volume per period with empty periods filled in."""
    counts = count_by_period(tickets, granularity)
    counts.pop(UNKNOWN, None)
    return fill_gaps(counts)


def group_by_period_and_dimension(
    tickets: Iterable[Ticket], granularity: Granularity, dimension: Dimension
) -> Dict[str, Dict[str, int]]:
    """Nested counts ``{period: {value: count}}``.

    On the team dimension every non-Coreshack ticket counts twice: once for
    its own team and once for the synthetic IT Team roll-up.
    """
    dimension = Dimension(dimension)
    counts: Dict[str, Dict[str, int]] = {}
    for ticket in tickets:
        period = ticket_period(ticket, granularity)
        bucket = counts.setdefault(period, {})
        label = ticket.label(dimension)
        if dimension is Dimension.GROUP and label != CORESHACK_TEAM:
            bucket[IT_TEAM] = bucket.get(IT_TEAM, 0) + 1
        bucket[label] = bucket.get(label, 0) + 1
    return counts
