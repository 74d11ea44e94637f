from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Tuple, Union

import pandas as pd

from .models import UNKNOWN, PeriodValue
from .periods import granularity_of, period_label, to_period


class PeriodGranularityError(ValueError):
    """Raised when a series mixes month and week keys or holds non-period keys."""


Observation = Union[PeriodValue, Tuple[str, int]]


def _as_mapping(points: Iterable[Observation]) -> Dict[str, int]:
    values: Dict[str, int] = {}
    for point in points:
        if isinstance(point, PeriodValue):
            period, value = point.period, point.value
        else:
            period, value = point
        values[period] = value
    return values


def fill_gaps(points: Union[Iterable[Observation], Mapping[str, int]]) -> List[PeriodValue]:
    """Return every period between the first and last observation, zero-filled.

    All keys must share one granularity; anything else is a caller bug and
    raises :class:`PeriodGranularityError`.
    """
    values = dict(points) if isinstance(points, Mapping) else _as_mapping(points)
    if not values:
        return []

    granularities = {granularity_of(period) for period in values}
    if None in granularities:
        bad = sorted(p for p in values if granularity_of(p) is None)
        raise PeriodGranularityError(f"Not period keys: {bad}")
    if len(granularities) > 1:
        raise PeriodGranularityError("Cannot fill a series mixing month and week keys")

    span = pd.period_range(start=to_period(min(values)), end=to_period(max(values)))
    filled = pd.Series(values).reindex([period_label(period) for period in span], fill_value=0)
    return [PeriodValue(period, int(value)) for period, value in filled.items()]


def entity_series(
    period_counts: Mapping[str, Mapping[str, int]], name: str
) -> List[PeriodValue]:
    """Gap-filled series for one agent or team across every observed period.

    Tickets without a usable date sit under the ``Unknown`` period and are
    left out of the timeline.
    """
    counts = {
        period: by_name.get(name, 0)
        for period, by_name in period_counts.items()
        if period != UNKNOWN
    }
    return fill_gaps(counts)
