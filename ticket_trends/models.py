from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


UNKNOWN = "Unknown"

# "IT Team" is a synthetic group covering every team except Coreshack.
IT_TEAM = "IT Team"
CORESHACK_TEAM = "Coreshack"

# Holt smoothing factors and the slope band treated as flat. Forecast output
# downstream depends on these exact values.
HOLT_ALPHA = 0.2
HOLT_BETA = 0.1
STABLE_SLOPE_THRESHOLD = 0.05

DEFAULT_FORECAST_PERIODS = 3


class Dimension(str, Enum):
    GROUP = "group"
    AGENT = "agent_name"
    CATEGORY = "category"
    SUBJECT = "subject"
    SOURCE = "source"
    PRIORITY = "priority"
    STATUS = "status"


class Granularity(str, Enum):
    MONTH = "month"
    WEEK = "week"


class ForecastMethod(str, Enum):
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


class TrendDirection(str, Enum):
    INCREASING = "Increasing"
    DECREASING = "Decreasing"
    STABLE = "Stable"


@dataclass(frozen=True)
class Ticket:
    """A single normalized support ticket."""

    id: Optional[str] = None
    created_date: Optional[str] = None
    group: Optional[str] = None
    agent_name: Optional[str] = None
    category: Optional[str] = None
    subject: Optional[str] = None
    source: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    year_month: str = UNKNOWN

    def value(self, dimension: Dimension) -> Optional[str]:
        return getattr(self, Dimension(dimension).value)

    def label(self, dimension: Dimension) -> str:
        """Dimension value as an aggregation key."""
        return self.value(dimension) or UNKNOWN


DateRange = Tuple[Optional[datetime], Optional[datetime]]


def _iso_or_none(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _datetime_or_none(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True)
class FilterSpecification:
    """Active filter state. Empty selections impose no restriction."""

    date_range: DateRange = (None, None)
    groups: Tuple[str, ...] = ()
    categories: Tuple[str, ...] = ()
    agents: Tuple[str, ...] = ()
    sources: Tuple[str, ...] = ()
    priorities: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("groups", "categories", "agents", "sources", "priorities"):
            object.__setattr__(self, name, tuple(getattr(self, name) or ()))
        start, end = self.date_range or (None, None)
        object.__setattr__(self, "date_range", (start, end))

    @property
    def date_range_active(self) -> bool:
        start, end = self.date_range
        return start is not None and end is not None

    @property
    def active_filter_count(self) -> int:
        """Selected values across dimensions, plus one for an active date range."""
        return int(self.date_range_active) + sum(
            len(selection)
            for selection in (
                self.groups,
                self.categories,
                self.agents,
                self.sources,
                self.priorities,
            )
        )

    @property
    def is_active(self) -> bool:
        return self.active_filter_count > 0

    def merge(self, **changes: Any) -> "FilterSpecification":
        """Return a copy with only the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        start, end = self.date_range
        return {
            "date_range": [_iso_or_none(start), _iso_or_none(end)],
            "groups": list(self.groups),
            "categories": list(self.categories),
            "agents": list(self.agents),
            "sources": list(self.sources),
            "priorities": list(self.priorities),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterSpecification":
        raw_range = data.get("date_range") or [None, None]
        if len(raw_range) != 2:
            raw_range = [None, None]
        return cls(
            date_range=(_datetime_or_none(raw_range[0]), _datetime_or_none(raw_range[1])),
            groups=tuple(data.get("groups") or ()),
            categories=tuple(data.get("categories") or ()),
            agents=tuple(data.get("agents") or ()),
            sources=tuple(data.get("sources") or ()),
            priorities=tuple(data.get("priorities") or ()),
        )


@dataclass(frozen=True)
class AggregateBucket:
    label: str
    count: int
    percentage: int


@dataclass(frozen=True)
class PeriodValue:
    period: str
    value: int


@dataclass
class ForecastResult:
    """Fit statistics and projected values for one series.

    For Holt smoothing ``slope`` carries the final trend and ``intercept`` the
    final level; ``r2`` is always 0.
    """

    method: ForecastMethod
    slope: float = 0.0
    intercept: float = 0.0
    r2: float = 0.0
    trend_direction: TrendDirection = TrendDirection.STABLE
    period_growth: float = 0.0
    trend_growth: float = 0.0
    fitted: List[float] = field(default_factory=list)
    forecast_values: List[float] = field(default_factory=list)
    last_actual_value: float = 0.0
    first_forecast_value: int = 0
