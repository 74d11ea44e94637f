"""Aggregation and forecasting core for the ticket trends dashboard."""

from .aggregate import (
    count_by_period,
    group_by,
    group_by_period_and_dimension,
    volume_series,
)
from .filters import filter_tickets, matches
from .forecast import display_values, forecast, holt_forecast, linear_forecast
from .gaps import PeriodGranularityError, entity_series, fill_gaps
from .models import (
    CORESHACK_TEAM,
    DEFAULT_FORECAST_PERIODS,
    IT_TEAM,
    UNKNOWN,
    AggregateBucket,
    Dimension,
    FilterSpecification,
    ForecastMethod,
    ForecastResult,
    Granularity,
    PeriodValue,
    Ticket,
    TrendDirection,
)
from .normalize import normalize_row, normalize_rows, unique_values
from .periods import following_periods, month_key, next_period, week_key
from .trends import EntityTrend, build_entity_trends, trend_chart_rows

__all__ = [
    "AggregateBucket",
    "CORESHACK_TEAM",
    "DEFAULT_FORECAST_PERIODS",
    "Dimension",
    "EntityTrend",
    "FilterSpecification",
    "ForecastMethod",
    "ForecastResult",
    "Granularity",
    "IT_TEAM",
    "PeriodGranularityError",
    "PeriodValue",
    "Ticket",
    "TrendDirection",
    "UNKNOWN",
    "build_entity_trends",
    "count_by_period",
    "display_values",
    "entity_series",
    "fill_gaps",
    "filter_tickets",
    "following_periods",
    "forecast",
    "group_by",
    "group_by_period_and_dimension",
    "holt_forecast",
    "linear_forecast",
    "matches",
    "month_key",
    "next_period",
    "normalize_row",
    "normalize_rows",
    "trend_chart_rows",
    "unique_values",
    "volume_series",
    "week_key",
]
