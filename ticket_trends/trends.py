"""Actual-plus-forecast series for the trends view."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from .forecast import display_values, forecast
from .gaps import entity_series
from .models import ForecastMethod, ForecastResult, PeriodValue
from .periods import following_periods


@dataclass
class EntityTrend:
    name: str
    actual: List[PeriodValue]
    result: ForecastResult
    forecast_periods: List[str] = field(default_factory=list)


def build_entity_trends(
    period_counts: Mapping[str, Mapping[str, int]],
    names: Iterable[str],
    horizon: int,
    method: ForecastMethod = ForecastMethod.LINEAR,
) -> List[EntityTrend]:
    trends: List[EntityTrend] = []
    for name in names:
        actual = entity_series(period_counts, name)
        result = forecast([point.value for point in actual], horizon, method)
        periods = following_periods(actual[-1].period, horizon) if actual else []
        trends.append(EntityTrend(name, actual, result, periods))
    return trends


def trend_chart_rows(trends: Iterable[EntityTrend]) -> List[Dict[str, Any]]:
    """Long-form rows for charting.

    The forecast line starts at the last actual point so the two segments
    join; projected values are rounded and never negative.
    """
    rows: List[Dict[str, Any]] = []
    for trend in trends:
        for point in trend.actual:
            rows.append(
                {"period": point.period, "name": trend.name, "series": "Actual", "tickets": point.value}
            )
        if not trend.actual or not trend.forecast_periods:
            continue
        last = trend.actual[-1]
        rows.append(
            {"period": last.period, "name": trend.name, "series": "Forecast", "tickets": last.value}
        )
        projected = display_values(trend.result.forecast_values)
        for period, value in zip(trend.forecast_periods, projected):
            rows.append({"period": period, "name": trend.name, "series": "Forecast", "tickets": value})
    return rows
