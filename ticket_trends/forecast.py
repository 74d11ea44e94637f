"""Trend fitting and short-range projection of per-period ticket counts.

Two models are offered. Linear regression fits ordinary least squares of the
value against its position in the series. Holt's linear trend method
(double exponential smoothing) tracks a level and a trend with fixed
smoothing factors ``HOLT_ALPHA`` and ``HOLT_BETA``.

Nothing here raises on short input: an empty or single-point series yields a
flat, zero-statistics result, so callers should look at the series length
before reading meaning into ``slope`` or ``r2``.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from .aggregate import round_half_up
from .models import (
    HOLT_ALPHA,
    HOLT_BETA,
    STABLE_SLOPE_THRESHOLD,
    ForecastMethod,
    ForecastResult,
    TrendDirection,
)


def trend_direction(slope: float) -> TrendDirection:
    if abs(slope) < STABLE_SLOPE_THRESHOLD:
        return TrendDirection.STABLE
    return TrendDirection.INCREASING if slope > 0 else TrendDirection.DECREASING


def growth_rate(first: float, last: float, periods: int) -> float:
    """Relative change from ``first`` to ``last``; 0 when undefined."""
    if periods <= 1 or first == 0:
        return 0.0
    return (last - first) / abs(first)


def r_squared(values: Sequence[float], slope: float, intercept: float) -> float:
    y = np.asarray(values, dtype=float)
    if y.size < 2:
        return 0.0
    ss_tot = np.sum((y - y.mean()) ** 2)
    if ss_tot == 0:
        return 0.0
    fitted = intercept + slope * np.arange(y.size)
    ss_res = np.sum((y - fitted) ** 2)
    return float(1 - ss_res / ss_tot)


def least_squares(values: Sequence[float]) -> Tuple[float, float]:
    """Slope and intercept of ``values`` regressed on their index."""
    y = np.asarray(values, dtype=float)
    if y.size == 0:
        return 0.0, 0.0
    if y.size == 1:
        return 0.0, float(y[0])
    x = np.arange(y.size, dtype=float)
    x_dev = x - x.mean()
    # Centred sums keep a flat series at an exact zero slope.
    slope = np.sum(x_dev * (y - y.mean())) / np.sum(x_dev ** 2)
    return float(slope), float(y.mean() - slope * x.mean())


def _finish(result: ForecastResult, values: Sequence[float]) -> ForecastResult:
    n = len(values)
    result.period_growth = growth_rate(values[0], values[-1], n) if n else 0.0
    result.trend_growth = (
        growth_rate(result.fitted[0], result.fitted[-1], n) if result.fitted else 0.0
    )
    result.last_actual_value = float(values[-1]) if n else 0.0
    if result.forecast_values:
        result.first_forecast_value = round_half_up(result.forecast_values[0])
    return result


def linear_forecast(values: Sequence[float], horizon: int) -> ForecastResult:
    n = len(values)
    slope, intercept = least_squares(values)
    fitted = (intercept + slope * np.arange(n)).tolist()
    steps = np.arange(1, max(horizon, 0) + 1)
    projected = (intercept + slope * (n - 1 + steps)).tolist()
    result = ForecastResult(
        method=ForecastMethod.LINEAR,
        slope=slope,
        intercept=intercept,
        r2=r_squared(values, slope, intercept),
        trend_direction=trend_direction(slope),
        fitted=fitted,
        forecast_values=projected,
    )
    return _finish(result, values)


def holt_smoothing(
    values: Sequence[float], alpha: float = HOLT_ALPHA, beta: float = HOLT_BETA
) -> Tuple[List[float], List[float]]:
    """Smoothed level and trend for each observation."""
    y = np.asarray(values, dtype=float)
    n = y.size
    if n < 2:
        return y.tolist(), [0.0] * n

    level = np.zeros(n)
    trend = np.zeros(n)
    level[0] = y[0]
    trend[0] = y[1] - y[0]
    for i in range(1, n):
        level[i] = alpha * y[i] + (1 - alpha) * (level[i - 1] + trend[i - 1])
        trend[i] = beta * (level[i] - level[i - 1]) + (1 - beta) * trend[i - 1]
    return level.tolist(), trend.tolist()


def holt_forecast(
    values: Sequence[float],
    horizon: int,
    alpha: float = HOLT_ALPHA,
    beta: float = HOLT_BETA,
) -> ForecastResult:
    n = len(values)
    level, trend = holt_smoothing(values, alpha, beta)
    if n < 2:
        start = float(values[0]) if n else 0.0
        projected = [start] * max(horizon, 0)
        final_level, final_trend = start, 0.0
    else:
        final_level, final_trend = level[-1], trend[-1]
        steps = np.arange(1, max(horizon, 0) + 1)
        projected = (final_level + steps * final_trend).tolist()

    result = ForecastResult(
        method=ForecastMethod.EXPONENTIAL,
        slope=final_trend,
        intercept=final_level,
        r2=0.0,
        trend_direction=trend_direction(final_trend),
        fitted=level,
        forecast_values=projected,
    )
    return _finish(result, values)


def forecast(
    values: Sequence[float],
    horizon: int,
    method: ForecastMethod = ForecastMethod.LINEAR,
) -> ForecastResult:
    if ForecastMethod(method) is ForecastMethod.EXPONENTIAL:
        return holt_forecast(values, horizon)
    return linear_forecast(values, horizon)


def display_values(values: Sequence[float]) -> List[int]:
    """Round projections for charts; negative forecasts show as 0."""
    return [max(0, round_half_up(value)) for value in values]
