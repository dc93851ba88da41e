"""Estadísticas y tendencia de una serie de valores."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

import pandas as pd

from salud_chart.formatting import round_half_up, round_one_decimal

Trend = Literal["subiendo", "bajando", "estable"]

# Cambio porcentual por debajo del cual la tendencia se considera estable.
STABLE_TREND_THRESHOLD = 5.0


@dataclass(frozen=True)
class ChartStatistics:
    """Summary figures shown next to a chart."""

    average: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0
    last_value: float | None = None
    trend: Trend = "estable"
    change_percent: float | None = None
    previous_value: float | None = None


@dataclass(frozen=True)
class TrendInfo:
    """Direction and size of the change between the last two values."""

    direction: Trend
    change_percent: float | None
    previous_value: float | None


def compute_trend(values: Sequence[float]) -> TrendInfo:
    """Compare the last value with the previous one.

    Stable when there are fewer than two values, the previous value is zero, or
    the change is under ``STABLE_TREND_THRESHOLD`` percent.
    """
    if len(values) < 2:
        return TrendInfo("estable", None, None)

    last = values[-1]
    previous = values[-2]
    if previous == 0:
        return TrendInfo("estable", None, previous)

    change = (last - previous) / previous * 100
    if abs(change) < STABLE_TREND_THRESHOLD:
        return TrendInfo("estable", change, previous)
    return TrendInfo("subiendo" if change > 0 else "bajando", change, previous)


def compute_statistics(values: Sequence[float], kind: str) -> ChartStatistics:
    """Average/min/max/last value and trend for a projected series.

    Blood pressure and glucose averages are rounded to integers; weight figures
    keep one decimal. Empty input gives zeros and ``None``.
    """
    if not values:
        return ChartStatistics()

    series = pd.Series(list(values), dtype="float64")
    trend = compute_trend(values)
    average = float(series.mean())
    minimum = float(series.min())
    maximum = float(series.max())
    last = float(series.iloc[-1])

    if kind in ("presion", "glucosa"):
        average = float(round_half_up(average))
    elif kind == "peso":
        average = round_one_decimal(average)
        minimum = round_one_decimal(minimum)
        maximum = round_one_decimal(maximum)
        last = round_one_decimal(last)

    return ChartStatistics(
        average=average,
        minimum=minimum,
        maximum=maximum,
        last_value=last,
        trend=trend.direction,
        change_percent=trend.change_percent,
        previous_value=trend.previous_value,
    )
