"""Proyección de la serie validada a datos listos para graficar."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import tzinfo
from typing import Literal

import pandas as pd
from dateutil import tz

from salud_chart.formatting import format_value, unit_for
from salud_chart.model import ChartProjection, Measurement

_LOCAL_TZ = tz.gettz("America/Santiago")

LabelStyle = Literal["fecha", "secuencia"]

FRAME_COLUMNS: list[str] = [
    "position",
    "datetime",
    "date",
    "kind",
    "value",
    "secondary_value",
    "protocol",
]


def filter_by_kind(measurements: Sequence[Measurement], kind: str) -> list[Measurement]:
    """Keep only measurements of ``kind``, preserving order."""
    return [m for m in measurements if m.kind == kind]


def sort_by_time(measurements: Sequence[Measurement]) -> list[Measurement]:
    """Stable chronological sort; equal timestamps keep their input order."""
    return sorted(measurements, key=lambda m: m.timestamp)


def limit_points(
    measurements: Sequence[Measurement], max_points: int | None
) -> list[Measurement]:
    """Keep the last ``max_points`` measurements (all of them when None)."""
    if max_points is None:
        return list(measurements)
    if max_points <= 0:
        return []
    return list(measurements[-max_points:])


def measurements_to_frame(
    measurements: Sequence[Measurement], local_tz: tzinfo | None = _LOCAL_TZ
) -> pd.DataFrame:
    """Convert measurements to a DataFrame, one row per measurement.

    ``position`` is the index in the input sequence and ``date`` the local
    calendar day of the timestamp.
    """
    rows = [
        {
            "position": i,
            "datetime": m.timestamp,
            "date": m.timestamp.astimezone(local_tz).date(),
            "kind": m.kind,
            "value": m.value,
            "secondary_value": m.secondary_value,
            "protocol": m.protocol,
        }
        for i, m in enumerate(measurements)
    ]
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def last_per_day(
    measurements: Sequence[Measurement], local_tz: tzinfo | None = _LOCAL_TZ
) -> list[Measurement]:
    """One measurement per calendar day: the last one seen that day.

    Days come out in ascending order.
    """
    frame = measurements_to_frame(measurements, local_tz)
    if frame.empty:
        return []
    positions = frame.groupby("date", sort=True)["position"].last()
    return [measurements[int(p)] for p in positions]


def sequence_labels(count: int) -> list[str]:
    """Generic x-axis labels ``C1``, ``C2``, ..."""
    return [f"C{i + 1}" for i in range(count)]


def date_labels(
    measurements: Sequence[Measurement],
    label_format: str = "%d/%m/%Y",
    local_tz: tzinfo | None = _LOCAL_TZ,
) -> list[str]:
    """Format each timestamp in local time."""
    return [
        m.timestamp.astimezone(local_tz).strftime(label_format) for m in measurements
    ]


def project_chart(
    measurements: Sequence[Measurement],
    kind: str,
    *,
    label_style: LabelStyle = "fecha",
    label_format: str = "%d/%m/%Y",
    local_tz: tzinfo | None = _LOCAL_TZ,
) -> ChartProjection:
    """Build the display-ready projection of a validated series.

    Every output list has exactly one item per measurement, so an empty series
    yields empty lists.

    Args:
        measurements: Validated series, already filtered and ordered.
        kind: Requested kind; selects value formatting and unit.
        label_style: ``"fecha"`` for date labels, ``"secuencia"`` for C1..Cn.
        label_format: strftime format for date labels.
        local_tz: Zone used to render dates.

    Returns:
        Chart projection.
    """
    if label_style == "secuencia":
        labels = sequence_labels(len(measurements))
    else:
        labels = date_labels(measurements, label_format, local_tz)

    values = [m.value for m in measurements]
    return ChartProjection(
        kind=kind,
        unit=unit_for(kind),
        labels=labels,
        values=values,
        formatted=[format_value(v, kind) for v in values],
        secondary=[m.secondary_value for m in measurements],
    )
