from __future__ import annotations

from datetime import datetime, timezone

from salud_chart.model import Measurement
from salud_chart.projection import (
    FRAME_COLUMNS,
    date_labels,
    filter_by_kind,
    last_per_day,
    limit_points,
    measurements_to_frame,
    project_chart,
    sequence_labels,
    sort_by_time,
)


def _m(
    value: float,
    day: int,
    hour: int = 12,
    kind: str = "peso",
    secondary: float | None = None,
) -> Measurement:
    return Measurement(
        id=f"{kind}-{day}-{hour}",
        kind=kind,  # type: ignore[arg-type]
        value=value,
        timestamp=datetime(2024, 1, day, hour, tzinfo=timezone.utc),
        secondary_value=secondary,
    )


def test_project_chart_lengths_match() -> None:
    series = [_m(72.5, 15), _m(71.26, 16)]
    p = project_chart(series, "peso", local_tz=timezone.utc)
    assert p.labels == ["15/01/2024", "16/01/2024"]
    assert p.values == [72.5, 71.26]
    assert p.formatted == ["72.5", "71.3"]
    assert p.secondary == [None, None]
    assert p.unit == "kg"
    assert len(p) == 2


def test_project_chart_empty_gives_empty_lists() -> None:
    p = project_chart([], "glucosa")
    assert p.labels == []
    assert p.values == []
    assert p.formatted == []
    assert p.secondary == []
    assert p.unit == "mg/dL"


def test_project_chart_sequence_labels_and_pressure() -> None:
    series = [_m(119.6, 15, kind="presion", secondary=80.0)]
    p = project_chart(series, "presion", label_style="secuencia")
    assert p.labels == ["C1"]
    assert p.formatted == ["120"]
    assert p.secondary == [80.0]


def test_project_chart_unknown_kind_uses_fallback() -> None:
    p = project_chart([_m(50, 15, kind="general")], "desconocido")
    assert p.formatted == ["50"]
    assert p.unit == ""


def test_filter_by_kind() -> None:
    series = [_m(70, 15), _m(95, 15, kind="glucosa"), _m(71, 16)]
    assert [m.value for m in filter_by_kind(series, "peso")] == [70, 71]
    assert filter_by_kind(series, "frecuencia") == []


def test_sort_by_time_is_stable() -> None:
    a, b, c = _m(1, 16), _m(2, 15), _m(3, 16)
    assert sort_by_time([a, b, c]) == [b, a, c]


def test_limit_points() -> None:
    series = [_m(v, 10 + v) for v in range(1, 6)]
    assert [m.value for m in limit_points(series, 2)] == [4, 5]
    assert limit_points(series, None) == series
    assert limit_points(series, 0) == []


def test_measurements_to_frame() -> None:
    df = measurements_to_frame([_m(70, 15), _m(71, 16)], timezone.utc)
    assert list(df.columns) == FRAME_COLUMNS
    assert list(df["value"]) == [70, 71]
    assert list(df["position"]) == [0, 1]


def test_measurements_to_frame_empty() -> None:
    df = measurements_to_frame([])
    assert df.empty
    assert list(df.columns) == FRAME_COLUMNS


def test_last_per_day_keeps_last_reading_of_each_day() -> None:
    series = [_m(72, 16, 8), _m(70, 15, 8), _m(71, 15, 20), _m(73, 16, 9)]
    out = last_per_day(series, timezone.utc)
    assert [m.value for m in out] == [71, 73]


def test_last_per_day_empty() -> None:
    assert last_per_day([]) == []


def test_labels_helpers() -> None:
    assert sequence_labels(3) == ["C1", "C2", "C3"]
    assert sequence_labels(0) == []
    assert date_labels([_m(1, 15)], "%Y-%m-%d", timezone.utc) == ["2024-01-15"]
