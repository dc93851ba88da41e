"""Tests for the chart-data facade (classification through projection)."""

from __future__ import annotations

import json
import logging
from datetime import timezone
from typing import Any

import pytest

from salud_chart.chart_data import ChartConfig, build_chart_data
from salud_chart.logger import logger
from salud_chart.validation import ValidationPolicy

UTC_POLICY = ValidationPolicy(local_tz=timezone.utc)


def _med(id_: str, tipo: str, valor: Any, fecha: str) -> dict[str, Any]:
    return {"id": id_, "tipo": tipo, "valor": valor, "fecha": fecha}


HISTORIAL = {
    "protocolo-hta": [
        _med("p1", "presion", "120/80", "2024-01-14T09:00:00Z"),
        _med("p2", "presion", "130/85", "2024-01-15T10:30:00Z"),
    ],
    "protocolo-dm": [
        _med("g1", "glucosa", "95", "2024-01-15T12:00:00Z"),
        _med("g2", "glucosa", None, "2024-01-16T12:00:00Z"),
        _med("g3", "glucosa", 101.6, "fecha-invalida"),
    ],
    "vacio": [],
}


def test_historial_pressure_chart() -> None:
    result = build_chart_data(HISTORIAL, "presion", ChartConfig(validation=UTC_POLICY))
    assert result.ok
    assert result.detected is not None
    assert result.detected.kind == "historial"
    assert result.detected.total_protocols == 3
    assert result.rejected == 2
    p = result.projection
    assert p.labels == ["14/01/2024", "15/01/2024"]
    assert p.values == [120.0, 130.0]
    assert p.formatted == ["120", "130"]
    assert p.secondary == [80.0, 85.0]
    assert p.unit == "mmHg"
    assert result.statistics.trend == "subiendo"


def test_flat_series_glucose_chart() -> None:
    series = [
        _med("g1", "glucosa", 95.4, "2024-01-15T12:00:00Z"),
        _med("w1", "peso", 70, "2024-01-15T08:00:00Z"),
        _med("g2", "glucosa", None, "2024-01-16T12:00:00Z"),
        _med("g3", "glucosa", "99", "2024-01-17T12:00:00Z"),
    ]
    result = build_chart_data(series, "glucosa")
    assert result.ok
    assert result.detected is not None
    assert result.detected.kind == "array"
    assert result.projection.formatted == ["95", "99"]
    assert result.rejected == 1


def test_classification_error_returns_empty_result() -> None:
    result = build_chart_data({"proto": "string"}, "peso")
    assert not result.ok
    assert result.error is not None
    assert "proto" in result.error.shape
    assert result.projection.labels == []
    assert result.projection.values == []
    assert result.projection.formatted == []
    assert result.detected is None
    assert result.rejected == 0


@pytest.mark.parametrize("raw", [None, 42, "texto", [1, 2]])
def test_never_raises_for_wrong_shapes(raw: Any) -> None:
    result = build_chart_data(raw, "peso")
    assert not result.ok


def test_classification_error_is_logged(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(logger, "propagate", True)
    with caplog.at_level(logging.WARNING, logger="salud_chart"):
        build_chart_data(None, "peso")
    assert "Cannot chart peso data" in caplog.text


def test_empty_inputs_give_empty_chart() -> None:
    for raw in ([], {}, {"p": []}):
        result = build_chart_data(raw, "peso")
        assert result.ok
        assert result.projection.values == []
        assert result.statistics.last_value is None


def test_group_by_day_sort_and_max_points() -> None:
    series = [
        _med("w3", "peso", 71.0, "2024-01-16T08:00:00Z"),
        _med("w1", "peso", 70.0, "2024-01-14T08:00:00Z"),
        _med("w2", "peso", 70.5, "2024-01-15T08:00:00Z"),
        _med("w2b", "peso", 70.7, "2024-01-15T20:00:00Z"),
    ]
    config = ChartConfig(
        validation=UTC_POLICY,
        sort_by_time=True,
        group_by_day=True,
        max_points=2,
        label_style="secuencia",
    )
    result = build_chart_data(series, "peso", config)
    assert result.projection.values == [70.7, 71.0]
    assert result.projection.labels == ["C1", "C2"]


def test_drop_implausible_policy() -> None:
    series = [
        _med("w1", "peso", -5, "2024-01-14T08:00:00Z"),
        _med("w2", "peso", 70, "2024-01-15T08:00:00Z"),
    ]
    kept = build_chart_data(series, "peso")
    assert kept.projection.values == [-5.0, 70.0]
    assert kept.validation is not None
    assert len(kept.validation.flagged) == 1

    dropped = build_chart_data(
        series, "peso", ChartConfig(validation=ValidationPolicy(drop_implausible=True))
    )
    assert dropped.projection.values == [70.0]
    assert dropped.rejected == 1


def test_build_chart_data_is_idempotent() -> None:
    first = build_chart_data(HISTORIAL, "glucosa")
    second = build_chart_data(HISTORIAL, "glucosa")
    assert first.to_dict() == second.to_dict()


def test_to_dict_is_json_serialisable() -> None:
    result = build_chart_data(HISTORIAL, "glucosa", ChartConfig(validation=UTC_POLICY))
    payload = json.loads(json.dumps(result.to_dict()))
    assert payload["ok"] is True
    assert payload["input"]["tipo"] == "historial"
    assert payload["input"]["totalProtocolos"] == 3
    assert payload["input"]["rechazadas"] == 2
    assert payload["grafico"]["formatted"] == ["95"]
    assert payload["estadisticas"]["ultimoValor"] == 95.0


def test_oversized_integer_value_is_a_rejection_not_a_crash() -> None:
    series = [
        _med("w1", "peso", 10**400, "2024-01-14T08:00:00Z"),
        _med("w2", "peso", 70, "2024-01-15T08:00:00Z"),
    ]
    result = build_chart_data(series, "peso", ChartConfig(validation=UTC_POLICY))
    assert result.ok
    assert result.rejected == 1
    assert result.projection.values == [70.0]
