"""Fachada: de la entrada cruda a la proyección y estadísticas del gráfico."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from salud_chart.classify import detect_input_kind
from salud_chart.exceptions import ClassificationError
from salud_chart.formatting import unit_for
from salud_chart.logger import logger
from salud_chart.model import ChartProjection, DetectedInput
from salud_chart.projection import (
    LabelStyle,
    filter_by_kind,
    last_per_day,
    limit_points,
    project_chart,
    sort_by_time,
)
from salud_chart.stats import ChartStatistics, compute_statistics
from salud_chart.validation import ValidationPolicy, ValidationResult, validate_series


@dataclass(frozen=True)
class ChartConfig:
    """Options for building chart data."""

    validation: ValidationPolicy = field(default_factory=ValidationPolicy)
    sort_by_time: bool = False
    group_by_day: bool = False
    max_points: int | None = None
    label_style: LabelStyle = "fecha"
    label_format: str = "%d/%m/%Y"


@dataclass(frozen=True)
class ChartResult:
    """Outcome of one chart-data invocation.

    On a classification error the projection is empty, ``detected`` and
    ``validation`` are None and ``error`` holds the reason.
    """

    projection: ChartProjection
    statistics: ChartStatistics
    detected: DetectedInput | None = None
    validation: ValidationResult | None = None
    error: ClassificationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def rejected(self) -> int:
        return self.validation.rejected if self.validation is not None else 0

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-serialisable view of the result."""
        p = self.projection
        s = self.statistics
        return {
            "ok": self.ok,
            "error": str(self.error) if self.error is not None else None,
            "input": {
                "tipo": self.detected.kind if self.detected else None,
                "totalProtocolos": self.detected.total_protocols
                if self.detected
                else 0,
                "entradas": len(self.detected.data) if self.detected else 0,
                "rechazadas": self.rejected,
                "marcadas": len(self.validation.flagged) if self.validation else 0,
            },
            "grafico": {
                "tipo": p.kind,
                "unidad": p.unit,
                "labels": p.labels,
                "values": p.values,
                "formatted": p.formatted,
                "secondary": p.secondary,
            },
            "estadisticas": {
                "promedio": s.average,
                "minimo": s.minimum,
                "maximo": s.maximum,
                "ultimoValor": s.last_value,
                "tendencia": s.trend,
                "cambioPorcentaje": s.change_percent,
                "valorAnterior": s.previous_value,
            },
        }


def build_chart_data(
    raw: Any, kind: str, config: ChartConfig | None = None
) -> ChartResult:
    """Classify, validate and project measurement input for one kind.

    Never raises for structurally wrong input: classification failures are
    returned in ``ChartResult.error`` with an empty projection.

    Args:
        raw: Flat list of measurement mappings or protocol -> list mapping.
        kind: Measurement kind to chart.
        config: Chart options.

    Returns:
        Chart result.
    """
    config = config or ChartConfig()
    try:
        detected = detect_input_kind(raw)
    except ClassificationError as exc:
        logger.warning("Cannot chart %s data: %s", kind, exc)
        return ChartResult(
            projection=ChartProjection(kind=kind, unit=unit_for(kind)),
            statistics=ChartStatistics(),
            error=exc,
        )

    logger.debug(
        "Detected %s input: %d entries, %d protocols",
        detected.kind,
        len(detected.data),
        detected.total_protocols,
    )
    validation = validate_series(detected.data, detected.protocols, config.validation)

    series = filter_by_kind(validation.measurements, kind)
    tz = config.validation.local_tz
    if config.sort_by_time:
        series = sort_by_time(series)
    if config.group_by_day:
        series = last_per_day(series, tz)
    series = limit_points(series, config.max_points)

    projection = project_chart(
        series,
        kind,
        label_style=config.label_style,
        label_format=config.label_format,
        local_tz=tz,
    )
    return ChartResult(
        projection=projection,
        statistics=compute_statistics(projection.values, kind),
        detected=detected,
        validation=validation,
    )
