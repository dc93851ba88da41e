"""Modelos tipados para mediciones de salud y sus formas de entrada."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

MeasurementKind = Literal[
    "peso", "presion", "glucosa", "frecuencia", "temperatura", "general"
]
MeasurementStatus = Literal["normal", "alerta", "critico", "na"]
InputKind = Literal["array", "historial"]

MEASUREMENT_KINDS: tuple[str, ...] = (
    "peso",
    "presion",
    "glucosa",
    "frecuencia",
    "temperatura",
    "general",
)
MEASUREMENT_STATUSES: tuple[str, ...] = ("normal", "alerta", "critico", "na")


@dataclass(frozen=True)
class Measurement:
    """One validated health observation (timestamped, finite value)."""

    id: str | int | None
    kind: MeasurementKind
    value: float
    timestamp: datetime
    secondary_value: float | None = None
    protocol: str | None = None
    name: str | None = None
    unit: str | None = None
    status: MeasurementStatus | None = None
    observation_type_id: int | None = None


@dataclass(frozen=True)
class FlatSeries:
    """Untrusted input recognised as one ordered series."""

    entries: Sequence[Any]


@dataclass(frozen=True)
class NamedCollection:
    """Untrusted input recognised as protocol name -> series."""

    protocols: Mapping[str, Sequence[Any]]


ParsedInput = FlatSeries | NamedCollection


@dataclass(frozen=True)
class DetectedInput:
    """Classifier output.

    ``protocols`` is aligned with ``data`` and holds the protocol key each entry
    came from (``None`` for flat series).
    """

    kind: InputKind
    data: Sequence[Any]
    total_protocols: int
    protocols: tuple[str | None, ...] = ()


@dataclass(frozen=True)
class ChartProjection:
    """Display-ready series: one label, value and formatted string per point."""

    kind: str
    unit: str
    labels: list[str] = field(default_factory=list)
    values: list[float] = field(default_factory=list)
    formatted: list[str] = field(default_factory=list)
    secondary: list[float | None] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)
