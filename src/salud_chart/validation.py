"""Validación de entradas crudas y conversión a mediciones tipadas."""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone, tzinfo
from typing import Any, Literal, cast

from dateutil import parser as date_parser
from dateutil import tz

from salud_chart.logger import logger
from salud_chart.model import (
    MEASUREMENT_KINDS,
    MEASUREMENT_STATUSES,
    Measurement,
    MeasurementKind,
    MeasurementStatus,
)

_LOCAL_TZ = tz.gettz("America/Santiago")

_MISSING_MARKERS: tuple[str, ...] = ("", "--", "N/A")

# Rangos aceptados por los dispositivos de medición (inclusive).
PLAUSIBLE_RANGES: dict[str, tuple[float, float]] = {
    "presion": (50.0, 300.0),
    "glucosa": (20.0, 1000.0),
    "peso": (1.0, 500.0),
    "frecuencia": (30.0, 250.0),
    "temperatura": (30.0, 45.0),
}

RejectionReason = Literal[
    "not_a_mapping",
    "unknown_kind",
    "missing_value",
    "non_numeric_value",
    "non_finite_value",
    "invalid_date",
    "implausible_value",
]


@dataclass(frozen=True)
class ValidationPolicy:
    """How the validation pass treats physiologically implausible values.

    By default such entries are kept and reported in ``flagged``; with
    ``drop_implausible`` they are rejected instead. Values are never clamped.
    """

    drop_implausible: bool = False
    ranges: Mapping[str, tuple[float, float]] = field(
        default_factory=lambda: dict(PLAUSIBLE_RANGES)
    )
    local_tz: tzinfo | None = field(default_factory=lambda: _LOCAL_TZ)


@dataclass(frozen=True)
class ValidationRejection:
    """One raw entry left out of the normalized series."""

    index: int
    reason: RejectionReason
    protocol: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Validated series plus what was rejected or flagged on the way."""

    measurements: list[Measurement]
    rejections: list[ValidationRejection] = field(default_factory=list)
    flagged: list[Measurement] = field(default_factory=list)

    @property
    def rejected(self) -> int:
        """Number of entries dropped."""
        return len(self.rejections)


class _Rejected(ValueError):
    def __init__(self, reason: RejectionReason) -> None:
        super().__init__(reason)
        self.reason: RejectionReason = reason


def validate_series(
    entries: Sequence[Any],
    protocols: Sequence[str | None] | None = None,
    policy: ValidationPolicy | None = None,
) -> ValidationResult:
    """Validate raw entries and build a new series of measurements.

    The input is never mutated and the relative order of accepted entries is
    preserved.

    Args:
        entries: Raw entries (normally ``DetectedInput.data``).
        protocols: Provenance aligned with ``entries``; ``None`` for flat input.
        policy: Plausibility policy; defaults to flag-but-keep.

    Returns:
        Validation result with accepted measurements, rejections and flags.
    """
    policy = policy or ValidationPolicy()
    measurements: list[Measurement] = []
    rejections: list[ValidationRejection] = []
    flagged: list[Measurement] = []

    for index, entry in enumerate(entries):
        protocol = protocols[index] if protocols is not None else None
        try:
            measurement = entry_to_measurement(entry, protocol, policy.local_tz)
        except _Rejected as exc:
            rejections.append(ValidationRejection(index, exc.reason, protocol))
            continue

        if not is_plausible(measurement.kind, measurement.value, policy.ranges):
            if policy.drop_implausible:
                rejections.append(
                    ValidationRejection(index, "implausible_value", protocol)
                )
                continue
            flagged.append(measurement)
        measurements.append(measurement)

    if rejections:
        logger.debug(
            "Rejected %d of %d entries: %s",
            len(rejections),
            len(entries),
            ", ".join(f"#{r.index} {r.reason}" for r in rejections),
        )
    if flagged:
        logger.debug("Flagged %d implausible values", len(flagged))
    return ValidationResult(
        measurements=measurements, rejections=rejections, flagged=flagged
    )


def entry_to_measurement(
    entry: Any, protocol: str | None = None, local_tz: tzinfo | None = _LOCAL_TZ
) -> Measurement:
    """Convert one raw entry into a ``Measurement``.

    Raises:
        ValueError: If the entry is not a valid measurement. The message is the
            rejection reason.
    """
    if not isinstance(entry, Mapping):
        raise _Rejected("not_a_mapping")
    kind = entry.get("tipo")
    if kind not in MEASUREMENT_KINDS:
        raise _Rejected("unknown_kind")
    kind = cast(MeasurementKind, kind)

    value, secondary = parse_value(entry.get("valor"), kind)
    if secondary is None and kind == "presion":
        secondary = _optional_number(entry.get("diastolica"))
    timestamp = parse_timestamp(entry.get("fecha"), local_tz)

    return Measurement(
        id=_parse_id(entry.get("id")),
        kind=kind,
        value=value,
        timestamp=timestamp,
        secondary_value=secondary,
        protocol=protocol,
        name=_optional_text(entry.get("nombre")),
        unit=_optional_text(entry.get("unidad")),
        status=_parse_status(entry.get("estado")),
        observation_type_id=_optional_int(entry.get("observation_type_id")),
    )


def parse_value(raw: Any, kind: str) -> tuple[float, float | None]:
    """Parse a raw ``valor`` into ``(value, secondary)``.

    Numbers pass through; numeric strings are parsed. Blood pressure accepts
    ``"120/80"`` and returns the diastolic part as ``secondary``.

    Raises:
        ValueError: Missing, non-numeric or non-finite value.
    """
    if raw is None:
        raise _Rejected("missing_value")
    if isinstance(raw, bool):
        raise _Rejected("non_numeric_value")
    if isinstance(raw, numbers.Real):
        return _finite(_real_to_float(raw)), None
    if not isinstance(raw, str):
        raise _Rejected("non_numeric_value")

    text = raw.strip()
    if text in _MISSING_MARKERS:
        raise _Rejected("missing_value")
    if kind == "presion" and "/" in text:
        parts = text.split("/")
        if len(parts) != 2:
            raise _Rejected("non_numeric_value")
        return _finite(_to_float(parts[0])), _finite(_to_float(parts[1]))
    return _finite(_to_float(text)), None


def parse_timestamp(raw: Any, local_tz: tzinfo | None = _LOCAL_TZ) -> datetime:
    """Parse a raw ``fecha`` into a timezone-aware datetime.

    Accepts datetimes, dates, ISO 8601 strings and UNIX milliseconds. Naive
    values are placed in ``local_tz``.

    Raises:
        ValueError: If the value is not a valid point in time.
    """
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, date):
        parsed = datetime.combine(raw, time.min)
    elif isinstance(raw, str) and raw.strip():
        try:
            parsed = date_parser.isoparse(raw.strip())
        except (ValueError, OverflowError) as exc:
            raise _Rejected("invalid_date") from exc
    elif isinstance(raw, int | float) and not isinstance(raw, bool):
        try:
            return datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
        except (ValueError, OverflowError, OSError) as exc:
            raise _Rejected("invalid_date") from exc
    else:
        raise _Rejected("invalid_date")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=local_tz or timezone.utc)
    return parsed


def is_plausible(
    kind: str, value: float, ranges: Mapping[str, tuple[float, float]] | None = None
) -> bool:
    """True if ``value`` is inside the accepted range for ``kind``.

    Kinds without a configured range are always plausible.
    """
    bounds = (PLAUSIBLE_RANGES if ranges is None else ranges).get(kind)
    if bounds is None:
        return True
    low, high = bounds
    return low <= value <= high


def _to_float(text: str) -> float:
    try:
        return float(text.strip())
    except ValueError as exc:
        raise _Rejected("non_numeric_value") from exc


def _real_to_float(raw: numbers.Real) -> float:
    try:
        return float(raw)
    except OverflowError as exc:
        raise _Rejected("non_finite_value") from exc


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise _Rejected("non_finite_value")
    return value


def _optional_number(raw: Any) -> float | None:
    """Secondary numbers are metadata: anything unusable becomes None."""
    try:
        value, _ = parse_value(raw, "general")
    except ValueError:
        return None
    return value


def _optional_text(raw: Any) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    return text if text else None


def _optional_int(raw: Any) -> int | None:
    if isinstance(raw, bool) or not isinstance(raw, int):
        return None
    return raw


def _parse_id(raw: Any) -> str | int | None:
    if isinstance(raw, str | int) and not isinstance(raw, bool):
        return raw
    return None


def _parse_status(raw: Any) -> MeasurementStatus | None:
    if raw in MEASUREMENT_STATUSES:
        return cast(MeasurementStatus, raw)
    return None
