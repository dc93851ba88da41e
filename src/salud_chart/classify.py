"""Clasificación de la entrada: serie plana o historial por protocolo."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from salud_chart.exceptions import ClassificationError
from salud_chart.flatten import flatten
from salud_chart.model import (
    MEASUREMENT_KINDS,
    DetectedInput,
    FlatSeries,
    NamedCollection,
    ParsedInput,
)


def is_measurement_array(value: Any) -> bool:
    """True if ``value`` is a sequence of measurement-shaped mappings.

    Every element must be a mapping whose ``tipo`` belongs to the known kinds.
    The empty sequence qualifies.
    """
    if not _is_array(value):
        return False
    return all(_looks_like_measurement(item) for item in value)


def is_historial(value: Any) -> bool:
    """True if ``value`` maps string protocol names to sequences.

    Elements of each sequence are not inspected here; the validation pass
    rejects malformed entries one by one. The empty mapping qualifies.
    """
    if not isinstance(value, Mapping):
        return False
    return all(
        isinstance(key, str) and _is_array(series) for key, series in value.items()
    )


def parse_input(value: Any) -> ParsedInput:
    """Turn untrusted input into one of the two explicit variants.

    Raises:
        ClassificationError: If the input matches neither shape.
    """
    if is_measurement_array(value):
        return FlatSeries(entries=value)
    if is_historial(value):
        return NamedCollection(protocols=value)
    raise ClassificationError(describe_shape(value))


def detect_input_kind(value: Any) -> DetectedInput:
    """Classify the input and normalise it to one flat series.

    Flat series come back unchanged with ``total_protocols=0``. A historial is
    flattened and ``total_protocols`` counts every key, empty series included.

    Raises:
        ClassificationError: If the input matches neither shape.
    """
    parsed = parse_input(value)
    if isinstance(parsed, FlatSeries):
        return DetectedInput(
            kind="array",
            data=parsed.entries,
            total_protocols=0,
            protocols=(None,) * len(parsed.entries),
        )

    entries, protocols = flatten(parsed)
    return DetectedInput(
        kind="historial",
        data=entries,
        total_protocols=len(parsed.protocols),
        protocols=protocols,
    )


def describe_shape(value: Any) -> str:
    """Short description of a value's shape for error messages."""
    if value is None:
        return "None"
    if _is_array(value):
        if not value:
            return f"empty {type(value).__name__}"
        kinds = sorted({type(item).__name__ for item in value})
        return f"{type(value).__name__} of {', '.join(kinds)} ({len(value)} items)"
    if isinstance(value, Mapping):
        bad = sorted(
            f"{key!r}: {type(series).__name__}"
            for key, series in value.items()
            if not (isinstance(key, str) and _is_array(series))
        )
        return f"mapping with non-series values ({'; '.join(bad)})"
    return type(value).__name__


def _is_array(value: Any) -> bool:
    return isinstance(value, list | tuple)


def _looks_like_measurement(item: Any) -> bool:
    return isinstance(item, Mapping) and item.get("tipo") in MEASUREMENT_KINDS
