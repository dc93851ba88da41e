"""Formato de valores y unidades por tipo de medición.

Funciones puras, sin dependencias del resto del paquete, para que puedan
reutilizarse en reportes y exportaciones.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

UNITS_BY_KIND: dict[str, str] = {
    "peso": "kg",
    "presion": "mmHg",
    "glucosa": "mg/dL",
    "frecuencia": "bpm",
    "temperatura": "°C",
    "general": "",
}


def format_value(value: float, kind: str) -> str:
    """Format a numeric value for display according to its measurement kind.

    Weight keeps one decimal, blood pressure and glucose are rounded to the
    nearest integer, every other kind (unknown ones included) uses the plain
    string form of the number.

    Args:
        value: Numeric measurement value.
        kind: Measurement kind (``tipo``).

    Returns:
        Display string.
    """
    if kind == "peso":
        return _fixed_one_decimal(value)
    if kind in ("presion", "glucosa"):
        return str(round_half_up(value))
    return _plain(value)


def unit_for(kind: str) -> str:
    """Return the unit for a kind; unknown kinds get an empty string."""
    return UNITS_BY_KIND.get(kind, "")


def format_with_unit(value: float, kind: str) -> str:
    """Formatted value followed by its unit, e.g. ``"72.5 kg"``."""
    text = format_value(value, kind)
    unit = unit_for(kind)
    return f"{text} {unit}" if unit else text


def _fixed_one_decimal(value: float) -> str:
    if not math.isfinite(value):
        return _plain(value)
    quantized = _one_decimal(value)
    if quantized == 0:
        return "0.0"
    return str(quantized)


def round_one_decimal(value: float) -> float:
    """Round to one decimal, halves upwards (72.3 for 72.25)."""
    if not math.isfinite(value):
        return value
    return float(_one_decimal(value))


def round_half_up(value: float) -> int | float:
    """Round to the nearest integer, halves upwards (121 for 120.5)."""
    if not math.isfinite(value):
        return value
    return math.floor(value + 0.5)


def _one_decimal(value: float) -> Decimal:
    return Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def _plain(value: float) -> str:
    """Shortest string form; integral floats drop the trailing ``.0``."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return str(value)
