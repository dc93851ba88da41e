"""Punto de entrada ``python -m salud_chart``."""

from __future__ import annotations

from salud_chart.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
