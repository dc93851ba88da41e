"""CLI para proyectar mediciones (serie o historial) a datos de gráfico."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from salud_chart.chart_data import ChartConfig, build_chart_data
from salud_chart.logger import logger, setup_logger
from salud_chart.model import MEASUREMENT_KINDS
from salud_chart.sources.export_json import ExportPaths, MeasurementExportSource
from salud_chart.validation import ValidationPolicy

EXIT_CLASSIFICATION_ERROR = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Datos de gráfico a partir de mediciones de salud."
    )
    parser.add_argument(
        "--tipo",
        required=True,
        choices=MEASUREMENT_KINDS,
        help="Tipo de medición a graficar.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--input", help="Archivo JSON (serie plana o historial).")
    source.add_argument(
        "--base-dir",
        default=str(Path.home() / "proyectos" / "salud" / "mediciones"),
        help="Directorio con mediciones_*.json; se usa el más reciente.",
    )
    parser.add_argument(
        "--group-by-day",
        action="store_true",
        help="Una medición por día (la última de cada día).",
    )
    parser.add_argument(
        "--sort", action="store_true", help="Ordenar cronológicamente."
    )
    parser.add_argument(
        "--max-points", type=int, default=None, help="Máximo de puntos a mostrar."
    )
    parser.add_argument(
        "--drop-implausible",
        action="store_true",
        help="Descartar valores fuera de rango fisiológico.",
    )
    parser.add_argument(
        "--labels",
        choices=("fecha", "secuencia"),
        default="fecha",
        help="Etiquetas del eje X (default: fecha).",
    )
    parser.add_argument("--verbose", action="store_true", help="Logging detallado.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the chart-data CLI.

    Returns:
        Exit code (0 on success, 2 when the input shape is not recognised).
    """
    ns = parse_args(argv)
    setup_logger(logging.DEBUG if ns.verbose else logging.WARNING)

    path = Path(ns.input).expanduser().resolve() if ns.input else None
    root = path.parent if path else Path(ns.base_dir).expanduser().resolve()
    raw = MeasurementExportSource(ExportPaths(root=root)).load(path)

    config = ChartConfig(
        validation=ValidationPolicy(drop_implausible=ns.drop_implausible),
        sort_by_time=ns.sort,
        group_by_day=ns.group_by_day,
        max_points=ns.max_points,
        label_style=ns.labels,
    )
    result = build_chart_data(raw, ns.tipo, config)

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    if not result.ok:
        return EXIT_CLASSIFICATION_ERROR
    logger.info("Chart for %s: %d points", ns.tipo, len(result.projection))
    return 0
