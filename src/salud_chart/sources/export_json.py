"""Lectura de exportaciones JSON de mediciones (serie plana o historial)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from salud_chart.sources.base import MeasurementSource, SourcePaths

EXPORT_GLOB = "mediciones_*.json"


@dataclass(frozen=True)
class ExportPaths(SourcePaths):
    """Folder with ``mediciones_*.json`` files saved from the web app."""

    pattern: str = EXPORT_GLOB


class MeasurementExportSource(MeasurementSource):
    """Reads measurement exports; both the flat and the per-protocol layout."""

    def validate(self) -> None:
        root = self._paths.root
        if not root.exists():
            raise FileNotFoundError(str(root))
        if not root.is_dir():
            raise NotADirectoryError(str(root))

    def load_raw(self, path: Path) -> Any:
        """Decode an export file.

        Browser downloads may start with a BOM and copied console output with
        log lines; both are skipped.

        Raises:
            json.JSONDecodeError: If no JSON document can be read.
        """
        return _extract_json(path.read_text(encoding="utf-8-sig"))


def _extract_json(text: str) -> Any:
    starts = [i for i in (text.find("["), text.find("{")) if i >= 0]
    if starts:
        return json.loads(text[min(starts) :])
    return json.loads(text)
