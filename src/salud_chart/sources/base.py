"""Clases base para fuentes de mediciones."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from salud_chart.logger import logger


@dataclass(frozen=True)
class SourcePaths:
    """Folder holding measurement exports and the file pattern they follow."""

    root: Path
    pattern: str = "*.json"


class MeasurementSource(ABC):
    """Source of raw, still unclassified, measurement input."""

    def __init__(self, paths: SourcePaths) -> None:
        self._paths = paths

    @abstractmethod
    def validate(self) -> None:
        """Check that the export folder can be read.

        Raises:
            FileNotFoundError: If the folder does not exist.
        """

    @abstractmethod
    def load_raw(self, path: Path) -> Any:
        """Decode one export file, leaving its shape to the classifier."""

    def exports(self) -> list[Path]:
        """Exports under the root, newest first (name breaks mtime ties)."""
        return sorted(
            self._paths.root.glob(self._paths.pattern),
            key=lambda p: (p.stat().st_mtime, p.name),
            reverse=True,
        )

    def newest(self) -> Path:
        """Return the most recent export.

        Raises:
            FileNotFoundError: If no file matches the pattern.
        """
        files = self.exports()
        if not files:
            raise FileNotFoundError(
                f"No {self._paths.pattern} in {self._paths.root}"
            )
        return files[0]

    def load(self, path: Path | None = None) -> Any:
        """Load ``path``, or the newest export when no path is given."""
        if path is None:
            self.validate()
            path = self.newest()
        logger.debug("Reading measurements from %s", path)
        return self.load_raw(path)
