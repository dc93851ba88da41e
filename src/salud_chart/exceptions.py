"""Excepciones compartidas por el clasificador y la fachada de gráficos."""

from __future__ import annotations


class ClassificationError(Exception):
    """Input is neither a measurement series nor a protocol historial.

    ``shape`` is a short description of what was received, for diagnostics.
    """

    def __init__(self, shape: str) -> None:
        super().__init__(f"Unrecognised measurement input: {shape}")
        self.shape = shape
