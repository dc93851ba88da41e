"""Aplanado del historial por protocolo en una sola serie."""

from __future__ import annotations

from typing import Any

from salud_chart.model import NamedCollection


def flatten(collection: NamedCollection) -> tuple[list[Any], tuple[str, ...]]:
    """Concatenate every protocol series into one list.

    Protocol keys are visited in lexicographic order so the result does not
    depend on how the mapping was built. Each protocol keeps its own order.

    Args:
        collection: Protocol name -> series.

    Returns:
        ``(entries, protocols)`` where ``protocols[i]`` is the key that
        ``entries[i]`` came from.
    """
    entries: list[Any] = []
    protocols: list[str] = []
    for name in sorted(collection.protocols):
        series = collection.protocols[name]
        entries.extend(series)
        protocols.extend([name] * len(series))
    return entries, tuple(protocols)

