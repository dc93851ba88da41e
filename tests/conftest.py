from __future__ import annotations

from collections.abc import Iterator

import pytest

from salud_chart.logger import logger


@pytest.fixture(autouse=True)
def _isolated_logger(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Each test starts without handlers bound to an earlier test's streams."""
    level = logger.level
    monkeypatch.setattr(logger, "handlers", [])
    monkeypatch.setattr(logger, "propagate", logger.propagate)
    yield
    logger.setLevel(level)
