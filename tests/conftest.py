from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.source_builder import SourceBuilder

FIXTURES_DIR = Path(__file__).parent / "_fixtures" / "data"


@pytest.fixture
def source_builder(tmp_path: Path) -> SourceBuilder:
    """Provide a reusable source builder rooted at the pytest tmp_path."""
    return SourceBuilder(tmp_path)


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture(autouse=True)
def _reset_ntro_logger():
    """Undo CLI logging configuration so caplog sees ntro records."""
    logger = logging.getLogger("ntro")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
