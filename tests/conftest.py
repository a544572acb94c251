from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest


def pytest_configure(config: pytest.Config) -> None:
    # Ensure the local `src/` tree wins over any other editable install that may exist
    # (e.g. a different git worktree pointing at the same project).
    src_dir = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_dir)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


@pytest.fixture(autouse=True)
def _constant_data() -> None:
    from runetally.tables import ensure_constant_data

    ensure_constant_data()


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    # CLI runs bind a handler to the runner's temporary stderr.
    logger = logging.getLogger("runetally")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def no_constant_data():
    from runetally.tables import clear_constant_data, ensure_constant_data

    clear_constant_data()
    yield
    clear_constant_data()
    ensure_constant_data()
