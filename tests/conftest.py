from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.go_workspace import GoWorkspace


@pytest.fixture
def workspace(tmp_path: Path) -> GoWorkspace:
    """Provide an app dir, GOPATH and output dir rooted at the pytest tmp_path."""
    return GoWorkspace(tmp_path)


@pytest.fixture(autouse=True)
def _reset_appstager_logger():
    """Undo CLI logging configuration so caplog sees appstager records."""
    yield
    logger = logging.getLogger("appstager")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
