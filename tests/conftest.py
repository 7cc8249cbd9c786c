from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from chaincfg.observability.logging import JsonFormatter


REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def _drop_json_handlers() -> Iterator[None]:
    # configure_logging() replaces root handlers; undo that after each test.
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def repo_root() -> Path:
    return REPO_ROOT
