"""Shared test fixtures."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
import structlog

from threadtree.parser import ThreadParser


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep settings and log files away from the developer's .env and working tree."""
    for var in ("THREADTREE_BASE_URL", "THREADTREE_MAX_DEPTH", "THREADTREE_KEEP_MORE_STUBS"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("THREADTREE_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.chdir(tmp_path)
    yield
    # CLI tests configure logging against streams that are closed afterwards
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def log():
    return MagicMock()


@pytest.fixture
def parser(log):
    """Parser with the default single-pass decoder and a mock logger."""
    return ThreadParser(log=log)
