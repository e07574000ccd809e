"""Process-wide test isolation."""

from __future__ import annotations

import logging

import pytest

from microtask_ledger_service.config import clear_settings_cache
from microtask_ledger_service.core.state import reset_app_state
from microtask_ledger_service.logging import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def _isolate_global_state():
    """Start every test with no cached settings, no app state, and default logging."""
    clear_settings_cache()
    reset_app_state()
    yield
    reset_app_state()
    clear_settings_cache()

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
