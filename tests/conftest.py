"""Pytest fixtures for test configuration.

Global test safety measures:
 - Keep .env files and LFM__ environment variables out of unit tests
"""
import logging
import os

import pytest


def pytest_sessionstart(session):  # type: ignore[no-untyped-def]
    os.environ.pop('LFM_ENABLE_DOTENV', None)


# Expose shared fixtures (directory, trust, sample items)
from .mocks.fixtures import *  # noqa: F401,F403,E402


@pytest.fixture(autouse=True)
def _clean_lfm_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith('LFM__'):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _restore_lfm_log_level():
    lfm_logger = logging.getLogger('lfm')
    level = lfm_logger.level
    yield
    lfm_logger.setLevel(level)
