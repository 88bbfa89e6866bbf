"""Conftest for all pytest configuration - fixtures shared across the test suite."""

import pytest

from skelevents.plugins.manager import _initialize_plugin_system
from skelevents.settings import get_global_settings
from skelevents.settings import set_global_settings


@pytest.fixture(autouse=True)
def _isolate_globals():
    """Restore global settings and start every test with an empty plugin manager."""
    settings = get_global_settings()
    _initialize_plugin_system()
    yield
    set_global_settings(settings)
    _initialize_plugin_system()


@pytest.fixture
def calls() -> list:
    return []
