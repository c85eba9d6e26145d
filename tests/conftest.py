"""Conftest for all pytest configuration - fixtures, hooks, and doctest setup."""

import doctest

import pytest

from treemarshal.engine import BaseEngine
from treemarshal.engine import Engine
from treemarshal.plugins.manager import reset_global_plugin_manager
from treemarshal.settings import TreeMarshalSettings
from treemarshal.settings import get_global_settings
from treemarshal.settings import set_global_settings

# Doctest Configuration


def pytest_configure(config):
    """Configure pytest with custom doctest options."""
    doctest.ELLIPSIS_MARKER = "..."


def pytest_collection_modifyitems(items):
    """Automatically mark doctest items with the 'doctest' marker."""
    for item in items:
        if isinstance(item, pytest.DoctestItem):
            item.add_marker(pytest.mark.doctest)


# Isolation


@pytest.fixture(autouse=True)
def isolated_plugins_and_settings():
    """Give every test an empty global plugin manager and settings without entry points."""
    saved = get_global_settings()
    set_global_settings(TreeMarshalSettings(load_entry_points=False))
    reset_global_plugin_manager()
    yield
    reset_global_plugin_manager()
    set_global_settings(saved)


# Engines


@pytest.fixture
def base_engine() -> BaseEngine:
    return BaseEngine()


@pytest.fixture
def engine() -> Engine:
    return Engine()
