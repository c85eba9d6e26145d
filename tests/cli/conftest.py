"""Shared fixtures for CLI tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests.examples.models import MODULE
from tests.examples.models import Job
from treemarshal.engine import Engine

LEGACY_JOB = (
    f"<{MODULE}.Job>"
    "<name>nightly</name>"
    f'<config class="{MODULE}.Job-Config"><timeout>2.5</timeout></config>'
    f"</{MODULE}.Job>"
)

PARTIAL_JOB = f"<{MODULE}.Job><name>nightly</name><owner>ops</owner></{MODULE}.Job>"


@pytest.fixture(autouse=True)
def restore_logging():
    """
    Restore the root logger around each CLI test.

    The ``cli`` group calls ``logging.basicConfig``, which would otherwise leak a handler and a
    level into later tests.
    """
    root_level = logging.root.level
    root_handlers = logging.root.handlers[:]
    yield
    logging.root.handlers = root_handlers
    logging.root.setLevel(root_level)


@pytest.fixture
def current_file(tmp_path: Path) -> Path:
    path = tmp_path / "current.xml"
    path.write_text(Engine().to_xml(Job("nightly")), encoding="utf-8")
    return path


@pytest.fixture
def legacy_file(tmp_path: Path) -> Path:
    path = tmp_path / "legacy.xml"
    path.write_text(LEGACY_JOB, encoding="utf-8")
    return path


@pytest.fixture
def partial_file(tmp_path: Path) -> Path:
    path = tmp_path / "partial.xml"
    path.write_text(PARTIAL_JOB, encoding="utf-8")
    return path


@pytest.fixture
def broken_file(tmp_path: Path) -> Path:
    path = tmp_path / "broken.xml"
    path.write_text("<unclosed>", encoding="utf-8")
    return path
