"""Helpers shared by the CLI commands."""

from __future__ import annotations

import importlib
from pathlib import Path

import click

from treemarshal.engine.core import Engine
from treemarshal.exceptions import TreeMarshalError
from treemarshal.plugins.default.old_data import OldDataMonitor


def import_modules(modules: tuple[str, ...]) -> None:
    """
    Import the modules named on the command line.

    Importing is what registers the types, compatibility aliases and associated converters those
    modules define.

    Raises:
        click.BadParameter: If a module cannot be imported.
    """
    for name in modules:
        try:
            importlib.import_module(name)
        except ImportError as e:
            raise click.BadParameter(f"Cannot import module '{name}': {e}") from e


def create_engine() -> tuple[Engine, OldDataMonitor]:
    """Create an engine with a fresh monitor attached."""
    monitor = OldDataMonitor()
    return Engine(plugins=[monitor]), monitor


def load_document(engine: Engine, path: Path) -> object:
    """
    Read the object stored in ``path``.

    Raises:
        click.ClickException: If the file cannot be read or converted.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise click.ClickException(f"Cannot read {path}: {e}") from e
    try:
        return engine.from_xml(text)
    except TreeMarshalError as e:
        raise click.ClickException(f"Cannot load {path}: {e}") from e
