"""CLI ``check`` command for inspecting stored documents."""

from __future__ import annotations

from pathlib import Path

import click

from treemarshal.cli._shared import create_engine
from treemarshal.cli._shared import import_modules
from treemarshal.cli._shared import load_document


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--import",
    "-i",
    "modules",
    multiple=True,
    help="Module to import before loading, e.g. one defining types or aliases. Repeatable.",
)
def check(files: tuple[Path, ...], modules: tuple[str, ...]) -> None:
    r"""
    Check that documents can still be loaded.

    Every FILE is loaded and reported as OK, OLD (written in a legacy format), PARTIAL (parts
    could not be read and were skipped) or FAILED. Exits with status 1 if any file failed.

    Examples:
    \b
    # Check all job documents, importing the module that defines them
    treemarshal check --import myproject.jobs jobs/*.xml
    """
    import_modules(modules)
    engine, monitor = create_engine()

    failures = 0
    for path in files:
        try:
            obj = load_document(engine, path)
        except click.ClickException as e:
            failures += 1
            click.echo(f"FAILED   {path}: {e.message}")
            continue

        report = monitor.report_for(obj)
        if report is None:
            click.echo(f"OK       {path}")
            continue
        if report.version is not None:
            click.echo(f"OLD      {path}: written by version {report.version} or earlier")
        if report.errors:
            click.echo(f"PARTIAL  {path}: {len(report.errors)} unreadable part(s) skipped")
            for error in report.errors:
                click.echo(f"         - {error}")

    if failures:
        raise SystemExit(1)
