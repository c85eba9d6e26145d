"""CLI ``migrate`` command for rewriting documents in the current format."""

from __future__ import annotations

from pathlib import Path

import click

from treemarshal.cli._shared import create_engine
from treemarshal.cli._shared import import_modules
from treemarshal.cli._shared import load_document


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the migrated document. Defaults to overwriting FILE.",
)
@click.option(
    "--import",
    "-i",
    "modules",
    multiple=True,
    help="Module to import before loading, e.g. one defining types or aliases. Repeatable.",
)
def migrate(file: Path, output: Path | None, modules: tuple[str, ...]) -> None:
    r"""
    Load a document and save it again in the current format.

    Examples:
    \b
    # Rewrite a job document in place
    treemarshal migrate --import myproject.jobs jobs/nightly.xml

    \b
    # Write the migrated document next to the original
    treemarshal migrate jobs/nightly.xml --output jobs/nightly.new.xml
    """
    import_modules(modules)
    engine, monitor = create_engine()

    obj = load_document(engine, file)
    report = monitor.report_for(obj)
    if report is not None and report.errors:
        click.echo(f"Warning: {len(report.errors)} unreadable part(s) of {file} were dropped")

    target = output if output is not None else file
    try:
        target.write_text(engine.to_xml(obj) + "\n", encoding="utf-8")
    except OSError as e:
        raise click.ClickException(f"Cannot write {target}: {e}") from e

    if report is not None and report.version is not None:
        click.echo(f"Migrated {file} from version {report.version} format to {target}")
    else:
        click.echo(f"Rewrote {file} to {target}")
