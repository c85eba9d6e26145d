"""treemarshal CLI - Command-line interface for treemarshal."""

from treemarshal.cli.base import cli

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
