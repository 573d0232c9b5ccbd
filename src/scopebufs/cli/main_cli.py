"""
Top-level CLI that aggregates the scopebufs sub-apps.
"""

import logging

import typer

from scopebufs.cli.scope_cli import scope_app
from scopebufs.core.config import settings

main_app = typer.Typer(help="scopebufs CLI")

main_app.add_typer(scope_app, name="scope")


@main_app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages"),
):
    """
    Scope-local buffer lists.
    """
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s - %(message)s"
    )


def main():
    main_app()

if __name__ == "__main__":
    main()
