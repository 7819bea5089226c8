"""Typer CLI root application."""

import typer

from meta_depot.core.config import get_settings
from meta_depot.core.logging import setup_logging

app = typer.Typer(name="meta-depot", help="Publish version listings to the depot")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, serialize=settings.log_json)


def _register_subcommands() -> None:
    """Register all CLI commands."""
    from meta_depot.cli.publish_cmd import publish, status

    app.command("publish")(publish)
    app.command("status")(status)


_register_subcommands()
