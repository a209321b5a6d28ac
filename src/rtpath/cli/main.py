from __future__ import annotations

import os
from typing import Annotated

import typer

from rtpath.common import create_logger, setup_cli_logging
from rtpath.settings import Settings

from .commands import paths as paths_commands

logger = create_logger("cli")

app = typer.Typer(help="Compute a runtime's executable path, prefixes and module search path.")
app.command("show")(paths_commands.show)
app.command("search-path")(paths_commands.search_path)
app.command("which")(paths_commands.which)


@app.callback(invoke_without_command=True)
def _root_callback(
    ctx: typer.Context,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable colored output")] = False,
) -> None:
    # Respect NO_COLOR environment variable and --no-color flag
    if no_color or os.getenv("NO_COLOR"):
        ctx.color = False

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _setup_logging() -> None:
    settings = Settings()
    if settings.logging.enabled:
        setup_cli_logging(app_info=settings.app, config=settings.logging)
        logger.debug("CLI logging initialized", config=settings.logging.model_dump())


def main() -> None:
    """Entrypoint for the rtpath CLI."""
    _setup_logging()
    app()
