"""Main Typer application — imports and registers all CLI commands.

Entry point: ``nuorbit`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from nuorbit.cli.commands.chains import chains_cmd
from nuorbit.cli.commands.checkout_url import checkout_url_cmd
from nuorbit.cli.commands.run import run_cmd
from nuorbit.config import config

app = typer.Typer(
    name="nuorbit",
    help="NuOrbit: payment session orchestration and checkout tooling.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None, "--log-level", help="Logging level (defaults to NUORBIT_LOG_LEVEL)."
    ),
) -> None:
    """Configure logging for every subcommand."""
    level = (log_level or config.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


# Register subcommands
app.command(name="run", help="Run a full session flow against the remote API.")(run_cmd)
app.command(name="chains", help="List chains supporting a stablecoin.")(chains_cmd)
app.command(name="checkout-url", help="Print the checkout URL the launcher would open.")(checkout_url_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
