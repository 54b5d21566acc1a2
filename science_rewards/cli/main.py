"""Science Rewards CLI - Main entry point."""

import logging

import typer
from rich.logging import RichHandler
from typing_extensions import Annotated

app = typer.Typer(
    name="science-rewards",
    help="Science Rewards - batched reward notifications for science events",
    add_completion=True,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from science_rewards import __version__
        from science_rewards.cli.output import console
        console.print(f"[bold]Science Rewards[/bold] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logs from the reward queue"),
    ] = False,
) -> None:
    """Science Rewards CLI - replay events and manage persisted backlogs."""
    if verbose:
        from science_rewards.cli.output import console
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


# Import commands after app is defined to avoid circular imports
from science_rewards.cli.commands.queue import queue_app
from science_rewards.cli.commands.simulate import simulate
from science_rewards.cli.commands.validate_settings import validate_settings

app.command(name="simulate", help="Replay a science event script through the batch queue")(simulate)
app.command(name="validate-settings", help="Validate a reward settings file")(validate_settings)
app.add_typer(queue_app, name="queue")


if __name__ == "__main__":
    app()
