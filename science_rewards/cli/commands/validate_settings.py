"""CLI command for validating reward settings files."""

from pathlib import Path

import typer
from typing_extensions import Annotated

from science_rewards.cli.output import console, log_error, log_success, output_json
from science_rewards.config import load_settings


def validate_settings(
    settings_file: Annotated[
        Path,
        typer.Argument(help="Path to the settings YAML file to validate"),
    ],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the validated settings as JSON on stdout"),
    ] = False,
):
    """Validate a reward settings file.

    Exits with status 1 when the file is missing or invalid. The batch queue
    would fall back to its defaults for such a file.
    """
    try:
        settings = load_settings(settings_file)
    except Exception as e:
        log_error(f"Invalid settings: {e}")
        raise typer.Exit(1)

    if as_json:
        output_json(settings.model_dump(by_alias=True))
        return

    log_success(f"{settings_file} is valid")
    console.print(f"  Funds per science: [green]{settings.funds}[/green]")
    console.print(f"  Rep per science:   [magenta]{settings.rep}[/magenta]")
    console.print(f"  Queue length:      [cyan]{settings.queue_length}[/cyan]")
    console.print(f"  Interval:          [yellow]{settings.interval}s[/yellow]")
