"""Queue CLI commands for persisted reward backlogs.

Provides commands to:
- Show the pending reports stored in a save file
- Flush the stored backlog into a notification
"""
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from science_rewards.batch_queue import BatchQueue
from science_rewards.cli.output import (
    display_backlog,
    display_notification,
    log_error,
    log_info,
    log_success,
    notification_to_dict,
    output_json,
)
from science_rewards.host import NotificationInbox
from science_rewards.persistence import SaveFileStore

# Queue command group
queue_app = typer.Typer(
    name="queue",
    help="Inspect and flush persisted reward backlogs",
    no_args_is_help=True,
)


def _load_queue(
    save: Path,
    surface: NotificationInbox | None = None,
    settings: Path | None = None,
) -> tuple[BatchQueue, dict]:
    """Open a save file and restore its backlog into a fresh queue.

    Without a settings file the queue runs on the default settings.
    """
    if not save.exists():
        log_error(f"Save file not found: {save}")
        raise typer.Exit(1)

    try:
        node = SaveFileStore(save).load()
    except ValueError as e:
        log_error(str(e))
        raise typer.Exit(1)

    if settings is None:
        queue = BatchQueue(surface=surface)
    else:
        queue = BatchQueue.from_settings_file(settings, surface=surface)
    queue.load(node)
    return queue, node


# =============================================================================
# Show Command
# =============================================================================


@queue_app.command(name="show")
def show_queue(
    save: Annotated[Path, typer.Option("--save", help="Save file holding the backlog")],
    as_json: Annotated[bool, typer.Option("--json", help="Print entries as JSON on stdout")] = False,
):
    """Show the pending reports stored in a save file.

    Example:
        science-rewards queue show --save persistent.json
    """
    queue, _ = _load_queue(save)

    if as_json:
        output_json(queue.serialize())
        return

    if not len(queue):
        log_info("No pending reports")
        return

    display_backlog(queue.backlog)


# =============================================================================
# Flush Command
# =============================================================================


@queue_app.command(name="flush")
def flush_queue(
    save: Annotated[Path, typer.Option("--save", help="Save file holding the backlog")],
    settings: Annotated[
        Optional[Path],
        typer.Option("--settings", "-s", help="Reward settings YAML file applied to the queue"),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the notification as JSON on stdout")] = False,
):
    """Flush the stored backlog into one notification and save the empty queue.

    Example:
        science-rewards queue flush --save persistent.json --settings settings.yaml
    """
    surface = NotificationInbox()
    queue, node = _load_queue(save, surface, settings)
    if surface.messages and not as_json:
        display_notification(surface.last)

    summary = queue.flush()
    if summary is None:
        log_info("Nothing to flush", quiet=as_json)
        if as_json:
            output_json(None)
        return

    queue.save(node)
    SaveFileStore(save).save(node)

    if as_json:
        output_json(notification_to_dict(surface.last))
    else:
        display_notification(surface.last)
    log_success(f"Flushed {len(summary.records)} reports from {save}", quiet=as_json)
