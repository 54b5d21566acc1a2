"""Simulate command - replay a science event script through the batch queue.

Events are delivered on a simulated clock that reads `tick * step` at each
tick, exactly as a host would call the scenario once per update. Ledger
credits and notifications are shown on stderr; a JSON run summary is
written to stdout.
"""

import math
from collections import deque
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from typing_extensions import Annotated

from science_rewards.cli.output import (
    console,
    display_backlog,
    display_notification,
    log_error,
    log_info,
    log_success,
    notification_to_dict,
    output_json,
)
from science_rewards.config import load_event_script
from science_rewards.host import EventBus, InMemoryLedger, NotificationInbox, SimulatedClock
from science_rewards.persistence import SaveFileStore
from science_rewards.protocols import Notification
from science_rewards.scenario import RewardScenario

# Absorbs rounding in tick * step so an event on a tick boundary lands on that tick
TIME_TOLERANCE = 1e-9


class ConsoleSurface(NotificationInbox):
    """Notification inbox that also prints each notification."""

    def __init__(self, quiet: bool = False) -> None:
        super().__init__()
        self.quiet = quiet
        self.current_tick: int | None = None
        self.posted_at: list[int | None] = []

    def post(self, notification: Notification) -> None:
        super().post(notification)
        self.posted_at.append(self.current_tick)
        if not self.quiet:
            display_notification(notification, tick=self.current_tick)


def simulate(
    events: Annotated[
        Path,
        typer.Option("--events", "-e", help="YAML event script with an 'events' list"),
    ],
    settings: Annotated[
        Path,
        typer.Option("--settings", "-s", help="Reward settings YAML file"),
    ] = Path("settings.yaml"),
    save: Annotated[
        Optional[Path],
        typer.Option("--save", help="Save file to restore the backlog from and persist it to"),
    ] = None,
    step: Annotated[
        float,
        typer.Option("--step", help="Simulated seconds per tick", min=0.001),
    ] = 0.1,
    flush_at_end: Annotated[
        bool,
        typer.Option("--flush-at-end", help="Flush whatever is still queued when the replay ends"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress notifications and logs on stderr"),
    ] = False,
):
    """Replay science events and show the batched notifications.

    Example:
        science-rewards simulate --events events.yaml --settings settings.yaml
    """
    try:
        script = load_event_script(events)
    except (FileNotFoundError, ValueError) as e:
        log_error(str(e))
        raise typer.Exit(1)

    clock = SimulatedClock()
    bus = EventBus()
    ledger = InMemoryLedger()
    surface = ConsoleSurface(quiet=quiet)
    scenario = RewardScenario(bus, ledger, surface, settings, clock=clock)
    scenario.on_awake()

    store = SaveFileStore(save) if save is not None else None
    if store is not None:
        node = scenario.load_from_store(store)
        if len(scenario.queue):
            log_info(f"Restored {len(scenario.queue)} pending reports from {save}", quiet)
    else:
        node = {}
        scenario.on_load(node)

    interval = scenario.queue.settings.interval
    # Two extra steps so the last event's countdown is strictly exceeded
    end_time = script.duration + interval + 2 * step
    total_ticks = math.ceil(end_time / step)

    log_info(
        f"Replaying {len(script.events)} events over {total_ticks} ticks "
        f"({step}s per tick, {interval}s interval)",
        quiet,
    )

    pending = deque(script.events)
    received = []
    timer_fires = 0
    for tick in range(total_ticks + 1):
        clock.advance_to(tick * step)
        surface.current_tick = tick

        while pending and pending[0].at <= clock() + TIME_TOLERANCE:
            event = pending.popleft()
            bus.emit(event.science, event.subject)
            received.append({"subject": event.subject, "tick": tick})
            if not quiet and event.science != 0:
                console.print(
                    f"[dim]tick {tick}[/dim] {escape(event.subject)}: "
                    f"[green]{event.science * scenario.queue.settings.funds:+.1f} funds[/green], "
                    f"[magenta]{event.science * scenario.queue.settings.rep:+.1f} rep[/magenta]",
                    highlight=False,
                )

        if scenario.update():
            timer_fires += 1

    if flush_at_end:
        surface.current_tick = total_ticks
        scenario.queue.flush()

    if store is not None:
        scenario.save_to_store(store, node)
        log_success(f"Saved {len(scenario.queue)} pending reports to {save}", quiet)

    scenario.on_destroy()

    if not quiet and len(scenario.queue):
        display_backlog(scenario.queue.backlog)

    output_json({
        "ticks": total_ticks + 1,
        "elapsed": round(clock(), 6),
        "events": len(script.events),
        "timer_fires": timer_fires,
        "received": received,
        "ledger": {"funds": ledger.funds, "reputation": ledger.reputation},
        "notifications": [
            {**notification_to_dict(message), "tick": tick}
            for message, tick in zip(surface.messages, surface.posted_at)
        ],
        "pending": scenario.queue.serialize(),
    })
