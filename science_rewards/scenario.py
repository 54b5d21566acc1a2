"""Host lifecycle wiring for the reward batch queue.

RewardScenario is the object a host keeps alive for the duration of a game
session. It owns one BatchQueue and forwards host lifecycle calls to it:

    on_awake()    -> subscribe to science events
    on_load(node) -> reload settings, restore the backlog
    update()      -> advance the debounce timer
    on_save(node) -> persist the backlog
    on_destroy()  -> unsubscribe from science events

A ledger or notification surface that raises is logged, not propagated.
A batch whose notification could not be posted stays queued for the next
flush.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from science_rewards.batch_queue import BatchQueue
from science_rewards.config import DEFAULT_SETTINGS
from science_rewards.persistence import SaveFileStore
from science_rewards.protocols import Ledger, NotificationSurface, ScienceEventSource

logger = logging.getLogger(__name__)


class RewardScenario:
    """Connects the batching core to a host's event source and save cycle.

    Attributes:
        queue: The BatchQueue receiving converted science events
        settings_path: Settings file read on every load
    """

    def __init__(
        self,
        events: ScienceEventSource,
        ledger: Ledger | None,
        surface: NotificationSurface | None,
        settings_path: str | Path,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize scenario.

        Args:
            events: Source of science-received events
            ledger: Ledger credited with converted rewards
            surface: Notification surface for batches and errors
            settings_path: Path of the YAML settings file
            clock: Time source for the debounce timer
        """
        self.events = events
        self.settings_path = Path(settings_path)
        self.queue = BatchQueue(DEFAULT_SETTINGS, ledger=ledger, surface=surface, clock=clock)
        self._subscribed = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def on_awake(self) -> None:
        if self._subscribed:
            return
        self.events.subscribe(self.on_science_received)
        self._subscribed = True
        logger.info("Listening for science...")

    def on_load(self, node: dict[str, Any]) -> None:
        logger.info("Loading configuration")
        self.queue.reload_settings(self.settings_path)
        self.queue.load(node)

    def update(self, now: float | None = None) -> bool:
        return self.queue.tick(now)

    def on_save(self, node: dict[str, Any]) -> None:
        logger.info("Saving message queue")
        self.queue.save(node)

    def on_destroy(self) -> None:
        if not self._subscribed:
            return
        try:
            self.events.unsubscribe(self.on_science_received)
            logger.info("Destroyed, removed science handler")
        except ValueError as e:
            logger.warning(f"Science handler was already removed: {e}")
        self._subscribed = False

    # =========================================================================
    # Event handler
    # =========================================================================

    def on_science_received(
        self,
        science: float,
        subject: str,
        vessel: Any = None,
        transmitted: bool = False,
    ) -> None:
        """Handle a science-received event from the host."""
        logger.debug(f"Received {science} science points for '{subject}'")
        self.queue.submit(science, subject)

    # =========================================================================
    # Save file helpers
    # =========================================================================

    def load_from_store(self, store: SaveFileStore) -> dict[str, Any]:
        """Load the scenario node from a save file and restore from it.

        An unreadable save file is logged and replaced by an empty node.

        Returns:
            The node the scenario was loaded from
        """
        try:
            node = store.load()
        except ValueError:
            logger.exception(f"Save file {store.path} is unusable, starting with an empty queue")
            node = {}
        self.on_load(node)
        return node

    def save_to_store(self, store: SaveFileStore, node: dict[str, Any] | None = None) -> dict[str, Any]:
        """Persist the backlog into ``node`` and write it to a save file."""
        node = {} if node is None else node
        self.on_save(node)
        store.save(node)
        return node
