"""Debounced batch queue for science reward notifications.

Every non-zero science event is converted into funds and reputation,
credited to the ledger straight away, and appended to the backlog. The
notification for those credits is held back: each submission re-arms a
one-shot timer, and when the timer finally expires the backlog is flushed
as a single notification if it has grown past the configured threshold.

The overflow check only runs on timer expiry. A backlog that crosses the
threshold is flushed once the event stream has been quiet for the timer
interval, never at the moment of the crossing.

Usage:
    queue = BatchQueue.from_settings_file("settings.yaml", ledger, surface)
    queue.load(node)            # restore persisted backlog

    queue.submit(2.0, "Mystery Goo")
    queue.tick()                # once per host update

    queue.save(node)            # at checkpoint
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from science_rewards.config import DEFAULT_SETTINGS, RewardSettings, load_settings
from science_rewards.persistence.models import QUEUE_NODE, ReportEntry
from science_rewards.protocols import (
    Ledger,
    MessageColor,
    MessageIcon,
    Notification,
    NotificationSurface,
    TransactionReason,
)
from science_rewards.reports import ReportRecord
from science_rewards.timer import OneShotTimer

logger = logging.getLogger(__name__)

REPORT_TITLE = "New funds available!"
REPORT_HEADER = "Your recent research efforts have granted you the following rewards:"

SETTINGS_ERROR_TITLE = "Science rewards error!"
SETTINGS_ERROR_BODY = (
    "Sorry to break your immersion, but there seems to be an error in the "
    "reward settings and science rewards are not working properly right now. "
    "Default values are in use; check the values in the settings file."
)


def format_total(value: float) -> str:
    """Render a running total without noise digits.

    Integral totals print without a decimal part. Others keep fifteen
    significant digits, which drops summation noise but never rounds a small
    non-zero total down to zero.

    Example:
        >>> format_total(2000.0)
        '2000'
        >>> format_total(0.1 + 0.2)
        '0.3'
        >>> format_total(0.002)
        '0.002'
    """
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.15g}"


@dataclass(frozen=True)
class BatchSummary:
    """Result of a flush.

    Attributes:
        records: Flushed records in FIFO order
        total_funds: Sum of funds over the batch
        total_reputation: Sum of reputation over the batch
        body: Composed notification text
    """

    records: tuple[ReportRecord, ...]
    total_funds: float
    total_reputation: float
    body: str


class BatchQueue:
    """Backlog of reward reports flushed as one notification.

    Args:
        settings: Conversion multipliers, threshold and timer interval
        ledger: Ledger credited on every submission (skipped when None)
        surface: Notification surface receiving flushed batches
        clock: Time source for the debounce timer
    """

    def __init__(
        self,
        settings: RewardSettings = DEFAULT_SETTINGS,
        ledger: Ledger | None = None,
        surface: NotificationSurface | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings
        self.ledger = ledger
        self.surface = surface
        self._backlog: list[ReportRecord] = []
        self._settings_error_reported = False
        self.timer = OneShotTimer(self._on_timer, interval=settings.interval, clock=clock)

    @classmethod
    def from_settings_file(
        cls,
        settings_path: str | Path,
        ledger: Ledger | None = None,
        surface: NotificationSurface | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> BatchQueue:
        """Create a queue from a settings file, falling back to defaults."""
        queue = cls(DEFAULT_SETTINGS, ledger=ledger, surface=surface, clock=clock)
        queue.reload_settings(settings_path)
        return queue

    @property
    def backlog(self) -> tuple[ReportRecord, ...]:
        return tuple(self._backlog)

    def __len__(self) -> int:
        return len(self._backlog)

    # =========================================================================
    # Settings
    # =========================================================================

    def apply_settings(self, settings: RewardSettings) -> None:
        self.settings = settings
        self.timer.interval = settings.interval

    def reload_settings(self, settings_path: str | Path) -> RewardSettings:
        """Load settings from file, using defaults if the file is unusable.

        A settings error is logged every time but reported to the
        notification surface only once per queue.

        Returns:
            The settings now in effect
        """
        try:
            settings = load_settings(settings_path)
        except Exception:
            logger.exception(f"Error while loading reward settings from {settings_path}")
            settings = DEFAULT_SETTINGS
            self._report_settings_error()

        self.apply_settings(settings)
        logger.info(
            f"Settings are funds={settings.funds}, rep={settings.rep}, "
            f"queueLength={settings.queue_length}, interval={settings.interval}s"
        )
        return settings

    def _report_settings_error(self) -> None:
        if self._settings_error_reported:
            return
        self._settings_error_reported = True
        self._post(
            Notification(
                title=SETTINGS_ERROR_TITLE,
                body=SETTINGS_ERROR_BODY,
                color=MessageColor.RED,
                icon=MessageIcon.ALERT,
            )
        )

    # =========================================================================
    # Submit / Tick / Flush
    # =========================================================================

    def submit(self, science: float, subject: str) -> ReportRecord | None:
        """Convert a science event, credit the ledger and queue the report.

        Zero-science events are ignored entirely.

        Args:
            science: Science points received
            subject: Label of the science subject

        Returns:
            The queued record, or None for a zero event
        """
        if science == 0:
            return None

        funds = science * self.settings.funds
        reputation = science * self.settings.rep

        if self.ledger is not None:
            self._credit(funds, reputation, subject)

        record = ReportRecord(funds=funds, reputation=reputation, subject=subject)
        self._backlog.append(record)
        self.timer.start()
        return record

    def _credit(self, funds: float, reputation: float, subject: str) -> None:
        # The report is queued even when the ledger rejects a credit.
        try:
            self.ledger.add_funds(funds, TransactionReason.SCIENCE_TRANSMISSION)
            logger.debug(f"Added {funds} funds")
            self.ledger.add_reputation(reputation, TransactionReason.SCIENCE_TRANSMISSION)
            logger.debug(f"Added {reputation} reputation")
        except Exception:
            logger.exception(f"Error while crediting the ledger for '{subject}'")

    def tick(self, now: float | None = None) -> bool:
        """Advance the debounce timer.

        Returns:
            True if the timer fired on this tick
        """
        return self.timer.tick(now)

    def _on_timer(self) -> None:
        if len(self._backlog) > self.settings.queue_length:
            self.flush()

    def flush(self) -> BatchSummary | None:
        """Drain the backlog into one notification.

        If the notification surface raises, the error is logged and the
        backlog is kept for the next flush.

        Returns:
            The flushed batch, or None if the backlog was empty or could not
            be posted
        """
        if not self._backlog:
            return None

        logger.info(f"Posting the reward notification for {len(self._backlog)} records")

        records = tuple(self._backlog)
        total_funds = 0.0
        total_reputation = 0.0
        lines = [REPORT_HEADER, ""]
        for record in records:
            total_funds += record.funds
            total_reputation += record.reputation
            lines.append(record.render())
        lines.append("")
        lines.append(
            f"Total: {format_total(total_funds)} funds, "
            f"{format_total(total_reputation)} reputation."
        )

        summary = BatchSummary(
            records=records,
            total_funds=total_funds,
            total_reputation=total_reputation,
            body="\n".join(lines),
        )
        posted = self._post(
            Notification(
                title=REPORT_TITLE,
                body=summary.body,
                color=MessageColor.BLUE,
                icon=MessageIcon.MESSAGE,
            )
        )
        if not posted:
            return None

        self._backlog = []
        return summary

    def _post(self, notification: Notification) -> bool:
        """Hand a notification to the surface.

        Returns:
            False if the surface raised; a missing surface counts as delivered
        """
        if self.surface is None:
            logger.warning(f"No notification surface attached, dropping '{notification.title}'")
            return True
        try:
            self.surface.post(notification)
        except Exception:
            logger.exception(f"Error while posting '{notification.title}'")
            return False
        return True

    # =========================================================================
    # Persistence
    # =========================================================================

    def serialize(self) -> list[dict[str, Any]]:
        """Produce the persisted entries for the backlog, in FIFO order."""
        return [record.to_entry() for record in self._backlog]

    def deserialize(self, entries: Iterable[Any] | None) -> int:
        """Replace the backlog with records rebuilt from persisted entries.

        Malformed entries are skipped with a warning; the rest still load.

        Args:
            entries: Persisted entries, or None when nothing was stored

        Returns:
            Number of records loaded
        """
        backlog: list[ReportRecord] = []
        for entry in entries or ():
            try:
                validated = ReportEntry.model_validate(entry)
            except ValidationError as e:
                logger.warning(f"Bad value found in queue, skipping: {entry!r} ({e})")
                continue
            backlog.append(ReportRecord.from_entry(validated.funds, validated.rep, validated.subject))

        self._backlog = backlog
        return len(backlog)

    def load(self, node: dict[str, Any]) -> int:
        """Restore the backlog from a scenario node.

        A node without a queue container yields an empty backlog and gets an
        empty container added.
        """
        if QUEUE_NODE not in node:
            logger.info("No queue to load")
            node[QUEUE_NODE] = []
            self._backlog = []
            return 0

        entries = node[QUEUE_NODE]
        if not isinstance(entries, list):
            logger.warning(f"Queue container is not a list, ignoring: {entries!r}")
            entries = None

        loaded = self.deserialize(entries)
        logger.info(f"Loaded {loaded} records")
        return loaded

    def save(self, node: dict[str, Any]) -> None:
        """Write the backlog into a scenario node, replacing any previous queue.

        If the entries cannot be produced an empty container is written
        instead of a partial one.
        """
        try:
            entries = self.serialize()
        except Exception:
            logger.exception("Error while saving the reward queue, writing an empty queue")
            node[QUEUE_NODE] = []
            return

        node[QUEUE_NODE] = entries
        logger.info(f"Saved {len(entries)} records")
