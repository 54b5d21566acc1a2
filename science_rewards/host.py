"""In-process host collaborators.

Lightweight implementations of the collaborator protocols, used by the
command-line tool to drive the batching core without a game host and by the
test suite as doubles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from science_rewards.protocols import Notification, ScienceHandler, TransactionReason

logger = logging.getLogger(__name__)


class SimulatedClock:
    """Manually advanced time source.

    Usage:
        clock = SimulatedClock()
        timer = OneShotTimer(callback, interval=1.0, clock=clock)
        clock.advance(1.1)
    """

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError(f"cannot move the clock backwards by {seconds}")
        self.now += seconds
        return self.now

    def advance_to(self, now: float) -> float:
        """Set the time to an absolute reading, never moving backwards."""
        if now < self.now:
            raise ValueError(f"cannot move the clock back from {self.now} to {now}")
        self.now = now
        return self.now


class EventBus:
    """Science event source with explicit subscribe/unsubscribe."""

    def __init__(self) -> None:
        self._handlers: list[ScienceHandler] = []

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: ScienceHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: ScienceHandler) -> None:
        """Remove a handler.

        Raises:
            ValueError: If the handler was never subscribed
        """
        self._handlers.remove(handler)

    def emit(
        self,
        science: float,
        subject: str,
        vessel: Any = None,
        transmitted: bool = False,
    ) -> None:
        """Deliver a science-received event to every handler."""
        for handler in list(self._handlers):
            handler(science, subject, vessel, transmitted)


@dataclass
class LedgerEntry:
    """A single credit applied to the ledger."""

    kind: str  # "funds" or "reputation"
    amount: float
    reason: TransactionReason


@dataclass
class InMemoryLedger:
    """Ledger that keeps running balances and a credit history."""

    funds: float = 0.0
    reputation: float = 0.0
    entries: list[LedgerEntry] = field(default_factory=list)

    def add_funds(self, amount: float, reason: TransactionReason) -> None:
        self.funds += amount
        self.entries.append(LedgerEntry("funds", amount, reason))
        logger.debug(f"Ledger funds {amount:+.1f} ({reason.value})")

    def add_reputation(self, amount: float, reason: TransactionReason) -> None:
        self.reputation += amount
        self.entries.append(LedgerEntry("reputation", amount, reason))
        logger.debug(f"Ledger reputation {amount:+.1f} ({reason.value})")


class NotificationInbox:
    """Notification surface that records posted messages."""

    def __init__(self) -> None:
        self.messages: list[Notification] = []

    def post(self, notification: Notification) -> None:
        self.messages.append(notification)

    @property
    def last(self) -> Notification | None:
        return self.messages[-1] if self.messages else None

    def clear(self) -> None:
        self.messages.clear()
